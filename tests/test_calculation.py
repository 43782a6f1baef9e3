"""Unit tests for the expense allocation engine."""

from datetime import date
from decimal import Decimal

import pytest

from powersplit.models.enums import UnattributedCostPolicy
from powersplit.schemas.calculation import (
    BillCalculation,
    BillSnapshot,
    OwnerSnapshot,
    ReadingSnapshot,
)
from powersplit.services.calculation import (
    AllocationError,
    InsufficientReadingsError,
    allocate,
    allocate_for_period,
    monthly_aggregate,
    owner_consumption_stats,
    period_consumption,
    shift_month,
)

EPSILON = Decimal("1e-20")

A = OwnerSnapshot(id=1, name="Anna", color="#2563EB")
B = OwnerSnapshot(id=2, name="Bruno", color="#16A34A")
C = OwnerSnapshot(id=3, name="Carla", color="#DC2626")


def _reading(reading_date: date, values: dict[int, str], reading_id: int | None = None):
    return ReadingSnapshot(
        id=reading_id,
        reading_date=reading_date,
        readings={k: Decimal(v) for k, v in values.items()},
    )


def _bill(
    total: str,
    fixed: str,
    period_start: date = date(2024, 1, 1),
    period_end: date = date(2024, 2, 1),
) -> BillSnapshot:
    return BillSnapshot(
        id=7,
        bill_date=period_end,
        total_amount=Decimal(total),
        fixed_costs=Decimal(fixed),
        total_consumption=Decimal("999"),
        period_start=period_start,
        period_end=period_end,
    )


START = _reading(date(2024, 1, 1), {1: "100", 2: "200", 3: "150"}, reading_id=10)
END = _reading(date(2024, 2, 1), {1: "150", 2: "250", 3: "200"}, reading_id=11)


def _sum_total_cost(calculation: BillCalculation) -> Decimal:
    return sum((e.total_cost for e in calculation.expenses), Decimal("0"))


class TestAllocateScenarios:
    """The worked examples of a bill split."""

    def test_equal_consumption(self) -> None:
        """Three owners using 50 kWh each share 150 with 30 fixed."""
        result = allocate(_bill("150", "30"), START, END, [A, B, C])

        assert result.cost_per_kwh == Decimal("0.8")
        assert result.total_owner_consumption == Decimal("150")
        for expense in result.expenses:
            assert expense.consumption == Decimal("50")
            assert expense.consumption_cost == Decimal("40")
            assert expense.fixed_cost == Decimal("10")
            assert expense.total_cost == Decimal("50")
            assert abs(expense.percentage - Decimal("100") / 3) < EPSILON
        assert _sum_total_cost(result) == Decimal("150")

    def test_fixed_costs_equal_total(self) -> None:
        """With no variable cost only the fixed share is charged."""
        result = allocate(_bill("30", "30"), START, END, [A, B, C])

        assert result.cost_per_kwh == 0
        for expense in result.expenses:
            assert expense.consumption_cost == 0
            assert expense.total_cost == Decimal("10")
        assert _sum_total_cost(result) == Decimal("30")
        assert result.unattributed_cost == 0

    def test_identical_readings(self) -> None:
        """No consumption means only the equal fixed share."""
        reading = _reading(date(2024, 1, 1), {1: "100", 2: "200"})
        later = _reading(date(2024, 2, 1), {1: "100", 2: "200"})

        result = allocate(_bill("40", "40"), reading, later, [A, B])

        assert result.cost_per_kwh == 0
        for expense in result.expenses:
            assert expense.percentage == 0
            assert expense.consumption_cost == 0
            assert expense.fixed_cost == Decimal("20")
            assert expense.total_cost == Decimal("20")

    def test_owner_missing_from_readings(self) -> None:
        """An owner absent from both readings consumes nothing."""
        start = _reading(date(2024, 1, 1), {1: "100", 2: "200"})
        end = _reading(date(2024, 2, 1), {1: "150", 2: "250"})

        result = allocate(_bill("130", "30"), start, end, [A, B, C])

        assert result.cost_per_kwh == Decimal("1")
        anna, bruno, carla = result.expenses
        assert anna.total_cost == Decimal("60")
        assert bruno.total_cost == Decimal("60")
        assert carla.consumption == 0
        assert carla.percentage == 0
        assert carla.total_cost == Decimal("10")
        assert _sum_total_cost(result) == Decimal("130")

    def test_meter_reset_floors_to_zero(self) -> None:
        """A lower end value (meter replaced) is no consumption, not negative."""
        start = _reading(date(2024, 1, 1), {1: "100", 2: "200"})
        end = _reading(date(2024, 2, 1), {1: "150", 2: "180"})

        result = allocate(_bill("70", "20"), start, end, [A, B])

        anna, bruno = result.expenses
        assert bruno.consumption == 0
        assert bruno.consumption_cost == 0
        assert result.total_owner_consumption == Decimal("50")
        assert anna.percentage == Decimal("100")
        assert anna.total_cost == Decimal("60")
        assert bruno.total_cost == Decimal("10")


class TestAllocateProperties:
    """Invariants that hold for every allocation."""

    def test_conservation_with_uneven_consumption(self) -> None:
        """The shares add back up to the bill total."""
        start = _reading(date(2024, 1, 1), {1: "0", 2: "10.5", 3: "1000"})
        end = _reading(date(2024, 2, 1), {1: "7", 2: "21.5", 3: "1013"})

        result = allocate(_bill("100.37", "12.50"), start, end, [A, B, C])

        assert abs(_sum_total_cost(result) - Decimal("100.37")) < EPSILON
        percentages = sum((e.percentage for e in result.expenses), Decimal("0"))
        assert abs(percentages - Decimal("100")) < EPSILON

    def test_non_negative_for_swapped_readings(self) -> None:
        """Readings passed in reverse order never produce negative values."""
        result = allocate(_bill("150", "30"), END, START, [A, B, C])

        for expense in result.expenses:
            assert expense.consumption >= 0
            assert expense.consumption_cost >= 0
            assert expense.fixed_cost >= 0
            assert expense.total_cost >= 0

    def test_zero_consumption_guard(self) -> None:
        """Zero total consumption gives zero rate, costs and percentages."""
        result = allocate(_bill("30", "30"), START, START, [A, B, C])

        assert result.cost_per_kwh == 0
        assert all(e.consumption_cost == 0 for e in result.expenses)
        assert all(e.percentage == 0 for e in result.expenses)

    def test_idempotent(self) -> None:
        """Same inputs, same output."""
        first = allocate(_bill("100.37", "12.50"), START, END, [A, B, C])
        second = allocate(_bill("100.37", "12.50"), START, END, [A, B, C])

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_inputs_not_modified(self) -> None:
        """The engine leaves its inputs untouched."""
        start_values = dict(START.readings)
        end_values = dict(END.readings)

        allocate(_bill("150", "30"), START, END, [A, B, C])

        assert START.readings == start_values
        assert END.readings == end_values

    def test_missing_key_same_as_zero(self) -> None:
        """An owner missing from a reading behaves like an explicit 0."""
        missing = _reading(date(2024, 1, 1), {1: "100"})
        explicit = _reading(date(2024, 1, 1), {1: "100", 2: "0"})
        end = _reading(date(2024, 2, 1), {1: "130", 2: "20"})

        implicit_result = allocate(_bill("80", "10"), missing, end, [A, B])
        explicit_result = allocate(_bill("80", "10"), explicit, end, [A, B])

        assert implicit_result == explicit_result

    def test_expenses_follow_owner_order(self) -> None:
        """Output order is the order owners are given in."""
        result = allocate(_bill("150", "30"), START, END, [C, A, B])

        assert [e.owner_id for e in result.expenses] == [3, 1, 2]
        assert [e.owner_name for e in result.expenses] == ["Carla", "Anna", "Bruno"]

    def test_carries_bill_metadata(self) -> None:
        """The calculation reports the bill's id, amount and period."""
        result = allocate(_bill("150", "30"), START, END, [A])

        assert result.bill_id == 7
        assert result.total_amount == Decimal("150")
        assert result.period_start == date(2024, 1, 1)
        assert result.period_end == date(2024, 2, 1)

    def test_no_owners_rejected(self) -> None:
        """A bill cannot be split among nobody."""
        with pytest.raises(AllocationError, match="without owners"):
            allocate(_bill("150", "30"), START, END, [])


class TestUnattributedCost:
    """Variable cost with no metered consumption to charge it to."""

    def test_split_equally_by_default(self) -> None:
        """The variable pool is shared like the fixed costs."""
        result = allocate(_bill("90", "30"), START, START, [A, B, C])

        assert result.unattributed_cost == Decimal("60")
        for expense in result.expenses:
            assert expense.consumption_cost == 0
            assert expense.fixed_cost == Decimal("10")
            assert expense.unattributed_cost == Decimal("20")
            assert expense.total_cost == Decimal("30")
        assert _sum_total_cost(result) == Decimal("90")

    def test_drop_policy_charges_nobody(self) -> None:
        """The legacy policy reports the pool but leaves it unpaid."""
        result = allocate(
            _bill("90", "30"), START, START, [A, B, C], UnattributedCostPolicy.DROP
        )

        assert result.unattributed_cost == Decimal("60")
        for expense in result.expenses:
            assert expense.unattributed_cost == 0
            assert expense.total_cost == Decimal("10")
        assert _sum_total_cost(result) == Decimal("30")

    def test_no_unattributed_cost_with_consumption(self) -> None:
        """With consumption everything is attributed, whatever the policy."""
        result = allocate(_bill("150", "30"), START, END, [A, B, C], UnattributedCostPolicy.DROP)

        assert result.unattributed_cost == 0
        assert _sum_total_cost(result) == Decimal("150")


class TestAllocateForPeriod:
    """Allocation from the readings inside a bill's date range."""

    def test_uses_first_and_last_reading_in_period(self) -> None:
        """Readings outside the period are ignored; order does not matter."""
        readings = [
            _reading(date(2024, 2, 1), {1: "150", 2: "250"}),
            _reading(date(2023, 12, 1), {1: "0", 2: "0"}),
            _reading(date(2024, 1, 15), {1: "120", 2: "230"}),
            _reading(date(2024, 1, 1), {1: "100", 2: "200"}),
            _reading(date(2024, 3, 1), {1: "999", 2: "999"}),
        ]

        result = allocate_for_period(_bill("110", "10"), readings, [A, B])

        assert result.total_owner_consumption == Decimal("100")
        assert [e.consumption for e in result.expenses] == [Decimal("50"), Decimal("50")]

    def test_period_bounds_are_inclusive(self) -> None:
        """Readings on the first and last day of the period count."""
        readings = [
            _reading(date(2024, 1, 1), {1: "10"}),
            _reading(date(2024, 2, 1), {1: "20"}),
        ]

        result = allocate_for_period(_bill("20", "10"), readings, [A])

        assert result.expenses[0].consumption == Decimal("10")

    @pytest.mark.parametrize("count", [0, 1])
    def test_insufficient_readings(self, count: int) -> None:
        """Fewer than two readings in the period is a validation error."""
        readings = [_reading(date(2024, 1, 10), {1: "10"})][:count]
        readings.append(_reading(date(2024, 6, 1), {1: "50"}))

        with pytest.raises(InsufficientReadingsError, match="At least two readings"):
            allocate_for_period(_bill("20", "10"), readings, [A])


class TestPeriodConsumption:
    """Total consumption between the earliest and latest reading."""

    def test_sums_owner_deltas(self) -> None:
        """Each owner's delta counts, drops count as zero."""
        readings = [
            _reading(date(2024, 3, 1), {1: "180", 2: "150"}),
            _reading(date(2024, 1, 1), {1: "100", 2: "200"}),
            _reading(date(2024, 2, 1), {1: "140", 2: "210"}),
        ]

        assert period_consumption(readings, [A, B]) == Decimal("80")

    def test_fewer_than_two_readings(self) -> None:
        """A single reading has no period."""
        assert period_consumption([START], [A, B]) == 0
        assert period_consumption([], [A, B]) == 0


def _calculation(period_end: date, costs: dict[OwnerSnapshot, str]) -> BillCalculation:
    start = _reading(date(2000, 1, 1), {})
    end = _reading(period_end, {owner.id: "1" for owner in costs})
    owners = list(costs)
    total = sum((Decimal(v) for v in costs.values()), Decimal("0"))
    bill = _bill(str(total), "0", period_start=date(2000, 1, 1), period_end=period_end)
    calculation = allocate(bill, start, end, owners)
    # Override the split so each owner pays exactly what the test asks for
    for expense, value in zip(calculation.expenses, costs.values()):
        expense.total_cost = Decimal(value)
    return calculation


class TestMonthlyAggregate:
    """Per-owner cost totals bucketed by month."""

    def test_exact_bucket_count_ending_this_month(self) -> None:
        """Empty months are kept and the last bucket is today's month."""
        result = monthly_aggregate([], 12, today=date(2024, 3, 15))

        assert len(result) == 12
        assert result[0].month == "2023-04"
        assert result[-1].month == "2024-03"
        assert all(bucket.totals == {} for bucket in result)

    def test_sums_by_period_end_month(self) -> None:
        """Bills ending in the same month add up per owner name."""
        calculations = [
            _calculation(date(2024, 2, 1), {A: "10", B: "5"}),
            _calculation(date(2024, 2, 28), {A: "2.5"}),
            _calculation(date(2024, 3, 3), {B: "7"}),
            _calculation(date(2023, 1, 1), {A: "100"}),  # Outside the window
        ]

        result = monthly_aggregate(calculations, 3, today=date(2024, 3, 31))

        assert [bucket.month for bucket in result] == ["2024-01", "2024-02", "2024-03"]
        assert result[0].totals == {}
        assert result[1].totals == {"Anna": Decimal("12.5"), "Bruno": Decimal("5")}
        assert result[2].totals == {"Bruno": Decimal("7")}

    def test_invalid_month_count(self) -> None:
        """At least one month must be requested."""
        with pytest.raises(AllocationError):
            monthly_aggregate([], 0)

    @pytest.mark.parametrize(
        ("year", "month", "offset", "expected"),
        [
            (2024, 1, -1, (2023, 12)),
            (2024, 3, -14, (2023, 1)),
            (2023, 12, 1, (2024, 1)),
            (2024, 6, 0, (2024, 6)),
        ],
    )
    def test_shift_month(
        self, year: int, month: int, offset: int, expected: tuple[int, int]
    ) -> None:
        """Month arithmetic wraps across years."""
        assert shift_month(year, month, offset) == expected


class TestOwnerConsumptionStats:
    """Total consumption per owner across calculations."""

    def test_totals_and_colors(self) -> None:
        """Consumption is summed per owner and colored from the owner list."""
        first = allocate(_bill("150", "30"), START, END, [A, B])
        second = allocate(_bill("150", "30"), START, END, [A, C])

        stats = owner_consumption_stats([first, second], [A, B])

        assert [(s.name, s.value, s.color) for s in stats] == [
            ("Anna", Decimal("100"), "#2563EB"),
            ("Bruno", Decimal("50"), "#16A34A"),
            ("Carla", Decimal("50"), "#6B7280"),  # Unknown owner gets the default color
        ]

    def test_no_calculations(self) -> None:
        """No bills, no stats."""
        assert owner_consumption_stats([]) == []
