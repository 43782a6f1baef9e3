"""Expense allocation engine.

Pure functions that split one electricity bill among the owners of a
property: fixed costs are shared equally, the remaining (variable) cost is
charged proportionally to each owner's metered consumption.

Nothing here touches the database; callers pass snapshots in and get plain
result models back, so identical inputs always give identical outputs.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from powersplit.models.enums import DEFAULT_OWNER_COLOR, UnattributedCostPolicy
from powersplit.schemas.calculation import (
    BillCalculation,
    BillSnapshot,
    CalculatedExpense,
    MonthlyTotals,
    OwnerConsumptionStat,
    OwnerSnapshot,
    ReadingSnapshot,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class AllocationError(ValueError):
    """Input that the allocation engine cannot work with."""


class InsufficientReadingsError(AllocationError):
    """Fewer than two readings bound the requested period."""


def owner_consumption(
    owner_id: int,
    start_reading: ReadingSnapshot,
    end_reading: ReadingSnapshot,
) -> Decimal:
    """Consumption of one owner between two readings, clamped to 0.

    A drop in the cumulative value (meter replaced or reset, or readings
    passed in the wrong order) counts as no consumption.
    """
    delta = end_reading.value_for(owner_id) - start_reading.value_for(owner_id)
    return max(ZERO, delta)


def allocate(
    bill: BillSnapshot,
    start_reading: ReadingSnapshot,
    end_reading: ReadingSnapshot,
    owners: Sequence[OwnerSnapshot],
    policy: UnattributedCostPolicy = UnattributedCostPolicy.SPLIT_EQUALLY,
) -> BillCalculation:
    """Split a bill among owners using two bracketing readings.

    Formula per owner:
        consumption_cost = consumption * (total_amount - fixed_costs) / sum(consumption)
        fixed_cost = fixed_costs / len(owners)

    When nobody consumed anything the variable cost has no one to be charged
    to; ``policy`` decides whether it is split equally or left unpaid.
    Expenses follow the order of ``owners``.
    """
    if not owners:
        raise AllocationError("Cannot allocate a bill without owners")

    consumptions = {
        owner.id: owner_consumption(owner.id, start_reading, end_reading) for owner in owners
    }
    total_consumption = sum(consumptions.values(), ZERO)

    variable_pool = bill.total_amount - bill.fixed_costs
    if variable_pool < 0:
        logger.warning(
            "Bill %s has fixed costs %s above total %s; variable cost treated as 0",
            bill.id,
            bill.fixed_costs,
            bill.total_amount,
        )
        variable_pool = ZERO

    owner_count = Decimal(len(owners))
    fixed_share = bill.fixed_costs / owner_count

    if total_consumption > 0:
        cost_per_kwh = variable_pool / total_consumption
        unattributed = ZERO
    else:
        cost_per_kwh = ZERO
        unattributed = variable_pool
        if unattributed > 0:
            logger.warning(
                "Bill %s: no consumption between readings %s and %s, "
                "variable cost %s is unattributed (policy=%s)",
                bill.id,
                start_reading.id,
                end_reading.id,
                unattributed,
                policy.value,
            )

    unattributed_share = (
        unattributed / owner_count if policy == UnattributedCostPolicy.SPLIT_EQUALLY else ZERO
    )

    expenses: list[CalculatedExpense] = []
    for owner in owners:
        consumption = consumptions[owner.id]
        consumption_cost = consumption * cost_per_kwh
        percentage = consumption * HUNDRED / total_consumption if total_consumption > 0 else ZERO
        expenses.append(
            CalculatedExpense(
                owner_id=owner.id,
                owner_name=owner.name,
                consumption=consumption,
                consumption_cost=consumption_cost,
                fixed_cost=fixed_share,
                unattributed_cost=unattributed_share,
                total_cost=consumption_cost + fixed_share + unattributed_share,
                percentage=percentage,
            )
        )

    logger.debug(
        "Allocated bill %s: %s kWh across %d owners at %s/kWh",
        bill.id,
        total_consumption,
        len(owners),
        cost_per_kwh,
    )

    return BillCalculation(
        bill_id=bill.id,
        bill_date=bill.bill_date,
        period_start=bill.period_start,
        period_end=bill.period_end,
        total_amount=bill.total_amount,
        cost_per_kwh=cost_per_kwh,
        total_owner_consumption=total_consumption,
        unattributed_cost=unattributed,
        expenses=expenses,
    )


def readings_in_period(
    readings: Iterable[ReadingSnapshot],
    period_start: date,
    period_end: date,
) -> list[ReadingSnapshot]:
    """Readings dated inside [period_start, period_end], oldest first."""
    return sorted(
        (r for r in readings if period_start <= r.reading_date <= period_end),
        key=lambda r: r.reading_date,
    )


def allocate_for_period(
    bill: BillSnapshot,
    readings: Iterable[ReadingSnapshot],
    owners: Sequence[OwnerSnapshot],
    policy: UnattributedCostPolicy = UnattributedCostPolicy.SPLIT_EQUALLY,
) -> BillCalculation:
    """Allocate a bill between the first and last reading of its period.

    Raises:
        InsufficientReadingsError: If fewer than two readings fall in the period.
    """
    in_period = readings_in_period(readings, bill.period_start, bill.period_end)
    if len(in_period) < 2:
        raise InsufficientReadingsError(
            f"At least two readings are required between {bill.period_start.isoformat()} "
            f"and {bill.period_end.isoformat()}, found {len(in_period)}"
        )
    return allocate(bill, in_period[0], in_period[-1], owners, policy)


def period_consumption(
    readings: Iterable[ReadingSnapshot],
    owners: Sequence[OwnerSnapshot],
) -> Decimal:
    """Total owner consumption between the earliest and latest reading.

    Returns 0 when fewer than two readings are given.
    """
    ordered = sorted(readings, key=lambda r: r.reading_date)
    if len(ordered) < 2:
        return ZERO
    first, last = ordered[0], ordered[-1]
    return sum((owner_consumption(owner.id, first, last) for owner in owners), ZERO)


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move (year, month) by ``offset`` months."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_key(day: date) -> str:
    """Bucket key for the calendar month of a date, e.g. "2024-03"."""
    return f"{day.year:04d}-{day.month:02d}"


def monthly_aggregate(
    calculations: Iterable[BillCalculation],
    months_back: int,
    today: date | None = None,
) -> list[MonthlyTotals]:
    """Sum each owner's total cost per calendar month of the period end.

    Produces exactly ``months_back`` buckets, oldest first, ending with the
    month of ``today``. Months without bills are returned with no totals.
    """
    if months_back < 1:
        raise AllocationError("months_back must be at least 1")

    today = today or date.today()
    buckets: dict[str, dict[str, Decimal]] = {}
    for offset in range(months_back - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        buckets[f"{year:04d}-{month:02d}"] = {}

    for calculation in calculations:
        totals = buckets.get(month_key(calculation.period_end))
        if totals is None:
            continue
        for expense in calculation.expenses:
            totals[expense.owner_name] = totals.get(expense.owner_name, ZERO) + expense.total_cost

    return [MonthlyTotals(month=key, totals=totals) for key, totals in buckets.items()]


def owner_consumption_stats(
    calculations: Iterable[BillCalculation],
    owners: Sequence[OwnerSnapshot] = (),
) -> list[OwnerConsumptionStat]:
    """Total consumption per owner name across calculations, first-seen order."""
    colors = {owner.id: owner.color for owner in owners}
    totals: dict[str, Decimal] = {}
    owner_colors: dict[str, str] = {}

    for calculation in calculations:
        for expense in calculation.expenses:
            if expense.owner_name not in totals:
                totals[expense.owner_name] = ZERO
                owner_colors[expense.owner_name] = colors.get(
                    expense.owner_id, DEFAULT_OWNER_COLOR
                )
            totals[expense.owner_name] += expense.consumption

    return [
        OwnerConsumptionStat(name=name, value=value, color=owner_colors[name])
        for name, value in totals.items()
    ]
