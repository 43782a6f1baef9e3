"""Schemas consumed and produced by the expense allocation engine."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from powersplit.models.enums import DEFAULT_OWNER_COLOR

# Engine inputs: immutable snapshots of persisted records


class OwnerSnapshot(BaseModel):
    """An owner as seen by the allocation engine."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    color: str = DEFAULT_OWNER_COLOR


class ReadingSnapshot(BaseModel):
    """Cumulative meter values of all owners on one date."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    reading_date: date
    readings: dict[int, Decimal] = Field(default_factory=dict)

    def value_for(self, owner_id: int) -> Decimal:
        """Meter value for an owner; owners missing from the map read as 0."""
        return self.readings.get(owner_id, Decimal("0"))


class BillSnapshot(BaseModel):
    """The amounts and period of a bill to allocate."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int | None = None
    bill_date: date | None = None
    total_amount: Decimal
    fixed_costs: Decimal
    total_consumption: Decimal = Decimal("0")  # Informational only
    period_start: date
    period_end: date


# Engine outputs


class CalculatedExpense(BaseModel):
    """One owner's share of a bill."""

    owner_id: int
    owner_name: str
    consumption: Decimal  # kWh used in the period, never negative
    consumption_cost: Decimal  # consumption * cost_per_kwh
    fixed_cost: Decimal  # Equal share of the fixed costs
    unattributed_cost: Decimal = Decimal("0")  # Equal share of unmetered variable cost
    total_cost: Decimal
    percentage: Decimal  # Share of total owner consumption (0-100)


class BillCalculation(BaseModel):
    """Per-owner breakdown of one bill, recomputable from its inputs."""

    bill_id: int | None
    bill_date: date | None
    period_start: date
    period_end: date
    total_amount: Decimal
    cost_per_kwh: Decimal
    total_owner_consumption: Decimal
    unattributed_cost: Decimal  # Variable cost with no consumption to charge it to
    expenses: list[CalculatedExpense]


# Statistics


class MonthlyTotals(BaseModel):
    """Sum of total costs per owner name for one calendar month."""

    month: str  # "YYYY-MM"
    totals: dict[str, Decimal]


class OwnerConsumptionStat(BaseModel):
    """Total consumption of one owner across calculations."""

    name: str
    value: Decimal
    color: str


class PeriodConsumption(BaseModel):
    """Total owner consumption between the first and last reading of a range."""

    property_id: int
    start_date: date
    end_date: date
    reading_count: int
    total_consumption: Decimal
