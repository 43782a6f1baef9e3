"""Bill Pydantic schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class BillCreate(BaseModel):
    """Schema for registering a utility bill.

    Either both reading references are given, or neither; without them the
    readings inside [period_start, period_end] bound the period.
    """

    bill_date: date
    total_amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    fixed_costs: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    total_consumption: Decimal = Field(ge=0, max_digits=12, decimal_places=3)
    period_start: date
    period_end: date
    start_reading_id: int | None = None
    end_reading_id: int | None = None

    @model_validator(mode="after")
    def check_consistency(self) -> "BillCreate":
        """Validate amounts, period ordering and reading references."""
        if self.fixed_costs > self.total_amount:
            raise ValueError("Fixed costs cannot exceed the total amount")
        if self.period_start > self.period_end:
            raise ValueError("Period end must not be before period start")
        if (self.start_reading_id is None) != (self.end_reading_id is None):
            raise ValueError("Start and end readings must be given together")
        if self.start_reading_id is not None and self.start_reading_id == self.end_reading_id:
            raise ValueError("Start and end readings must be different")
        return self


class BillUpdate(BaseModel):
    """Schema for updating a bill.

    Cross-field rules are checked by the service against the merged record.
    """

    bill_date: date | None = None
    total_amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    fixed_costs: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    total_consumption: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=3)
    period_start: date | None = None
    period_end: date | None = None
    start_reading_id: int | None = None
    end_reading_id: int | None = None


class BillResponse(BaseModel):
    """Schema for bill response."""

    id: int
    property_id: int
    bill_date: date
    total_amount: Decimal
    fixed_costs: Decimal
    total_consumption: Decimal
    period_start: date
    period_end: date
    start_reading_id: int | None
    end_reading_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
