"""MeterReading Pydantic schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator, model_validator


def _check_reading_values(v: dict[int, Decimal]) -> dict[int, Decimal]:
    for owner_id, value in v.items():
        if value < 0:
            raise ValueError(f"Reading for owner {owner_id} cannot be negative")
    return v


class MeterReadingCreate(BaseModel):
    """Schema for recording every owner's meter on one day."""

    reading_date: date
    readings: dict[int, Decimal]  # {owner_id: cumulative kWh}
    notes: str | None = None

    @field_validator("readings")
    @classmethod
    def validate_readings(cls, v: dict[int, Decimal]) -> dict[int, Decimal]:
        """Validate that at least one value is given and none is negative."""
        if not v:
            raise ValueError("Readings must not be empty")
        return _check_reading_values(v)


class MeterReadingUpdate(BaseModel):
    """Schema for correcting a meter reading."""

    reading_date: date | None = None
    readings: dict[int, Decimal] | None = None
    notes: str | None = None

    @field_validator("readings")
    @classmethod
    def validate_readings(cls, v: dict[int, Decimal] | None) -> dict[int, Decimal] | None:
        """Validate readings if provided."""
        if v is not None:
            if not v:
                raise ValueError("Readings must not be empty")
            _check_reading_values(v)
        return v

    @model_validator(mode="after")
    def check_at_least_one_field(self) -> "MeterReadingUpdate":
        """Ensure at least one field is provided for update."""
        if all(v is None for v in [self.reading_date, self.readings, self.notes]):
            raise ValueError("At least one field must be provided for update")
        return self


class MeterReadingResponse(BaseModel):
    """Schema for meter reading response."""

    id: int
    property_id: int
    reading_date: date
    readings: dict[int, Decimal]
    notes: str | None
    created_at: datetime


class MeterReadingHistory(BaseModel):
    """Schema for paginated meter reading history."""

    property_id: int
    readings: list[MeterReadingResponse]
    total: int
    limit: int
    offset: int
