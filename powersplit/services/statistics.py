"""Dashboard statistics built on top of bill calculations."""

from datetime import date

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from powersplit.schemas.calculation import (
    MonthlyTotals,
    OwnerConsumptionStat,
    PeriodConsumption,
)
from powersplit.services.bill import get_calculations_for_property
from powersplit.services.calculation import (
    monthly_aggregate,
    owner_consumption_stats,
    period_consumption,
    readings_in_period,
)
from powersplit.services.meter_reading import get_readings_for_property, reading_to_snapshot
from powersplit.services.owner import get_owners_for_property, owner_to_snapshot
from powersplit.services.property import get_property


def get_monthly_totals(
    db: Session,
    property_id: int,
    months: int,
    today: date | None = None,
) -> list[MonthlyTotals]:
    """Per-owner cost totals for the last ``months`` calendar months."""
    calculations = get_calculations_for_property(db, property_id)
    return monthly_aggregate(calculations, months, today)


def get_owner_consumption(db: Session, property_id: int) -> list[OwnerConsumptionStat]:
    """Total billed consumption per owner across all bills."""
    calculations = get_calculations_for_property(db, property_id)
    owners = [owner_to_snapshot(o) for o in get_owners_for_property(db, property_id)]
    return owner_consumption_stats(calculations, owners)


def get_period_consumption(
    db: Session,
    property_id: int,
    start_date: date,
    end_date: date,
) -> PeriodConsumption:
    """Total consumption between the first and last reading inside a date range."""
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must not be before start date",
        )

    get_property(db, property_id)
    readings = readings_in_period(
        (reading_to_snapshot(r) for r in get_readings_for_property(db, property_id)),
        start_date,
        end_date,
    )
    owners = [owner_to_snapshot(o) for o in get_owners_for_property(db, property_id)]

    return PeriodConsumption(
        property_id=property_id,
        start_date=start_date,
        end_date=end_date,
        reading_count=len(readings),
        total_consumption=period_consumption(readings, owners),
    )
