"""Statistics routes for dashboards and trend charts."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from powersplit.core.config import settings
from powersplit.core.database import get_db
from powersplit.schemas.calculation import (
    MonthlyTotals,
    OwnerConsumptionStat,
    PeriodConsumption,
)
from powersplit.services import statistics as stats_service

router = APIRouter(prefix="/properties/{property_id}/stats", tags=["statistics"])


@router.get("/monthly", response_model=list[MonthlyTotals])
def get_monthly_totals(
    property_id: int,
    months: int = Query(
        settings.DEFAULT_STATS_MONTHS, ge=1, le=120, description="Number of months to return"
    ),
    db: Session = Depends(get_db),
) -> list[MonthlyTotals]:
    """Per-owner cost totals by month of the bill's period end, ending this month."""
    return stats_service.get_monthly_totals(db, property_id, months)


@router.get("/owners", response_model=list[OwnerConsumptionStat])
def get_owner_consumption(
    property_id: int,
    db: Session = Depends(get_db),
) -> list[OwnerConsumptionStat]:
    """Total billed consumption per owner."""
    return stats_service.get_owner_consumption(db, property_id)


@router.get("/consumption", response_model=PeriodConsumption)
def get_period_consumption(
    property_id: int,
    start_date: date = Query(..., description="First day of the range"),
    end_date: date = Query(..., description="Last day of the range"),
    db: Session = Depends(get_db),
) -> PeriodConsumption:
    """Total owner consumption between the first and last reading in a date range."""
    return stats_service.get_period_consumption(db, property_id, start_date, end_date)
