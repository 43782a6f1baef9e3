"""MeterReading API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from powersplit.core.database import get_db
from powersplit.schemas.meter_reading import (
    MeterReadingCreate,
    MeterReadingHistory,
    MeterReadingResponse,
    MeterReadingUpdate,
)
from powersplit.services import meter_reading as reading_service
from powersplit.services.property import get_property

router = APIRouter(tags=["meter-readings"])


@router.post(
    "/properties/{property_id}/readings",
    response_model=MeterReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    property_id: int,
    reading_data: MeterReadingCreate,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Record every owner's meter value on one date."""
    reading = reading_service.create_reading(db, property_id, reading_data)
    return reading_service.reading_to_response(reading)


@router.get("/properties/{property_id}/readings", response_model=MeterReadingHistory)
def list_readings(
    property_id: int,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> MeterReadingHistory:
    """Get the reading history of a property, newest first."""
    get_property(db, property_id)
    readings, total = reading_service.get_readings_history(db, property_id, limit, offset)
    return MeterReadingHistory(
        property_id=property_id,
        readings=[reading_service.reading_to_response(r) for r in readings],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/readings/{reading_id}", response_model=MeterReadingResponse)
def get_reading(
    reading_id: int,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Get a meter reading by ID."""
    return reading_service.reading_to_response(reading_service.get_reading(db, reading_id))


@router.patch("/readings/{reading_id}", response_model=MeterReadingResponse)
def update_reading(
    reading_id: int,
    reading_data: MeterReadingUpdate,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Correct a meter reading."""
    reading = reading_service.update_reading(db, reading_id, reading_data)
    return reading_service.reading_to_response(reading)


@router.delete("/readings/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(
    reading_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete a meter reading that no bill refers to."""
    reading_service.delete_reading(db, reading_id)
