"""MeterReading service for business logic."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from powersplit.models.bill import Bill
from powersplit.models.meter_reading import MeterReading
from powersplit.schemas.calculation import ReadingSnapshot
from powersplit.schemas.meter_reading import (
    MeterReadingCreate,
    MeterReadingResponse,
    MeterReadingUpdate,
)
from powersplit.services.owner import get_owners_for_property
from powersplit.services.property import get_property

logger = logging.getLogger(__name__)


def _check_owner_ids(db: Session, property_id: int, readings: dict[int, Decimal]) -> None:
    """Reject readings for owners that do not belong to the property."""
    known = {owner.id for owner in get_owners_for_property(db, property_id)}
    unknown = sorted(set(readings) - known)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Owners {unknown} do not belong to property {property_id}",
        )


def _bills_referencing(db: Session, reading_id: int) -> list[Bill]:
    return (
        db.query(Bill)
        .filter(or_(Bill.start_reading_id == reading_id, Bill.end_reading_id == reading_id))
        .order_by(Bill.id)
        .all()
    )


def _check_referencing_bills(db: Session, reading: MeterReading, new_date: date) -> None:
    """Reject a date change that would put a bill's start reading after its end reading."""
    for bill in _bills_referencing(db, reading.id):
        if bill.start_reading_id == reading.id:
            start_date, end_date = new_date, bill.end_reading.reading_date
        else:
            start_date, end_date = bill.start_reading.reading_date, new_date
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Reading is used by bill {bill.id}; moving it to {new_date.isoformat()} "
                    "would date the start reading after the end reading"
                ),
            )


def create_reading(
    db: Session,
    property_id: int,
    reading_data: MeterReadingCreate,
) -> MeterReading:
    """Record the meter values of a property's owners on one date."""
    get_property(db, property_id)
    _check_owner_ids(db, property_id, reading_data.readings)

    db_reading = MeterReading(
        property_id=property_id,
        reading_date=reading_data.reading_date,
        notes=reading_data.notes,
    )
    db_reading.set_readings(reading_data.readings)
    db.add(db_reading)
    db.commit()
    db.refresh(db_reading)
    logger.info(
        "Recorded reading %d for property %d on %s",
        db_reading.id,
        property_id,
        db_reading.reading_date,
    )
    return db_reading


def get_reading(db: Session, reading_id: int) -> MeterReading:
    """Get a meter reading by ID."""
    reading = db.query(MeterReading).filter(MeterReading.id == reading_id).first()
    if not reading:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meter reading not found",
        )
    return reading


def get_readings_for_property(db: Session, property_id: int) -> list[MeterReading]:
    """Get all readings of a property, oldest first."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.property_id == property_id)
        .order_by(MeterReading.reading_date, MeterReading.id)
        .all()
    )


def get_readings_history(
    db: Session,
    property_id: int,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[MeterReading], int]:
    """Get reading history for a property, newest first, with pagination."""
    query = db.query(MeterReading).filter(MeterReading.property_id == property_id)
    total = query.count()
    readings = (
        query.order_by(MeterReading.reading_date.desc(), MeterReading.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return readings, total


def update_reading(
    db: Session,
    reading_id: int,
    reading_data: MeterReadingUpdate,
) -> MeterReading:
    """Correct a meter reading."""
    reading = get_reading(db, reading_id)

    if reading_data.reading_date is not None:
        _check_referencing_bills(db, reading, reading_data.reading_date)
    if reading_data.readings is not None:
        _check_owner_ids(db, reading.property_id, reading_data.readings)
        reading.set_readings(reading_data.readings)
    if reading_data.reading_date is not None:
        reading.reading_date = reading_data.reading_date
    if reading_data.notes is not None:
        reading.notes = reading_data.notes

    db.commit()
    db.refresh(reading)
    return reading


def delete_reading(db: Session, reading_id: int) -> None:
    """Delete a meter reading that no bill refers to."""
    reading = get_reading(db, reading_id)

    referencing = _bills_referencing(db, reading_id)
    if referencing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Reading is used by bill {referencing[0].id} and cannot be deleted",
        )

    property_id = reading.property_id
    db.delete(reading)
    db.commit()
    logger.info("Deleted reading %d from property %d", reading_id, property_id)


def reading_to_response(reading: MeterReading) -> MeterReadingResponse:
    """Convert a MeterReading model to a response schema."""
    return MeterReadingResponse(
        id=reading.id,
        property_id=reading.property_id,
        reading_date=reading.reading_date,
        readings=reading.get_readings(),
        notes=reading.notes,
        created_at=reading.created_at,
    )


def reading_to_snapshot(reading: MeterReading) -> ReadingSnapshot:
    """Convert a MeterReading model to an engine snapshot."""
    return ReadingSnapshot(
        id=reading.id,
        reading_date=reading.reading_date,
        readings=reading.get_readings(),
    )
