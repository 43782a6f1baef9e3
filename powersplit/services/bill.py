"""Bill service for bill management and per-owner cost calculation."""

import logging

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from powersplit.core.config import settings
from powersplit.models.bill import Bill
from powersplit.models.meter_reading import MeterReading
from powersplit.models.owner import Owner
from powersplit.schemas.bill import BillCreate, BillUpdate
from powersplit.schemas.calculation import BillCalculation, BillSnapshot
from powersplit.services.calculation import AllocationError, allocate, allocate_for_period
from powersplit.services.meter_reading import (
    get_readings_for_property,
    reading_to_snapshot,
)
from powersplit.services.owner import get_owners_for_property, owner_to_snapshot
from powersplit.services.property import get_property

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"start_reading_id", "end_reading_id"})


def _check_reading_refs(
    db: Session,
    property_id: int,
    start_reading_id: int | None,
    end_reading_id: int | None,
) -> None:
    """Validate that referenced readings exist, belong to the property and are ordered."""
    if start_reading_id is None and end_reading_id is None:
        return

    readings: list[MeterReading] = []
    for reading_id in (start_reading_id, end_reading_id):
        reading = db.query(MeterReading).filter(MeterReading.id == reading_id).first()
        if not reading or reading.property_id != property_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Reading {reading_id} not found for property {property_id}",
            )
        readings.append(reading)

    start, end = readings
    if start.reading_date > end.reading_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start reading must not be dated after the end reading",
        )


def create_bill(db: Session, property_id: int, data: BillCreate) -> Bill:
    """Register a bill for a property."""
    get_property(db, property_id)
    _check_reading_refs(db, property_id, data.start_reading_id, data.end_reading_id)

    bill = Bill(property_id=property_id, **data.model_dump())
    db.add(bill)
    db.commit()
    db.refresh(bill)
    logger.info(
        "Created bill %d for property %d (%s to %s, total %s)",
        bill.id,
        property_id,
        bill.period_start,
        bill.period_end,
        bill.total_amount,
    )
    return bill


def get_bill(db: Session, bill_id: int) -> Bill:
    """Get a bill by ID."""
    bill = db.query(Bill).filter(Bill.id == bill_id).first()
    if not bill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bill not found",
        )
    return bill


def get_bills_for_property(db: Session, property_id: int) -> list[Bill]:
    """Get all bills of a property, latest period first."""
    return (
        db.query(Bill)
        .filter(Bill.property_id == property_id)
        .order_by(Bill.period_end.desc(), Bill.id.desc())
        .all()
    )


def update_bill(db: Session, bill_id: int, data: BillUpdate) -> Bill:
    """Update a bill, re-validating the merged record.

    Sending null reading references explicitly switches the bill to
    date-range lookup.
    """
    bill = get_bill(db, bill_id)

    changes = data.model_dump(exclude_unset=True)
    cleared = sorted(
        field
        for field, value in changes.items()
        if value is None and field not in NULLABLE_FIELDS
    )
    if cleared:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Fields cannot be null: {', '.join(cleared)}",
        )

    merged = BillSnapshot.model_validate(bill).model_dump(exclude={"id"})
    merged["start_reading_id"] = bill.start_reading_id
    merged["end_reading_id"] = bill.end_reading_id
    merged.update(changes)
    try:
        validated = BillCreate.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[error["msg"] for error in exc.errors()],
        ) from exc

    _check_reading_refs(
        db, bill.property_id, validated.start_reading_id, validated.end_reading_id
    )

    for field, value in validated.model_dump().items():
        setattr(bill, field, value)

    db.commit()
    db.refresh(bill)
    return bill


def delete_bill(db: Session, bill_id: int) -> None:
    """Delete a bill."""
    bill = get_bill(db, bill_id)
    property_id = bill.property_id
    db.delete(bill)
    db.commit()
    logger.info("Deleted bill %d from property %d", bill_id, property_id)


def _calculate(
    bill: Bill,
    owners: list[Owner],
    readings: list[MeterReading],
) -> BillCalculation:
    """Run the allocation engine for one bill.

    Raises:
        AllocationError: If the bill cannot be allocated.
    """
    bill_snapshot = BillSnapshot.model_validate(bill)
    owner_snapshots = [owner_to_snapshot(o) for o in owners]
    policy = settings.UNATTRIBUTED_COST_POLICY

    if bill.has_reading_refs():
        by_id = {r.id: r for r in readings}
        start = by_id.get(bill.start_reading_id)
        end = by_id.get(bill.end_reading_id)
        if start is None or end is None:
            raise AllocationError(f"Bill {bill.id} references readings that no longer exist")
        return allocate(
            bill_snapshot,
            reading_to_snapshot(start),
            reading_to_snapshot(end),
            owner_snapshots,
            policy,
        )

    return allocate_for_period(
        bill_snapshot,
        [reading_to_snapshot(r) for r in readings],
        owner_snapshots,
        policy,
    )


def calculate_bill(db: Session, bill_id: int) -> BillCalculation:
    """Compute the per-owner breakdown of a bill."""
    bill = get_bill(db, bill_id)
    owners = get_owners_for_property(db, bill.property_id)
    if not owners:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Property has no owners to split the bill among",
        )

    readings = get_readings_for_property(db, bill.property_id)
    try:
        return _calculate(bill, owners, readings)
    except AllocationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


def get_calculations_for_property(db: Session, property_id: int) -> list[BillCalculation]:
    """Compute the breakdown of every bill of a property, latest period first.

    Bills that cannot be allocated are skipped.
    """
    get_property(db, property_id)
    owners = get_owners_for_property(db, property_id)
    if not owners:
        return []

    readings = get_readings_for_property(db, property_id)
    calculations: list[BillCalculation] = []
    for bill in get_bills_for_property(db, property_id):
        try:
            calculations.append(_calculate(bill, owners, readings))
        except AllocationError as exc:
            logger.warning("Skipping bill %d of property %d: %s", bill.id, property_id, exc)
    return calculations
