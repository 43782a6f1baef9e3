"""Owner service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from powersplit.models.bill import Bill
from powersplit.models.meter_reading import MeterReading
from powersplit.models.owner import Owner
from powersplit.schemas.calculation import OwnerSnapshot
from powersplit.schemas.owner import OwnerCreate, OwnerUpdate
from powersplit.services.property import get_property

logger = logging.getLogger(__name__)


def _get_owner_by_name(db: Session, property_id: int, name: str) -> Owner | None:
    return (
        db.query(Owner)
        .filter(
            Owner.property_id == property_id,
            Owner.name == name,
        )
        .first()
    )


def create_owner(db: Session, property_id: int, owner_data: OwnerCreate) -> Owner:
    """Add an owner to a property."""
    get_property(db, property_id)

    if _get_owner_by_name(db, property_id, owner_data.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Owner with name '{owner_data.name}' already exists for this property",
        )

    owner = Owner(
        property_id=property_id,
        name=owner_data.name,
        color=owner_data.color,
    )
    db.add(owner)
    db.commit()
    db.refresh(owner)
    logger.info("Added owner %d (%s) to property %d", owner.id, owner.name, property_id)
    return owner


def get_owner(db: Session, owner_id: int) -> Owner:
    """Get an owner by ID."""
    owner = db.query(Owner).filter(Owner.id == owner_id).first()
    if not owner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Owner not found",
        )
    return owner


def get_owners_for_property(db: Session, property_id: int) -> list[Owner]:
    """Get all owners of a property in creation order."""
    return db.query(Owner).filter(Owner.property_id == property_id).order_by(Owner.id).all()


def update_owner(db: Session, owner_id: int, owner_data: OwnerUpdate) -> Owner:
    """Rename or recolor an owner."""
    owner = get_owner(db, owner_id)

    if owner_data.name is not None:
        name = owner_data.name.strip()
        existing = _get_owner_by_name(db, owner.property_id, name)
        if existing and existing.id != owner_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Owner with name '{name}' already exists for this property",
            )
        owner.name = name

    if owner_data.color is not None:
        owner.color = owner_data.color

    db.commit()
    db.refresh(owner)
    return owner


def _billed_reading_id(db: Session, owner: Owner) -> int | None:
    """First reading carrying a value for the owner that some bill is computed from."""
    bills = db.query(Bill).filter(Bill.property_id == owner.property_id).all()
    if not bills:
        return None

    readings = (
        db.query(MeterReading)
        .filter(MeterReading.property_id == owner.property_id)
        .order_by(MeterReading.reading_date, MeterReading.id)
        .all()
    )
    for reading in readings:
        if owner.id not in reading.get_readings():
            continue
        for bill in bills:
            if reading.id in (bill.start_reading_id, bill.end_reading_id):
                return reading.id
            if bill.period_start <= reading.reading_date <= bill.period_end:
                return reading.id
    return None


def delete_owner(db: Session, owner_id: int) -> None:
    """Remove an owner whose meter values no bill depends on."""
    owner = get_owner(db, owner_id)

    reading_id = _billed_reading_id(db, owner)
    if reading_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Owner has billed consumption in reading {reading_id} and cannot be deleted"
            ),
        )

    property_id = owner.property_id
    db.delete(owner)
    db.commit()
    logger.info("Deleted owner %d from property %d", owner_id, property_id)


def owner_to_snapshot(owner: Owner) -> OwnerSnapshot:
    """Convert an Owner model to an engine snapshot."""
    return OwnerSnapshot.model_validate(owner)
