"""Property service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from powersplit.models.property import Property
from powersplit.schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)


def create_property(db: Session, property_data: PropertyCreate) -> Property:
    """Create a new property."""
    db_property = Property(
        display_name=property_data.display_name,
        address=property_data.address,
    )
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    logger.info("Created property %d (%s)", db_property.id, db_property.display_name)
    return db_property


def get_property(db: Session, property_id: int) -> Property:
    """Get a property by ID."""
    db_property = db.query(Property).filter(Property.id == property_id).first()
    if not db_property:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return db_property


def get_properties(db: Session, skip: int = 0, limit: int = 100) -> list[Property]:
    """Get all properties with pagination."""
    return db.query(Property).order_by(Property.id).offset(skip).limit(limit).all()


def update_property(
    db: Session,
    property_id: int,
    property_data: PropertyUpdate,
) -> Property:
    """Update a property."""
    db_property = get_property(db, property_id)

    update_data = property_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_property, field, value)

    db.commit()
    db.refresh(db_property)
    return db_property
