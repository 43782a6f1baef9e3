"""Property API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from powersplit.core.database import get_db
from powersplit.schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from powersplit.services import property as property_service

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post(
    "/",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
):
    """Create a new property."""
    return property_service.create_property(db, property_data)


@router.get("/", response_model=list[PropertyResponse])
def list_properties(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List all properties."""
    return property_service.get_properties(db, skip, limit)


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_service.get_property(db, property_id)


@router.patch("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
):
    """Update a property."""
    return property_service.update_property(db, property_id, property_data)
