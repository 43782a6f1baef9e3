"""Owner API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from powersplit.core.database import get_db
from powersplit.schemas.owner import OwnerCreate, OwnerResponse, OwnerUpdate
from powersplit.services import owner as owner_service
from powersplit.services.property import get_property

router = APIRouter(tags=["owners"])


@router.post(
    "/properties/{property_id}/owners",
    response_model=OwnerResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_owner(
    property_id: int,
    owner_data: OwnerCreate,
    db: Session = Depends(get_db),
):
    """Add a co-owner to a property."""
    return owner_service.create_owner(db, property_id, owner_data)


@router.get("/properties/{property_id}/owners", response_model=list[OwnerResponse])
def list_owners(
    property_id: int,
    db: Session = Depends(get_db),
):
    """List the owners of a property."""
    get_property(db, property_id)
    return owner_service.get_owners_for_property(db, property_id)


@router.get("/owners/{owner_id}", response_model=OwnerResponse)
def get_owner(
    owner_id: int,
    db: Session = Depends(get_db),
):
    """Get an owner by ID."""
    return owner_service.get_owner(db, owner_id)


@router.patch("/owners/{owner_id}", response_model=OwnerResponse)
def update_owner(
    owner_id: int,
    owner_data: OwnerUpdate,
    db: Session = Depends(get_db),
):
    """Rename or recolor an owner."""
    return owner_service.update_owner(db, owner_id, owner_data)


@router.delete("/owners/{owner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_owner(
    owner_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Remove an owner from its property."""
    owner_service.delete_owner(db, owner_id)
