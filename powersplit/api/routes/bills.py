"""Bill API routes, including the per-owner cost calculation."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from powersplit.core.database import get_db
from powersplit.schemas.bill import BillCreate, BillResponse, BillUpdate
from powersplit.schemas.calculation import BillCalculation
from powersplit.services import bill as bill_service
from powersplit.services.property import get_property

router = APIRouter(tags=["bills"])


@router.post(
    "/properties/{property_id}/bills",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bill(
    property_id: int,
    data: BillCreate,
    db: Session = Depends(get_db),
):
    """Register a utility bill for a property.

    Give both ``start_reading_id`` and ``end_reading_id`` to bound the period
    explicitly; omit them to use the readings dated within the period.
    """
    return bill_service.create_bill(db, property_id, data)


@router.get("/properties/{property_id}/bills", response_model=list[BillResponse])
def list_bills(
    property_id: int,
    db: Session = Depends(get_db),
):
    """List the bills of a property, latest period first."""
    get_property(db, property_id)
    return bill_service.get_bills_for_property(db, property_id)


@router.get("/bills/{bill_id}", response_model=BillResponse)
def get_bill(
    bill_id: int,
    db: Session = Depends(get_db),
):
    """Get a bill by ID."""
    return bill_service.get_bill(db, bill_id)


@router.patch("/bills/{bill_id}", response_model=BillResponse)
def update_bill(
    bill_id: int,
    data: BillUpdate,
    db: Session = Depends(get_db),
):
    """Update a bill."""
    return bill_service.update_bill(db, bill_id, data)


@router.delete("/bills/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(
    bill_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete a bill."""
    bill_service.delete_bill(db, bill_id)


@router.get("/bills/{bill_id}/calculation", response_model=BillCalculation)
def get_bill_calculation(
    bill_id: int,
    db: Session = Depends(get_db),
) -> BillCalculation:
    """Split a bill among the property's owners.

    Fixed costs are shared equally; the rest is charged per kWh:

        cost_per_kwh = (total_amount - fixed_costs) / sum(owner consumption)
    """
    return bill_service.calculate_bill(db, bill_id)


@router.get(
    "/properties/{property_id}/calculations",
    response_model=list[BillCalculation],
)
def list_calculations(
    property_id: int,
    db: Session = Depends(get_db),
) -> list[BillCalculation]:
    """Breakdown of every bill of a property that can be calculated."""
    return bill_service.get_calculations_for_property(db, property_id)
