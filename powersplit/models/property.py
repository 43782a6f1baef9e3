"""Property database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from powersplit.core.database import Base

if TYPE_CHECKING:
    from powersplit.models.bill import Bill
    from powersplit.models.meter_reading import MeterReading
    from powersplit.models.owner import Owner


class Property(Base):
    """Property whose electricity bill is shared among its owners."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    display_name: Mapped[str] = mapped_column(String(100), index=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    owners: Mapped[list["Owner"]] = relationship(
        back_populates="parent_property",
        order_by="Owner.id",
    )
    readings: Mapped[list["MeterReading"]] = relationship(back_populates="parent_property")
    bills: Mapped[list["Bill"]] = relationship(back_populates="parent_property")
