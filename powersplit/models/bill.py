"""Bill database model."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from powersplit.core.database import Base

if TYPE_CHECKING:
    from powersplit.models.meter_reading import MeterReading
    from powersplit.models.property import Property


class Bill(Base):
    """Utility invoice for one billing period of a property.

    The period is bounded either by two explicit readings or, when no
    readings are referenced, by the readings falling inside
    [period_start, period_end].
    """

    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    bill_date: Mapped[date] = mapped_column(index=True)

    # Amounts (using Decimal for precision)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2))
    fixed_costs: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2))
    total_consumption: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=3)
    )  # As printed on the invoice, informational only

    # Billing period
    period_start: Mapped[date] = mapped_column()
    period_end: Mapped[date] = mapped_column(index=True)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    start_reading_id: Mapped[int | None] = mapped_column(
        ForeignKey("meter_readings.id"),
        nullable=True,
    )
    end_reading_id: Mapped[int | None] = mapped_column(
        ForeignKey("meter_readings.id"),
        nullable=True,
    )

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="bills")
    start_reading: Mapped["MeterReading | None"] = relationship(
        foreign_keys=[start_reading_id],
    )
    end_reading: Mapped["MeterReading | None"] = relationship(
        foreign_keys=[end_reading_id],
    )

    def has_reading_refs(self) -> bool:
        """Check if the period is bounded by explicit readings."""
        return self.start_reading_id is not None and self.end_reading_id is not None
