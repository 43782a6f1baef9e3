"""MeterReading database model - one snapshot of every owner's meter."""

import json
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from powersplit.core.database import Base

if TYPE_CHECKING:
    from powersplit.models.property import Property


class MeterReading(Base):
    """Cumulative meter values of all owners taken on one day.

    Values are stored as JSON mapping owner ids to kWh strings, e.g.
    {"1": "1520.5", "2": "980"}. Owners missing from the map read as zero.
    """

    __tablename__ = "meter_readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # When the meters were read (calendar date, no time of day)
    reading_date: Mapped[date] = mapped_column(index=True)
    readings_json: Mapped[str] = mapped_column(Text, default="{}")
    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="readings")

    def get_readings(self) -> dict[int, Decimal]:
        """Parse the stored JSON into owner id -> Decimal value."""
        raw = json.loads(self.readings_json or "{}")
        return {int(k): Decimal(str(v)) for k, v in raw.items()}

    def set_readings(self, readings: dict[int, Decimal]) -> None:
        """Serialize an owner id -> value mapping to JSON for storage."""
        self.readings_json = json.dumps({str(k): str(v) for k, v in readings.items()})
