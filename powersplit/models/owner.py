"""Owner database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from powersplit.core.database import Base
from powersplit.models.enums import DEFAULT_OWNER_COLOR

if TYPE_CHECKING:
    from powersplit.models.property import Property


class Owner(Base):
    """Co-owner taking part in the cost split of a property."""

    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_OWNER_COLOR)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="owners")
