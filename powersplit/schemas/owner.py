"""Owner Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from powersplit.models.enums import DEFAULT_OWNER_COLOR

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class OwnerCreate(BaseModel):
    """Schema for adding an owner to a property."""

    name: str
    color: str = Field(DEFAULT_OWNER_COLOR, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate owner name is not blank."""
        if not v.strip():
            raise ValueError("Owner name cannot be empty")
        return v.strip()


class OwnerUpdate(BaseModel):
    """Schema for renaming or recoloring an owner."""

    name: str | None = None
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)

    @model_validator(mode="after")
    def check_at_least_one_field(self) -> "OwnerUpdate":
        """Ensure at least one field is provided for update."""
        if self.name is None and self.color is None:
            raise ValueError("At least one field must be provided for update")
        if self.name is not None and not self.name.strip():
            raise ValueError("Owner name cannot be empty")
        return self


class OwnerResponse(BaseModel):
    """Schema for owner response."""

    id: int
    property_id: int
    name: str
    color: str
    created_at: datetime

    model_config = {"from_attributes": True}
