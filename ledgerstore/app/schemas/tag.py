"""
Tag Pydantic schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.schemas.common import PayloadSchema, check_not_null


class TagCreate(PayloadSchema):
    """Schema for creating a new tag."""
    name: str = Field(..., min_length=1, max_length=50)
    color: Optional[str] = Field(None, max_length=7)
    icon: Optional[str] = Field(None, max_length=10)
    sort_order: int = 0


class TagUpdate(PayloadSchema):
    """Schema for updating an existing tag."""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, max_length=7)
    icon: Optional[str] = Field(None, max_length=10)
    sort_order: Optional[int] = None

    @field_validator("name", "sort_order", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
