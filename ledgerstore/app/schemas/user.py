"""
User Pydantic schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.schemas.common import PayloadSchema, check_not_null


class UserCreate(PayloadSchema):
    """Schema for creating a new user."""
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = Field(None, max_length=500)
    is_active: bool = True


class UserUpdate(PayloadSchema):
    """Schema for updating an existing user."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator("name", "is_active", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
