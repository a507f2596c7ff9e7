"""
Ledger Pydantic schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.schemas.common import PayloadSchema, check_currency, check_not_null


class LedgerCreate(PayloadSchema):
    """Schema for creating a new ledger."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=10)
    default_currency: str = Field(..., description="ISO 4217 code")
    is_active: bool = True
    sort_order: int = 0
    owner_id: str

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)


class LedgerUpdate(PayloadSchema):
    """Schema for updating an existing ledger."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=10)
    default_currency: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    owner_id: Optional[str] = None

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)

    @field_validator("name", "default_currency", "is_active", "sort_order", "owner_id", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
