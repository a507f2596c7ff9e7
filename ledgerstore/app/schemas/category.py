"""
Category Pydantic schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.models.enums import CategoryType
from ledgerstore.app.schemas.common import PayloadSchema, check_not_null


class CategoryCreate(PayloadSchema):
    """Schema for creating a new category."""
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=10)
    color: Optional[str] = Field(None, max_length=7)
    category_type: CategoryType = CategoryType.EXPENSE
    is_active: bool = True
    sort_order: int = 0
    ledger_id: str
    parent_id: Optional[str] = None


class CategoryUpdate(PayloadSchema):
    """
    Schema for updating an existing category.

    There is no ``category_type`` field: the type is fixed at creation.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=10)
    color: Optional[str] = Field(None, max_length=7)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    parent_id: Optional[str] = None

    @field_validator("name", "is_active", "sort_order", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
