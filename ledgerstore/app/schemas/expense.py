"""
Expense Pydantic schemas.
"""

import datetime
from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.domain.currency import DEFAULT_CURRENCY
from ledgerstore.app.schemas.common import PayloadSchema, check_currency, check_not_null


class ExpenseCreate(PayloadSchema):
    """Schema for creating a new expense record."""
    amount: int = Field(..., description="Integer storage amount")
    currency: str = DEFAULT_CURRENCY
    description: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    date: datetime.date

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)


class ExpenseUpdate(PayloadSchema):
    """Schema for updating an existing expense record."""
    amount: Optional[int] = None
    currency: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[datetime.date] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)

    @field_validator("amount", "currency", "description", "category", "date", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
