"""
Account Pydantic schemas.

Balances and limits are integer storage amounts.
"""

from typing import Optional

from pydantic import Field, field_validator

from ledgerstore.app.models.enums import AccountType
from ledgerstore.app.schemas.common import PayloadSchema, check_currency, check_not_null


class AccountCreate(PayloadSchema):
    """Schema for creating a new account."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=10)
    account_type: AccountType = AccountType.BALANCE
    currency: str
    initial_balance: int = 0
    current_balance: Optional[int] = Field(None, description="Defaults to initial_balance")
    credit_limit: Optional[int] = None
    billing_day: Optional[int] = Field(None, ge=1, le=31)
    is_active: bool = True
    include_in_total: bool = True
    sort_order: int = 0
    ledger_id: str

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)


class AccountUpdate(PayloadSchema):
    """Schema for updating an existing account."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=10)
    account_type: Optional[AccountType] = None
    currency: Optional[str] = None
    initial_balance: Optional[int] = None
    current_balance: Optional[int] = None
    credit_limit: Optional[int] = None
    billing_day: Optional[int] = Field(None, ge=1, le=31)
    is_active: Optional[bool] = None
    include_in_total: Optional[bool] = None
    sort_order: Optional[int] = None
    ledger_id: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)

    @field_validator("name", "account_type", "currency", "initial_balance", "current_balance", "is_active", "include_in_total", "sort_order", "ledger_id", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)
