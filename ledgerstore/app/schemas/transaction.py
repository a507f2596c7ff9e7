"""
Transaction Pydantic schemas.

Amounts are integer storage amounts in their currency.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ledgerstore.app.models.enums import TransactionStatus, TransactionType
from ledgerstore.app.schemas.common import PayloadSchema, check_currency, check_not_null

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class TransactionCreate(PayloadSchema):
    """Schema for creating a new transaction."""
    transaction_type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED
    amount: int
    currency: str
    target_amount: Optional[int] = None
    target_currency: Optional[str] = None
    discount_amount: int = 0
    fee_amount: int = 0
    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    transaction_date: date
    transaction_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    is_marked: bool = False
    needs_review: bool = False
    ledger_id: str
    creator_id: str
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    original_transaction_id: Optional[str] = None

    @field_validator("currency", "target_currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)


class TransactionUpdate(PayloadSchema):
    """Schema for updating an existing transaction."""
    transaction_type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    target_amount: Optional[int] = None
    target_currency: Optional[str] = None
    discount_amount: Optional[int] = None
    fee_amount: Optional[int] = None
    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    transaction_date: Optional[date] = None
    transaction_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    is_marked: Optional[bool] = None
    needs_review: Optional[bool] = None
    ledger_id: Optional[str] = None
    creator_id: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    original_transaction_id: Optional[str] = None

    @field_validator("currency", "target_currency")
    @classmethod
    def validate_currency(cls, value: Optional[str]) -> Optional[str]:
        return check_currency(value)

    @field_validator(
        "transaction_type", "status", "amount", "currency", "discount_amount", "fee_amount",
        "transaction_date", "is_marked", "needs_review", "ledger_id", "creator_id",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class TransactionFilters(BaseModel):
    """Optional filters for transaction queries. All given filters are AND-ed."""
    ledger_id: Optional[str] = None
    creator_id: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_marked: Optional[bool] = None
    needs_review: Optional[bool] = None

    class Config:
        extra = "forbid"
