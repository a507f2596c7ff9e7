"""
Shared base for ledger payload schemas.
"""

from typing import Optional

from pydantic import BaseModel

from ledgerstore.app.domain.currency import require_currency


class PayloadSchema(BaseModel):
    """Partial payload for create/update calls. Unknown fields are rejected."""

    class Config:
        extra = "forbid"


def check_currency(value: Optional[str]) -> Optional[str]:
    """Reject unregistered currency codes with UnknownCurrencyError."""
    if value is not None:
        require_currency(value)
    return value


def check_not_null(value):
    """Reject an explicit None for a field stored in a NOT NULL column."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
