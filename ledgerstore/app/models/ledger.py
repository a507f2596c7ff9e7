"""
Ledger database model.

A ledger is a named book grouping accounts, categories and transactions.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.mixins import RecordMixin


class Ledger(RecordMixin, Base):
    """
    Ledger model.

    Never physically deleted by normal flows: archiving sets ``is_active``
    to False so historical transactions stay queryable.
    """
    __tablename__ = "ledgers"

    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    icon = Column(String(10), nullable=True)
    default_currency = Column(String(3), nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Ownership - Ledger belongs to User
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    def __repr__(self):
        return f"<Ledger(id={self.id}, name='{self.name}', currency='{self.default_currency}')>"
