"""
Expense database model.

Flat expense records kept alongside the ledger tables.
"""

from sqlalchemy import Column, Date, Integer, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.domain.currency import DEFAULT_CURRENCY
from ledgerstore.app.models.mixins import RecordMixin


class Expense(RecordMixin, Base):
    """
    Expense model.

    ``amount`` is an integer storage amount in ``currency``.
    """
    __tablename__ = "expenses"

    amount = Column(Integer, nullable=False)
    currency = Column(String(3), default=DEFAULT_CURRENCY, nullable=False)
    description = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    def __repr__(self):
        return f"<Expense(id={self.id}, amount={self.amount} {self.currency}, date={self.date})>"
