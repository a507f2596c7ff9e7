"""
Account database model.

Accounts hold money in one currency inside one ledger.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.enums import AccountType, value_enum
from ledgerstore.app.models.mixins import RecordMixin


class Account(RecordMixin, Base):
    """
    Account model.

    Amounts are integer storage amounts (display amount * 10^decimal_places).
    ``current_balance`` is a cached value: it starts equal to
    ``initial_balance`` and only changes through explicit balance updates.
    """
    __tablename__ = "accounts"

    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    icon = Column(String(10), nullable=True)
    account_type = Column(value_enum(AccountType, 20), default=AccountType.BALANCE, nullable=False)
    currency = Column(String(3), nullable=False)

    # Balances
    initial_balance = Column(Integer, default=0, nullable=False)
    current_balance = Column(Integer, default=0, nullable=False)

    # Credit card details
    credit_limit = Column(Integer, nullable=True)
    billing_day = Column(Integer, nullable=True)  # 1-31

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    include_in_total = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    # Ownership - Account belongs to Ledger
    ledger_id = Column(String(36), ForeignKey("ledgers.id"), nullable=False, index=True)

    def __repr__(self):
        return f"<Account(id={self.id}, name='{self.name}', balance={self.current_balance} {self.currency})>"
