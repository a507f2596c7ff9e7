"""
Transaction database model.

Records expenses, income, transfers, refunds and reimbursements.
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.enums import TransactionStatus, TransactionType, value_enum
from ledgerstore.app.models.mixins import RecordMixin

# Join table - Transaction <-> Tag (many-to-many)
transaction_tags = Table(
    "transaction_tags",
    Base.metadata,
    Column("transaction_id", String(36), ForeignKey("transactions.id"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id"), primary_key=True, index=True),
)


class Transaction(RecordMixin, Base):
    """
    Transaction model.

    Which account references are filled depends on the type: expense uses
    ``from_account_id``, income ``to_account_id``, transfer both. Refunds and
    reimbursements point back through ``original_transaction_id``. These are
    conventions of the calling code, not stored constraints.

    ``tags`` never loads implicitly; use ``TransactionService.find_by_id_with_tags``.
    """
    __tablename__ = "transactions"

    transaction_type = Column(
        value_enum(TransactionType, 20), default=TransactionType.EXPENSE, nullable=False, index=True
    )
    status = Column(value_enum(TransactionStatus, 20), default=TransactionStatus.COMPLETED, nullable=False)

    # Financials (integer storage amounts)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    target_amount = Column(Integer, nullable=True)  # Amount received on cross-currency transfers
    target_currency = Column(String(3), nullable=True)
    discount_amount = Column(Integer, default=0, nullable=False)
    fee_amount = Column(Integer, default=0, nullable=False)

    description = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    # When
    transaction_date = Column(Date, nullable=False, index=True)
    transaction_time = Column(String(8), nullable=True)  # HH:MM:SS

    # Flags
    is_marked = Column(Boolean, default=False, nullable=False)
    needs_review = Column(Boolean, default=False, nullable=False)

    # Ownership
    ledger_id = Column(String(36), ForeignKey("ledgers.id"), nullable=False, index=True)
    creator_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Optional references
    from_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    to_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True, index=True)
    original_transaction_id = Column(String(36), ForeignKey("transactions.id"), nullable=True)

    tags = relationship("Tag", secondary=transaction_tags, lazy="raise", order_by="Tag.name")

    def __repr__(self):
        return (
            f"<Transaction(id={self.id}, type='{self.transaction_type}', "
            f"amount={self.amount} {self.currency}, date={self.transaction_date})>"
        )
