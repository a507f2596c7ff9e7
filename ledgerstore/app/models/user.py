"""
User database model.

Users own ledgers and author transactions.
"""

from sqlalchemy import Boolean, Column, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.mixins import RecordMixin


class User(RecordMixin, Base):
    """
    User model for multi-user bookkeeping.
    """
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    avatar = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"
