"""
Shared column sets and helpers for ledger models.
"""

from sqlalchemy import Column, DateTime, String


class RecordMixin:
    """
    UUID primary key plus creation/update timestamps.

    Values are stamped by the services from the connection's id factory and
    clock, so the columns carry no server defaults.
    """
    id = Column(String(36), primary_key=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        """Convert the mapped columns to a dictionary."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}
