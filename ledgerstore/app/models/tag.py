"""
Tag database model.

Tags are shared by every ledger and attach to transactions many-to-many.
"""

from sqlalchemy import Column, Integer, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.mixins import RecordMixin


class Tag(RecordMixin, Base):
    """Tag model."""
    __tablename__ = "tags"

    name = Column(String(50), nullable=False, index=True)
    color = Column(String(7), nullable=True)
    icon = Column(String(10), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}')>"
