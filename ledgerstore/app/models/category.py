"""
Category database model.

Categories classify transactions and nest through ``parent_id``.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from ledgerstore.app.db.session import Base
from ledgerstore.app.models.enums import CategoryType, value_enum
from ledgerstore.app.models.mixins import RecordMixin


class Category(RecordMixin, Base):
    """
    Category model.

    Root categories have no parent. The category type is set at creation
    and is not changed afterwards by any service method.
    """
    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    icon = Column(String(10), nullable=True)
    color = Column(String(7), nullable=True)
    category_type = Column(value_enum(CategoryType, 10), default=CategoryType.EXPENSE, nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Ownership and hierarchy
    ledger_id = Column(String(36), ForeignKey("ledgers.id"), nullable=False, index=True)
    parent_id = Column(String(36), ForeignKey("categories.id"), nullable=True, index=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', type='{self.category_type}')>"
