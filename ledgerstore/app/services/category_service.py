"""
Category service.

Categories form a tree per ledger through ``parent_id``.
"""

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.models.category import Category
from ledgerstore.app.models.enums import CategoryType
from ledgerstore.app.models.transaction import Transaction
from ledgerstore.app.schemas.category import CategoryCreate, CategoryUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload
from ledgerstore.app.services.cleanup import category_subtree_ids, count_rows, purge_transactions


class CategoryService(BaseCRUDService[Category]):
    """Repository for categories."""

    model = Category
    create_schema = CategoryCreate
    update_schema = CategoryUpdate
    resource_name = "Category"

    async def find_by_ledger_id(self, ledger_id: str) -> List[Category]:
        """Active categories of a ledger."""
        return await self._select(Category.ledger_id == ledger_id, Category.is_active.is_(True))

    async def find_by_type(self, ledger_id: str, category_type: CategoryType) -> List[Category]:
        return await self._select(
            Category.ledger_id == ledger_id,
            Category.category_type == CategoryType(category_type),
            Category.is_active.is_(True),
        )

    async def find_root_categories(
        self,
        ledger_id: str,
        category_type: Optional[CategoryType] = None
    ) -> List[Category]:
        """Active categories without a parent, optionally of one type."""
        criteria = [
            Category.ledger_id == ledger_id,
            Category.parent_id.is_(None),
            Category.is_active.is_(True),
        ]
        if category_type is not None:
            criteria.append(Category.category_type == CategoryType(category_type))
        return await self._select(*criteria)

    async def find_children(self, parent_id: str) -> List[Category]:
        """Active direct children of a category."""
        return await self._select(Category.parent_id == parent_id, Category.is_active.is_(True))

    async def create_category(self, data: Payload) -> Category:
        return await self.create(data)

    async def update_sort_order(self, category_id: str, sort_order: int) -> Optional[Category]:
        return await self._update_values(category_id, {"sort_order": sort_order})

    async def move_to_parent(self, category_id: str, parent_id: Optional[str]) -> Optional[Category]:
        """
        Re-parent a category; ``None`` makes it a root category.

        Raises:
            ValueError: If the new parent is the category itself or one of its descendants
        """
        if parent_id is not None:
            async with self.db.session() as session:
                subtree = await category_subtree_ids(session, category_id)
            if parent_id in subtree:
                raise ValueError(f"Category {category_id} cannot be moved under its own subtree")

        return await self._update_values(category_id, {"parent_id": parent_id})

    async def archive_category(self, category_id: str) -> Optional[Category]:
        return await self._update_values(category_id, {"is_active": False})

    async def restore_category(self, category_id: str) -> Optional[Category]:
        return await self._update_values(category_id, {"is_active": True})

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        subtree = await category_subtree_ids(session, key)
        references = {
            "categories": len(subtree) - 1,
            "transactions": await count_rows(session, Transaction, Transaction.category_id.in_(subtree)),
        }

        async def cascade(session: AsyncSession) -> None:
            await purge_transactions(session, Transaction.category_id.in_(subtree))
            await session.execute(
                delete(Category)
                .where(Category.id.in_(subtree[1:]))
                .execution_options(synchronize_session=False)
            )

        await self._apply_delete_policy(session, key, references, cascade)
