"""
Tag service.

Tags are global (not per ledger) and attach to transactions through the
``transaction_tags`` join table.
"""

import asyncio
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.db.session import LedgerConnection
from ledgerstore.app.models.tag import Tag
from ledgerstore.app.models.transaction import transaction_tags
from ledgerstore.app.schemas.tag import TagCreate, TagUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload


class TagService(BaseCRUDService[Tag]):
    """Repository for tags."""

    model = Tag
    create_schema = TagCreate
    update_schema = TagUpdate
    resource_name = "Tag"

    def __init__(self, db: LedgerConnection):
        super().__init__(db)
        self._create_lock = asyncio.Lock()

    async def find_all_ordered(self) -> List[Tag]:
        return await self._select()

    async def find_by_name(self, name: str) -> Optional[Tag]:
        """Find a tag by exact (case-sensitive) name."""
        return await self._first(Tag.name == name)

    async def create_tag(self, data: Payload) -> Tag:
        return await self.create(data)

    async def update_sort_order(self, tag_id: str, sort_order: int) -> Optional[Tag]:
        return await self._update_values(tag_id, {"sort_order": sort_order})

    async def find_or_create(self, name: str, color: Optional[str] = None) -> Tag:
        """
        Return the tag named ``name``, creating it if it does not exist.

        Calls on one service instance are serialized, so concurrent callers
        asking for the same name get the same tag.
        """
        async with self._create_lock:
            existing = await self.find_by_name(name)
            if existing is not None:
                return existing

            data = {"name": name}
            if color is not None:
                data["color"] = color
            return await self.create(data)

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        await session.execute(delete(transaction_tags).where(transaction_tags.c.tag_id == key))
