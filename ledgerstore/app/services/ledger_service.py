"""
Ledger service.

Ledgers group accounts, categories and transactions for one owner.
Archiving a ledger is a soft delete; ``delete`` is a hard delete governed
by the connection's delete policy.
"""

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.models.account import Account
from ledgerstore.app.models.category import Category
from ledgerstore.app.models.ledger import Ledger
from ledgerstore.app.models.transaction import Transaction
from ledgerstore.app.schemas.ledger import LedgerCreate, LedgerUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload
from ledgerstore.app.services.cleanup import count_rows, purge_transactions


class LedgerService(BaseCRUDService[Ledger]):
    """Repository for ledgers."""

    model = Ledger
    create_schema = LedgerCreate
    update_schema = LedgerUpdate
    resource_name = "Ledger"

    async def find_by_owner_id(self, owner_id: str) -> List[Ledger]:
        """Active ledgers of one owner."""
        return await self._select(Ledger.owner_id == owner_id, Ledger.is_active.is_(True))

    async def find_active_ledgers(self) -> List[Ledger]:
        return await self._select(Ledger.is_active.is_(True))

    async def create_ledger(self, data: Payload) -> Ledger:
        return await self.create(data)

    async def update_sort_order(self, ledger_id: str, sort_order: int) -> Optional[Ledger]:
        return await self._update_values(ledger_id, {"sort_order": sort_order})

    async def archive_ledger(self, ledger_id: str) -> Optional[Ledger]:
        return await self._update_values(ledger_id, {"is_active": False})

    async def restore_ledger(self, ledger_id: str) -> Optional[Ledger]:
        return await self._update_values(ledger_id, {"is_active": True})

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        references = {
            "accounts": await count_rows(session, Account, Account.ledger_id == key),
            "categories": await count_rows(session, Category, Category.ledger_id == key),
            "transactions": await count_rows(session, Transaction, Transaction.ledger_id == key),
        }

        async def cascade(session: AsyncSession) -> None:
            await purge_transactions(session, Transaction.ledger_id == key)
            for model in (Category, Account):
                await session.execute(
                    delete(model).where(model.ledger_id == key).execution_options(synchronize_session=False)
                )

        await self._apply_delete_policy(session, key, references, cascade)
