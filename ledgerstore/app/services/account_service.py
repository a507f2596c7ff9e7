"""
Account service.

Balances are integer storage amounts. ``adjust_balance`` applies a delta
in a single UPDATE so concurrent adjustments never lose an update.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.domain.currency import require_currency
from ledgerstore.app.models.account import Account
from ledgerstore.app.models.enums import AccountType
from ledgerstore.app.models.transaction import Transaction
from ledgerstore.app.schemas.account import AccountCreate, AccountUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload
from ledgerstore.app.services.cleanup import purge_transactions, transaction_references


class AccountService(BaseCRUDService[Account]):
    """Repository for accounts."""

    model = Account
    create_schema = AccountCreate
    update_schema = AccountUpdate
    resource_name = "Account"

    async def find_by_ledger_id(self, ledger_id: str) -> List[Account]:
        """Active accounts of a ledger."""
        return await self._select(Account.ledger_id == ledger_id, Account.is_active.is_(True))

    async def find_by_type(self, ledger_id: str, account_type: AccountType) -> List[Account]:
        return await self._select(
            Account.ledger_id == ledger_id,
            Account.account_type == AccountType(account_type),
            Account.is_active.is_(True),
        )

    async def find_by_currency(self, ledger_id: str, currency: str) -> List[Account]:
        return await self._select(
            Account.ledger_id == ledger_id,
            Account.currency == currency,
            Account.is_active.is_(True),
        )

    async def find_accounts_included_in_total(self, ledger_id: str) -> List[Account]:
        return await self._select(
            Account.ledger_id == ledger_id,
            Account.include_in_total.is_(True),
            Account.is_active.is_(True),
        )

    def _prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if values.get("current_balance") is None:
            values["current_balance"] = values.get("initial_balance", 0)
        return values

    async def create_account(self, data: Payload) -> Account:
        """Create an account; the current balance starts at the initial balance."""
        return await self.create(data)

    async def update_balance(self, account_id: str, new_balance: int) -> Optional[Account]:
        """Overwrite the cached current balance."""
        return await self._update_values(account_id, {"current_balance": new_balance})

    async def adjust_balance(self, account_id: str, adjustment: int) -> Optional[Account]:
        """
        Add ``adjustment`` (may be negative) to the current balance.

        Returns:
            The updated account, or None if it does not exist
        """
        return await self._update_values(
            account_id, {"current_balance": Account.current_balance + adjustment}
        )

    async def archive_account(self, account_id: str) -> Optional[Account]:
        return await self._update_values(account_id, {"is_active": False})

    async def restore_account(self, account_id: str) -> Optional[Account]:
        return await self._update_values(account_id, {"is_active": True})

    async def get_total_balance(self, ledger_id: str, currency: str) -> int:
        """
        Sum current balances of active accounts included in the total.

        Only accounts in ``currency`` are summed; no conversion is done.

        Raises:
            UnknownCurrencyError: If ``currency`` is not registered
        """
        require_currency(currency)
        query = select(func.coalesce(func.sum(Account.current_balance), 0)).where(
            Account.ledger_id == ledger_id,
            Account.currency == currency,
            Account.is_active.is_(True),
            Account.include_in_total.is_(True),
        )

        async with self.db.session() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        either_side = or_(Transaction.from_account_id == key, Transaction.to_account_id == key)
        references = await transaction_references(session, either_side)

        async def cascade(session: AsyncSession) -> None:
            await purge_transactions(session, either_side)

        await self._apply_delete_policy(session, key, references, cascade)
