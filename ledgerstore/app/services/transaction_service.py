"""
Transaction service.

Queries, tagging and status helpers for ledger transactions. Amounts are
integer storage amounts; totals never mix currencies.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Union

from sqlalchemy import delete, func, insert, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ledgerstore.app.domain.currency import require_currency
from ledgerstore.app.models.enums import TransactionStatus, TransactionType
from ledgerstore.app.models.tag import Tag
from ledgerstore.app.models.transaction import Transaction, transaction_tags
from ledgerstore.app.schemas.transaction import TransactionCreate, TransactionFilters, TransactionUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload

logger = logging.getLogger(__name__)


class TransactionService(BaseCRUDService[Transaction]):
    """
    Repository for transactions.

    Lists are ordered newest first: transaction date, then creation time.
    """

    model = Transaction
    create_schema = TransactionCreate
    update_schema = TransactionUpdate
    resource_name = "Transaction"

    def default_order(self) -> tuple:
        return (Transaction.transaction_date.desc(), Transaction.created_at.desc())

    # =========================================================================
    # Queries
    # =========================================================================

    async def find_by_ledger_id(self, ledger_id: str) -> List[Transaction]:
        return await self._select(Transaction.ledger_id == ledger_id)

    async def find_by_type(self, ledger_id: str, transaction_type: TransactionType) -> List[Transaction]:
        return await self._select(
            Transaction.ledger_id == ledger_id,
            Transaction.transaction_type == TransactionType(transaction_type),
        )

    async def find_by_account_id(self, account_id: str) -> List[Transaction]:
        """Transactions with the account on either side."""
        return await self._select(
            or_(Transaction.from_account_id == account_id, Transaction.to_account_id == account_id)
        )

    async def find_by_category_id(self, category_id: str) -> List[Transaction]:
        return await self._select(Transaction.category_id == category_id)

    async def find_by_date_range(self, ledger_id: str, start_date: date, end_date: date) -> List[Transaction]:
        """Transactions of a ledger dated within ``start_date``..``end_date`` inclusive."""
        return await self._select(
            Transaction.ledger_id == ledger_id,
            Transaction.transaction_date >= start_date,
            Transaction.transaction_date <= end_date,
        )

    async def find_with_filters(
        self,
        filters: Union[TransactionFilters, Mapping[str, Any], None] = None
    ) -> List[Transaction]:
        """
        Find transactions matching every given filter.

        Filters left as None are ignored; no filters returns every transaction.
        """
        if filters is None:
            filters = TransactionFilters()
        elif not isinstance(filters, TransactionFilters):
            filters = TransactionFilters.model_validate(dict(filters))

        criteria = []
        for field in (
            "ledger_id",
            "creator_id",
            "from_account_id",
            "to_account_id",
            "category_id",
            "transaction_type",
            "status",
            "is_marked",
            "needs_review",
        ):
            value = getattr(filters, field)
            if value is not None:
                criteria.append(getattr(Transaction, field) == value)

        if filters.start_date is not None:
            criteria.append(Transaction.transaction_date >= filters.start_date)
        if filters.end_date is not None:
            criteria.append(Transaction.transaction_date <= filters.end_date)

        return await self._select(*criteria)

    async def find_marked(self, ledger_id: str) -> List[Transaction]:
        return await self._select(Transaction.ledger_id == ledger_id, Transaction.is_marked.is_(True))

    async def find_needing_review(self, ledger_id: str) -> List[Transaction]:
        return await self._select(Transaction.ledger_id == ledger_id, Transaction.needs_review.is_(True))

    async def find_by_id_with_tags(self, transaction_id: str) -> Optional[Transaction]:
        """Find a transaction with ``tags`` eagerly loaded (ordered by name)."""
        query = (
            select(Transaction)
            .options(selectinload(Transaction.tags))
            .where(Transaction.id == transaction_id)
        )

        async with self.db.session() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def get_recent_transactions(self, ledger_id: str, limit: int = 10) -> List[Transaction]:
        return await self._select(Transaction.ledger_id == ledger_id, limit=limit)

    async def get_total_by_type(
        self,
        ledger_id: str,
        transaction_type: TransactionType,
        currency: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> int:
        """
        Sum amounts of completed transactions of one type and currency.

        Pending and voided transactions are excluded.

        Raises:
            UnknownCurrencyError: If ``currency`` is not registered
        """
        require_currency(currency)
        criteria = [
            Transaction.ledger_id == ledger_id,
            Transaction.transaction_type == TransactionType(transaction_type),
            Transaction.currency == currency,
            Transaction.status == TransactionStatus.COMPLETED,
        ]
        if start_date is not None:
            criteria.append(Transaction.transaction_date >= start_date)
        if end_date is not None:
            criteria.append(Transaction.transaction_date <= end_date)

        query = select(func.coalesce(func.sum(Transaction.amount), 0)).where(*criteria)
        async with self.db.session() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_transaction(self, data: Payload, tag_ids: Optional[Iterable[str]] = None) -> Transaction:
        """
        Create a transaction and attach tags in the same commit.

        Args:
            data: Transaction fields
            tag_ids: Ids of existing tags to attach (duplicates and unknown ids ignored)
        """
        entity = self._new_entity(self._payload(data, self.create_schema))

        async with self.db.transaction() as session:
            session.add(entity)
            await session.flush()
            await self._insert_tags(session, entity.id, tag_ids)

        return entity

    async def set_tags(self, transaction_id: str, tag_ids: Iterable[str]) -> Optional[Transaction]:
        """
        Replace the tags of a transaction.

        Returns:
            The transaction with its tags loaded, or None if it does not exist
        """
        async with self.db.transaction() as session:
            result = await session.execute(
                update(Transaction)
                .where(Transaction.id == transaction_id)
                .values(updated_at=self.db.clock())
                .execution_options(synchronize_session=False)
            )
            found = result.rowcount > 0
            if found:
                await session.execute(
                    delete(transaction_tags).where(transaction_tags.c.transaction_id == transaction_id)
                )
                await self._insert_tags(session, transaction_id, tag_ids)

        if not found:
            return None
        return await self.find_by_id_with_tags(transaction_id)

    async def _insert_tags(self, session: AsyncSession, transaction_id: str, tag_ids: Optional[Iterable[str]]) -> None:
        """Attach the given tags, skipping ids that name no tag."""
        wanted = list(dict.fromkeys(tag_ids or ()))
        if not wanted:
            return

        result = await session.execute(select(Tag.id).where(Tag.id.in_(wanted)))
        known = set(result.scalars().all())
        missing = [tag_id for tag_id in wanted if tag_id not in known]
        if missing:
            logger.warning(f"Ignoring unknown tag ids for transaction {transaction_id}: {missing}")

        rows = [{"transaction_id": transaction_id, "tag_id": tag_id} for tag_id in wanted if tag_id in known]
        if rows:
            await session.execute(insert(transaction_tags), rows)

    async def toggle_marked(self, transaction_id: str) -> Optional[Transaction]:
        return await self._update_values(transaction_id, {"is_marked": not_(Transaction.is_marked)})

    async def toggle_needs_review(self, transaction_id: str) -> Optional[Transaction]:
        return await self._update_values(transaction_id, {"needs_review": not_(Transaction.needs_review)})

    async def void_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return await self._update_values(transaction_id, {"status": TransactionStatus.VOIDED})

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        await session.execute(delete(transaction_tags).where(transaction_tags.c.transaction_id == key))
