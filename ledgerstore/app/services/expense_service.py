"""
Expense service.

Flat expense records with a free-text category label.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import func, select

from ledgerstore.app.domain.currency import require_currency
from ledgerstore.app.models.expense import Expense
from ledgerstore.app.schemas.expense import ExpenseCreate, ExpenseUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload


class ExpenseService(BaseCRUDService[Expense]):
    """Repository for expenses. Newest first."""

    model = Expense
    create_schema = ExpenseCreate
    update_schema = ExpenseUpdate
    resource_name = "Expense"

    def default_order(self) -> tuple:
        return (Expense.date.desc(), Expense.created_at.desc())

    async def find_by_category(self, category: str) -> List[Expense]:
        return await self._select(Expense.category == category)

    async def find_by_date_range(self, start_date: date, end_date: date) -> List[Expense]:
        """Expenses dated within ``start_date``..``end_date`` inclusive."""
        return await self._select(Expense.date >= start_date, Expense.date <= end_date)

    async def get_total_amount(self, currency: Optional[str] = None) -> int:
        """
        Sum of expense amounts, optionally restricted to one currency.

        Raises:
            UnknownCurrencyError: If ``currency`` is given and not registered
        """
        query = select(func.coalesce(func.sum(Expense.amount), 0))
        if currency is not None:
            require_currency(currency)
            query = query.where(Expense.currency == currency)

        async with self.db.session() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def create_expense(self, data: Payload) -> Expense:
        return await self.create(data)

    async def get_recent_expenses(self, limit: int = 10) -> List[Expense]:
        return await self._select(limit=limit)
