"""
Relational cleanup helpers shared by the services.

SQLite foreign keys are not enforced by the store, so join rows and
dependent rows are removed explicitly.
"""

from typing import Dict, List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.models.category import Category
from ledgerstore.app.models.transaction import Transaction, transaction_tags


async def count_rows(session: AsyncSession, model, *criteria) -> int:
    """Count rows of ``model`` matching all criteria."""
    result = await session.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar_one()


async def purge_transactions(session: AsyncSession, *criteria) -> int:
    """
    Delete the transactions matching ``criteria`` and their tag join rows.

    Tags themselves are kept.

    Returns:
        Number of transactions deleted
    """
    ids = select(Transaction.id).where(*criteria)
    await session.execute(delete(transaction_tags).where(transaction_tags.c.transaction_id.in_(ids)))
    result = await session.execute(
        delete(Transaction).where(*criteria).execution_options(synchronize_session=False)
    )
    return result.rowcount


async def category_subtree_ids(session: AsyncSession, category_id: str) -> List[str]:
    """Return ``category_id`` followed by the ids of all its descendants."""
    subtree = [category_id]
    frontier = [category_id]
    seen = {category_id}

    while frontier:
        result = await session.execute(select(Category.id).where(Category.parent_id.in_(frontier)))
        frontier = [child for child in result.scalars().all() if child not in seen]
        seen.update(frontier)
        subtree.extend(frontier)

    return subtree


async def transaction_references(session: AsyncSession, *criteria) -> Dict[str, int]:
    """Reference counts for transactions matching ``criteria``."""
    return {"transactions": await count_rows(session, Transaction, *criteria)}
