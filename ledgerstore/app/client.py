"""
Client facade for the ledger store.

Module-level functions over one process-wide ``LedgerDatabase``. Code that
needs isolation (tests, multiple stores) should construct its own
``LedgerDatabase`` and pass it around, or install it with
``configure_database``.
"""

from typing import Optional

from ledgerstore.app.db.bootstrap import LedgerDatabase
from ledgerstore.app.db.session import LedgerConnection
from ledgerstore.app.services.account_service import AccountService
from ledgerstore.app.services.category_service import CategoryService
from ledgerstore.app.services.expense_service import ExpenseService
from ledgerstore.app.services.ledger_service import LedgerService
from ledgerstore.app.services.tag_service import TagService
from ledgerstore.app.services.transaction_service import TransactionService
from ledgerstore.app.services.user_service import UserService

_database: Optional[LedgerDatabase] = None


def get_database() -> LedgerDatabase:
    """Return the default database context, creating it on first use."""
    global _database
    if _database is None:
        _database = LedgerDatabase()
    return _database


def configure_database(database: Optional[LedgerDatabase]) -> None:
    """Install ``database`` as the default context (None resets to a fresh default)."""
    global _database
    _database = database


async def initialize_database() -> None:
    await get_database().initialize()


async def close_database() -> None:
    await get_database().teardown()


async def export_database() -> Optional[str]:
    return await get_database().export_snapshot()


async def import_database(data: str) -> None:
    await get_database().import_snapshot(data)


def is_database_initialized() -> bool:
    return get_database().is_initialized()


def get_connection() -> LedgerConnection:
    return get_database().get_connection()


def get_user_service() -> UserService:
    return get_database().get_user_service()


def get_ledger_service() -> LedgerService:
    return get_database().get_ledger_service()


def get_account_service() -> AccountService:
    return get_database().get_account_service()


def get_category_service() -> CategoryService:
    return get_database().get_category_service()


def get_tag_service() -> TagService:
    return get_database().get_tag_service()


def get_transaction_service() -> TransactionService:
    return get_database().get_transaction_service()


def get_expense_service() -> ExpenseService:
    return get_database().get_expense_service()
