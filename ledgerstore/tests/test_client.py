"""
Client facade tests, including an end-to-end bookkeeping flow.
"""

from datetime import date

import pytest

from ledgerstore.app import client
from ledgerstore.app.core.exceptions import NotInitializedError
from ledgerstore.app.domain.currency import format_currency, to_display_amount, to_storage_amount
from ledgerstore.app.models.enums import TransactionType


@pytest.fixture
async def default_database(make_database):
    database = make_database()
    client.configure_database(database)
    yield database
    client.configure_database(None)


@pytest.mark.asyncio
async def test_facade_requires_initialization(default_database):
    assert client.is_database_initialized() is False

    with pytest.raises(NotInitializedError):
        client.get_transaction_service()
    with pytest.raises(NotInitializedError):
        client.get_connection()
    with pytest.raises(NotInitializedError):
        await client.export_database()


@pytest.mark.asyncio
async def test_facade_hands_out_context_services(default_database):
    await client.initialize_database()

    assert client.is_database_initialized() is True
    assert client.get_database() is default_database
    assert client.get_connection() is default_database.get_connection()
    assert client.get_user_service() is default_database.get_user_service()
    assert client.get_expense_service() is default_database.get_expense_service()

    await client.close_database()
    assert client.is_database_initialized() is False


@pytest.mark.asyncio
async def test_end_to_end_bookkeeping(default_database):
    await client.initialize_database()

    owner = await client.get_user_service().create_user({"name": "Alice"})
    ledger = await client.get_ledger_service().create_ledger(
        {"name": "Trip", "default_currency": "USD", "owner_id": owner.id}
    )
    account = await client.get_account_service().create_account(
        {"name": "Card", "currency": "USD", "ledger_id": ledger.id}
    )
    category = await client.get_category_service().create_category({"name": "Food", "ledger_id": ledger.id})
    tag = await client.get_tag_service().find_or_create("travel")

    amount = to_storage_amount(25.50, "USD")
    transaction = await client.get_transaction_service().create_transaction(
        {
            "transaction_type": TransactionType.EXPENSE,
            "amount": amount,
            "currency": "USD",
            "transaction_date": date(2024, 7, 14),
            "ledger_id": ledger.id,
            "creator_id": owner.id,
            "from_account_id": account.id,
            "category_id": category.id,
        },
        tag_ids=[tag.id],
    )
    account = await client.get_account_service().adjust_balance(account.id, -transaction.amount)

    assert account.current_balance == -2550
    assert format_currency(to_display_amount(account.current_balance, "USD"), "USD") == "$-25.50"
    assert await client.get_transaction_service().get_total_by_type(
        ledger.id, TransactionType.EXPENSE, "USD"
    ) == 2550

    snapshot = await client.export_database()
    await client.get_transaction_service().delete(transaction.id)
    await client.import_database(snapshot)

    restored = await client.get_transaction_service().find_by_id_with_tags(transaction.id)
    assert [t.name for t in restored.tags] == ["travel"]
