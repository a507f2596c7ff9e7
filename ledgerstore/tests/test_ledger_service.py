"""
Ledger service tests.
"""

import pytest

from ledgerstore.app.core.exceptions import UnknownCurrencyError


@pytest.mark.asyncio
async def test_archive_hides_ledger_but_keeps_it(database, owner, ledger):
    ledgers = database.get_ledger_service()

    archived = await ledgers.archive_ledger(ledger.id)

    assert archived.is_active is False
    assert await ledgers.find_active_ledgers() == []
    assert await ledgers.find_by_owner_id(owner.id) == []
    assert (await ledgers.find_by_id(ledger.id)).is_active is False

    await ledgers.restore_ledger(ledger.id)
    assert [l.id for l in await ledgers.find_by_owner_id(owner.id)] == [ledger.id]


@pytest.mark.asyncio
async def test_ledgers_ordered_by_sort_order_then_name(database, owner, ledger):
    ledgers = database.get_ledger_service()
    travel = await ledgers.create_ledger({"name": "Travel", "default_currency": "USD", "owner_id": owner.id})
    business = await ledgers.create_ledger({"name": "Business", "default_currency": "USD", "owner_id": owner.id})

    await ledgers.update_sort_order(travel.id, -1)

    assert [l.id for l in await ledgers.find_active_ledgers()] == [travel.id, business.id, ledger.id]


@pytest.mark.asyncio
async def test_unknown_default_currency_is_rejected(database, owner):
    ledgers = database.get_ledger_service()

    with pytest.raises(UnknownCurrencyError):
        await ledgers.create_ledger({"name": "Bad", "default_currency": "XYZ", "owner_id": owner.id})

    assert await ledgers.find_all() == []


@pytest.mark.asyncio
async def test_missing_ledger_helpers_return_none(database):
    ledgers = database.get_ledger_service()

    assert await ledgers.archive_ledger("missing") is None
    assert await ledgers.update_sort_order("missing", 3) is None
