"""
Expense service tests.
"""

from datetime import date

import pytest

from ledgerstore.app.core.exceptions import UnknownCurrencyError
from ledgerstore.app.domain.currency import DEFAULT_CURRENCY, to_storage_amount


@pytest.fixture
async def expenses(database):
    return database.get_expense_service()


@pytest.mark.asyncio
async def test_create_defaults_currency(expenses):
    created = await expenses.create_expense(
        {
            "amount": to_storage_amount(36.5, "CNY"),
            "description": "Lunch",
            "category": "Food",
            "date": date(2024, 5, 1),
        }
    )

    assert created.currency == DEFAULT_CURRENCY
    assert created.amount == 3650
    assert (await expenses.find_by_id(created.id)).to_dict() == created.to_dict()


@pytest.mark.asyncio
async def test_queries_and_totals(expenses):
    for amount, category, day, currency in (
        (1000, "Food", 1, "CNY"),
        (2000, "Transport", 2, "CNY"),
        (500, "Food", 3, "CNY"),
        (700, "Food", 4, "USD"),
    ):
        await expenses.create_expense(
            {
                "amount": amount,
                "currency": currency,
                "description": f"{category} {day}",
                "category": category,
                "date": date(2024, 5, day),
            }
        )

    food = await expenses.find_by_category("Food")
    in_range = await expenses.find_by_date_range(date(2024, 5, 2), date(2024, 5, 3))
    recent = await expenses.get_recent_expenses(limit=2)

    assert [e.date.day for e in food] == [4, 3, 1]
    assert [e.date.day for e in in_range] == [3, 2]
    assert [e.date.day for e in recent] == [4, 3]
    assert await expenses.get_total_amount() == 4200
    assert await expenses.get_total_amount("CNY") == 3500
    assert await expenses.get_total_amount("EUR") == 0

    with pytest.raises(UnknownCurrencyError):
        await expenses.get_total_amount("XYZ")


@pytest.mark.asyncio
async def test_total_of_empty_store_is_zero(expenses):
    assert await expenses.get_total_amount() == 0
