"""
Category service tests: hierarchy and filters.
"""

import pytest
from pydantic import ValidationError

from ledgerstore.app.models.enums import CategoryType


@pytest.fixture
async def categories(database):
    return database.get_category_service()


@pytest.fixture
async def tree(categories, ledger):
    food = await categories.create_category({"name": "Food", "ledger_id": ledger.id})
    salary = await categories.create_category(
        {"name": "Salary", "category_type": CategoryType.INCOME, "ledger_id": ledger.id}
    )
    dining = await categories.create_category({"name": "Dining", "ledger_id": ledger.id, "parent_id": food.id})
    coffee = await categories.create_category({"name": "Coffee", "ledger_id": ledger.id, "parent_id": dining.id})
    return {"food": food, "salary": salary, "dining": dining, "coffee": coffee}


@pytest.mark.asyncio
async def test_root_categories_and_children(categories, ledger, tree):
    roots = await categories.find_root_categories(ledger.id)
    expense_roots = await categories.find_root_categories(ledger.id, CategoryType.EXPENSE)

    assert [c.name for c in roots] == ["Food", "Salary"]
    assert [c.name for c in expense_roots] == ["Food"]
    assert [c.name for c in await categories.find_children(tree["food"].id)] == ["Dining"]
    assert [c.name for c in await categories.find_by_type(ledger.id, CategoryType.INCOME)] == ["Salary"]


@pytest.mark.asyncio
async def test_archived_categories_are_hidden(categories, ledger, tree):
    await categories.archive_category(tree["dining"].id)

    assert await categories.find_children(tree["food"].id) == []
    assert "Dining" not in [c.name for c in await categories.find_by_ledger_id(ledger.id)]

    restored = await categories.restore_category(tree["dining"].id)
    assert restored.is_active is True


@pytest.mark.asyncio
async def test_move_to_parent(categories, ledger, tree):
    moved = await categories.move_to_parent(tree["coffee"].id, tree["food"].id)
    promoted = await categories.move_to_parent(tree["dining"].id, None)

    assert moved.parent_id == tree["food"].id
    assert promoted.parent_id is None
    assert [c.name for c in await categories.find_root_categories(ledger.id)] == ["Dining", "Food", "Salary"]


@pytest.mark.asyncio
async def test_move_into_own_subtree_is_rejected(categories, tree):
    with pytest.raises(ValueError):
        await categories.move_to_parent(tree["food"].id, tree["coffee"].id)
    with pytest.raises(ValueError):
        await categories.move_to_parent(tree["food"].id, tree["food"].id)

    assert (await categories.find_by_id(tree["food"].id)).parent_id is None


@pytest.mark.asyncio
async def test_category_type_cannot_be_updated(categories, tree):
    with pytest.raises(ValidationError):
        await categories.update(tree["food"].id, {"category_type": CategoryType.INCOME})


@pytest.mark.asyncio
async def test_update_sort_order(categories, ledger, tree):
    await categories.update_sort_order(tree["salary"].id, -5)

    assert [c.name for c in await categories.find_root_categories(ledger.id)] == ["Salary", "Food"]
