"""
Generic CRUD behaviour, exercised through the user service.
"""

import pytest
from pydantic import ValidationError

from ledgerstore.app.schemas.user import UserCreate


@pytest.mark.asyncio
async def test_create_then_find_returns_same_record(database):
    users = database.get_user_service()

    created = await users.create_user({"name": "Bob", "email": "bob@example.com"})
    found = await users.find_by_id(created.id)

    assert len(created.id) == 36
    assert created.is_active is True
    assert created.created_at == created.updated_at
    assert found.to_dict() == created.to_dict()


@pytest.mark.asyncio
async def test_create_accepts_pydantic_payload(database):
    users = database.get_user_service()

    created = await users.create(UserCreate(name="Carol"))

    assert created.name == "Carol"
    assert created.email is None
    assert await users.exists(created.id) is True


@pytest.mark.asyncio
async def test_missing_ids_are_not_errors(database):
    users = database.get_user_service()

    assert await users.find_by_id("missing") is None
    assert await users.update("missing", {"name": "Nobody"}) is None
    assert await users.delete("missing") is False
    assert await users.exists("missing") is False


@pytest.mark.asyncio
async def test_update_touches_updated_at_only(database):
    users = database.get_user_service()
    created = await users.create_user({"name": "Dave"})

    updated = await users.update(created.id, {"email": "dave@example.com"})

    assert updated.email == "dave@example.com"
    assert updated.name == "Dave"
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_delete_removes_row(database):
    users = database.get_user_service()
    created = await users.create_user({"name": "Eve"})

    assert await users.delete(created.id) is True
    assert await users.find_by_id(created.id) is None
    assert await users.delete(created.id) is False


@pytest.mark.asyncio
async def test_unknown_fields_are_rejected(database):
    users = database.get_user_service()
    created = await users.create_user({"name": "Frank"})

    with pytest.raises(ValidationError):
        await users.create({"name": "Grace", "nickname": "G"})
    with pytest.raises(ValidationError):
        await users.update(created.id, {"id": "other"})


@pytest.mark.asyncio
async def test_null_only_accepted_for_nullable_columns(database):
    users = database.get_user_service()
    created = await users.create_user({"name": "Heidi", "email": "heidi@example.com"})

    with pytest.raises(ValidationError):
        await users.update(created.id, {"name": None})
    with pytest.raises(ValidationError):
        await users.update(created.id, {"is_active": None})

    updated = await users.update(created.id, {"email": None})
    assert updated.name == "Heidi"
    assert updated.email is None


@pytest.mark.asyncio
async def test_find_by_email_and_active_users(database):
    users = database.get_user_service()
    zoe = await users.create_user({"name": "Zoe", "email": "zoe@example.com"})
    adam = await users.create_user({"name": "Adam"})
    mia = await users.create_user({"name": "Mia"})

    await users.deactivate_user(mia.id)

    assert (await users.find_by_email("zoe@example.com")).id == zoe.id
    assert await users.find_by_email("nobody@example.com") is None
    assert [u.id for u in await users.find_active_users()] == [adam.id, zoe.id]

    restored = await users.activate_user(mia.id)
    assert restored.is_active is True
    assert [u.name for u in await users.find_all()] == ["Adam", "Mia", "Zoe"]
