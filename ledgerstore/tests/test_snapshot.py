"""
Whole-store export/import tests for both backends.
"""

import asyncio
import base64
import json
from datetime import date

import pytest

from ledgerstore.app.core.exceptions import SnapshotError
from ledgerstore.app.db.bootstrap import EngineState


async def _seed(database):
    users = database.get_user_service()
    owner = await users.create_user({"name": "Alice"})
    ledger = await database.get_ledger_service().create_ledger(
        {"name": "Personal", "default_currency": "CNY", "owner_id": owner.id}
    )
    tag = await database.get_tag_service().create_tag({"name": "travel"})
    transaction = await database.get_transaction_service().create_transaction(
        {
            "amount": 4200,
            "currency": "CNY",
            "transaction_date": date(2024, 2, 29),
            "transaction_time": "08:30:00",
            "ledger_id": ledger.id,
            "creator_id": owner.id,
        },
        tag_ids=[tag.id],
    )
    return owner, transaction


@pytest.mark.asyncio
async def test_native_export_is_structured_dump(make_database):
    database = make_database()
    await database.initialize()
    await _seed(database)

    document = json.loads(await database.export_snapshot())
    tables = {table["name"]: table for table in document["tables"]}

    assert document["database"] == "test_ledger"
    assert document["mode"] == "full"
    assert document["version"] == 1
    assert set(tables) == {
        "users", "ledgers", "accounts", "categories", "tags", "transactions", "transaction_tags", "expenses"
    }
    assert len(tables["users"]["values"]) == 1
    assert tables["transaction_tags"]["values"][0] == [
        tables["transactions"]["values"][0][tables["transactions"]["columns"].index("id")],
        tables["tags"]["values"][0][tables["tags"]["columns"].index("id")],
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("platform", ["native", "web"])
async def test_import_replaces_existing_data(make_database, platform):
    database = make_database(platform)
    await database.initialize()
    owner, transaction = await _seed(database)
    snapshot = await database.export_snapshot()

    users = database.get_user_service()
    later = await users.create_user({"name": "Added after export"})

    await database.import_snapshot(snapshot)

    assert database.state == EngineState.READY
    assert database.get_user_service() is not users
    assert [u.id for u in await database.get_user_service().find_all()] == [owner.id]
    assert await database.get_user_service().find_by_id(later.id) is None

    restored = await database.get_transaction_service().find_by_id_with_tags(transaction.id)
    assert restored.to_dict() == transaction.to_dict()
    assert [t.name for t in restored.tags] == ["travel"]


@pytest.mark.asyncio
async def test_native_snapshot_moves_between_stores(make_database, tmp_path):
    source = make_database()
    await source.initialize()
    owner, _ = await _seed(source)
    snapshot = await source.export_snapshot()

    target = make_database(data_dir=tmp_path / "other", database_name="copy")
    await target.import_snapshot(snapshot)

    assert target.is_initialized() is True
    assert (await target.get_user_service().find_by_id(owner.id)).name == "Alice"


@pytest.mark.asyncio
async def test_web_export_is_none_until_first_write(make_database, redis_store):
    database = make_database("web")
    await database.initialize()

    assert await database.export_snapshot() is None

    await database.get_tag_service().create_tag({"name": "travel"})
    exported = await database.export_snapshot()

    assert base64.b64decode(exported) == redis_store.store[database.settings.snapshot_key]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "platform, payload",
    [
        ("native", "not json"),
        ("native", json.dumps({"database": "x", "mode": "partial", "exported_at": "2024-01-01T00:00:00", "tables": []})),
        (
            "native",
            json.dumps(
                {"database": "x", "exported_at": "2024-01-01T00:00:00", "tables": [{"name": "secrets", "columns": [], "values": []}]}
            ),
        ),
        (
            "native",
            json.dumps(
                {
                    "database": "x",
                    "exported_at": "2024-01-01T00:00:00",
                    "tables": [{"name": "users", "columns": ["id", "nickname"], "values": []}],
                }
            ),
        ),
        ("web", "%%% not base64 %%%"),
        ("web", base64.b64encode(b"definitely not sqlite").decode("ascii")),
    ],
)
async def test_rejected_import_leaves_store_usable(make_database, platform, payload):
    database = make_database(platform)
    await database.initialize()
    owner, _ = await _seed(database)

    with pytest.raises(SnapshotError) as exc_info:
        await database.import_snapshot(payload)

    assert exc_info.value.error_code == "ERR_SNAPSHOT_001"
    assert database.state == EngineState.READY
    assert (await database.get_user_service().find_by_id(owner.id)).name == "Alice"
    await database.get_user_service().create_user({"name": "Still writable"})


@pytest.mark.asyncio
async def test_duplicate_rows_are_rejected(make_database):
    database = make_database()
    await database.initialize()
    await _seed(database)
    document = json.loads(await database.export_snapshot())
    users = next(table for table in document["tables"] if table["name"] == "users")
    users["values"].append(users["values"][0])

    with pytest.raises(SnapshotError):
        await database.import_snapshot(json.dumps(document))

    assert len(await database.get_user_service().find_all()) == 1


def _tables(snapshot):
    return {table["name"]: table for table in json.loads(snapshot)["tables"]}


def _column(table, name):
    index = table["columns"].index(name)
    return [row[index] for row in table["values"]]


@pytest.mark.asyncio
async def test_web_import_is_not_overwritten_by_inflight_write(make_database, redis_store):
    database = make_database("web")
    await database.initialize()
    users = database.get_user_service()
    await users.create_user({"name": "Snapshot user"})
    snapshot = await database.export_snapshot()
    await users.create_user({"name": "After export"})

    redis_store.set_delay = 0.05
    writer = asyncio.ensure_future(users.create_user({"name": "Concurrent writer"}))
    await asyncio.sleep(0)

    await database.import_snapshot(snapshot)
    redis_store.set_delay = 0

    assert (await writer).name == "Concurrent writer"
    assert [u.name for u in await database.get_user_service().find_all()] == ["Snapshot user"]
    assert await database.export_snapshot() == snapshot

    restarted = make_database("web")
    await restarted.initialize()
    assert [u.name for u in await restarted.get_user_service().find_all()] == ["Snapshot user"]


@pytest.mark.asyncio
async def test_native_export_is_consistent_during_writes(make_database):
    database = make_database()
    await database.initialize()
    owner, transaction = await _seed(database)
    tag = (await database.get_tag_service().find_all())[0]
    transactions = database.get_transaction_service()
    stop = asyncio.Event()

    async def keep_writing():
        while not stop.is_set():
            await transactions.create_transaction(
                {
                    "amount": 100,
                    "currency": "CNY",
                    "transaction_date": date(2024, 3, 1),
                    "ledger_id": transaction.ledger_id,
                    "creator_id": owner.id,
                },
                tag_ids=[tag.id],
            )

    writer = asyncio.ensure_future(keep_writing())
    try:
        for _ in range(20):
            tables = _tables(await database.export_snapshot())
            transaction_ids = set(_column(tables["transactions"], "id"))

            assert set(_column(tables["transaction_tags"], "transaction_id")) <= transaction_ids
            await asyncio.sleep(0)
    finally:
        stop.set()
        await writer


@pytest.mark.asyncio
async def test_dangling_tag_links_are_rejected(make_database):
    database = make_database()
    await database.initialize()
    _, transaction = await _seed(database)
    document = json.loads(await database.export_snapshot())
    for table in document["tables"]:
        if table["name"] == "transactions":
            table["values"] = []

    with pytest.raises(SnapshotError):
        await database.import_snapshot(json.dumps(document))

    assert database.state == EngineState.READY
    assert await database.get_transaction_service().find_by_id(transaction.id) is not None
