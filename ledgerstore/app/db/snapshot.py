"""
Structured JSON dump and restore of the ledger tables.

Used by the native backend. Rows are read and written with raw driver SQL
so values round-trip exactly as SQLite stores them.
"""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ledgerstore.app.core.exceptions import SnapshotError
from ledgerstore.app.db.session import Base
from ledgerstore.app.models import registry  # noqa: F401  (registers tables)
from ledgerstore.app.schemas.snapshot import SnapshotDocument, SnapshotTable

logger = logging.getLogger(__name__)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


async def dump_tables(engine: AsyncEngine, database: str) -> str:
    """
    Export every ledger table as a JSON snapshot document.

    Args:
        engine: Engine of the live database
        database: Database name recorded in the document

    Returns:
        The serialized ``SnapshotDocument``
    """
    tables = []
    async with engine.connect() as conn:
        # One read transaction, so every table comes from the same commit
        await conn.exec_driver_sql("BEGIN")
        try:
            for table in Base.metadata.sorted_tables:
                columns = [column.name for column in table.columns]
                result = await conn.exec_driver_sql(
                    f"SELECT {', '.join(_quote(c) for c in columns)} FROM {_quote(table.name)} ORDER BY rowid"
                )
                tables.append(
                    SnapshotTable(name=table.name, columns=columns, values=[list(row) for row in result.all()])
                )
        finally:
            await conn.rollback()

    document = SnapshotDocument(
        database=database,
        exported_at=datetime.now(timezone.utc),
        tables=tables,
    )
    return document.model_dump_json()


def parse_snapshot(data: str) -> SnapshotDocument:
    """
    Decode and check a snapshot document against the ledger schema.

    Raises:
        SnapshotError: If the payload is not a snapshot document, names
            tables or columns the schema does not have, or links tags and
            transactions missing from the dump
    """
    try:
        document = SnapshotDocument.model_validate_json(data)
    except ValidationError as e:
        raise SnapshotError(
            "Snapshot is not a valid ledger dump",
            details={"error_count": e.error_count()}
        ) from e

    known_tables = Base.metadata.tables
    for snapshot_table in document.tables:
        table = known_tables.get(snapshot_table.name)
        if table is None:
            raise SnapshotError(
                f"Unknown table in snapshot: {snapshot_table.name}",
                details={"table": snapshot_table.name}
            )

        unknown_columns = sorted(set(snapshot_table.columns) - set(table.columns.keys()))
        if unknown_columns:
            raise SnapshotError(
                f"Unknown columns in snapshot table {snapshot_table.name}",
                details={"table": snapshot_table.name, "columns": unknown_columns}
            )

        width = len(snapshot_table.columns)
        if any(len(row) != width for row in snapshot_table.values):
            raise SnapshotError(
                f"Row width does not match columns in snapshot table {snapshot_table.name}",
                details={"table": snapshot_table.name}
            )

    _check_tag_links(document)
    return document


def _ids(document: SnapshotDocument, table_name: str) -> set:
    ids = set()
    for snapshot_table in document.tables:
        if snapshot_table.name == table_name and "id" in snapshot_table.columns:
            index = snapshot_table.columns.index("id")
            ids.update(row[index] for row in snapshot_table.values if isinstance(row[index], str))
    return ids


def _known(value, ids: set) -> bool:
    return isinstance(value, str) and value in ids


def _check_tag_links(document: SnapshotDocument) -> None:
    """Reject tag join rows naming a transaction or tag the dump does not hold."""
    transaction_ids = _ids(document, "transactions")
    tag_ids = _ids(document, "tags")

    for snapshot_table in document.tables:
        if snapshot_table.name != "transaction_tags":
            continue
        for row in snapshot_table.values:
            link = dict(zip(snapshot_table.columns, row))
            if not (_known(link.get("transaction_id"), transaction_ids) and _known(link.get("tag_id"), tag_ids)):
                raise SnapshotError(
                    "Snapshot tag link names a missing transaction or tag",
                    details={"table": snapshot_table.name, "link": link}
                )


async def _load_document(engine: AsyncEngine, document: SnapshotDocument) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        for snapshot_table in document.tables:
            if not snapshot_table.values:
                continue
            columns = ", ".join(_quote(c) for c in snapshot_table.columns)
            placeholders = ", ".join("?" for _ in snapshot_table.columns)
            await conn.exec_driver_sql(
                f"INSERT INTO {_quote(snapshot_table.name)} ({columns}) VALUES ({placeholders})",
                [tuple(row) for row in snapshot_table.values],
            )


async def restore_to_file(document: SnapshotDocument, path: Path) -> None:
    """
    Replace the database file at ``path`` with the contents of ``document``.

    The new database is built in a temporary file next to ``path`` and moved
    into place with one atomic rename. On failure ``path`` is left untouched.

    Raises:
        SnapshotError: If the rows cannot be inserted (e.g. duplicate keys)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".db", dir=path.parent)
    os.close(fd)

    engine = create_async_engine(f"sqlite+aiosqlite:///{temp_name}")
    try:
        await _load_document(engine, document)
    except SQLAlchemyError as e:
        await engine.dispose()
        os.unlink(temp_name)
        raise SnapshotError(f"Snapshot rows could not be restored: {e}") from e
    except Exception:
        await engine.dispose()
        os.unlink(temp_name)
        raise

    await engine.dispose()
    os.replace(temp_name, path)
    logger.info(f"Restored {len(document.tables)} tables into {path}")
