"""
Storage backends for the ledger engine.

Native platforms keep a SQLite file on disk. In-browser runtimes keep the
database in memory and persist its binary image to an async key-value
store after every commit.
"""

import asyncio
import base64
import binascii
import logging
import os
import sqlite3
import sys
import tempfile
from abc import ABC, abstractmethod
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import aiosqlite
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from ledgerstore.app.core.config import Settings
from ledgerstore.app.core.exceptions import SnapshotError
from ledgerstore.app.core.redis_client import KeyValueStore
from ledgerstore.app.db.snapshot import dump_tables, parse_snapshot, restore_to_file

logger = logging.getLogger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"

PLATFORM_NATIVE = "native"
PLATFORM_WEB = "web"
PLATFORM_AUTO = "auto"


def detect_web_platform(settings: Settings) -> bool:
    """
    Decide whether the process runs in a browser.

    ``auto`` treats Pyodide (``sys.platform == "emscripten"``) as web.

    Raises:
        ValueError: If ``settings.platform`` is not auto, native or web
    """
    platform = settings.platform.lower()
    if platform == PLATFORM_WEB:
        return True
    if platform == PLATFORM_NATIVE:
        return False
    if platform == PLATFORM_AUTO:
        return sys.platform == "emscripten"
    raise ValueError(f"Unknown platform setting: {settings.platform}")


class StorageBackend(ABC):
    """Engine factory plus persistence hooks for one platform."""

    name: str = "backend"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.closed = False

    @abstractmethod
    async def open(self) -> AsyncEngine:
        """Create the engine over the persisted database."""

    def exclusive(self):
        """Async context held around every session on the engine."""
        return nullcontext()

    async def after_commit(self, engine: AsyncEngine) -> None:
        """Called after every committed write transaction."""

    @abstractmethod
    async def export_snapshot(self, engine: AsyncEngine) -> Optional[str]:
        """Return the whole store as an opaque string, or None if nothing is stored."""

    @abstractmethod
    async def import_snapshot(self, data: str) -> None:
        """Validate ``data`` and write it to the persistence target."""

    async def close(self, engine: AsyncEngine) -> None:
        """Dispose of the engine. Sessions opened afterwards are refused."""
        self.closed = True
        await engine.dispose()


class NativeSQLiteBackend(StorageBackend):
    """SQLite database file under ``settings.data_dir``."""

    name = PLATFORM_NATIVE

    @property
    def database_path(self) -> Path:
        return self.settings.database_path

    async def open(self) -> AsyncEngine:
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Opening native database at {self.database_path}")
        return create_async_engine(
            f"sqlite+aiosqlite:///{self.database_path}",
            echo=self.settings.db_echo,
            connect_args={"timeout": self.settings.db_timeout},
        )

    async def export_snapshot(self, engine: AsyncEngine) -> Optional[str]:
        return await dump_tables(engine, self.settings.database_name)

    async def import_snapshot(self, data: str) -> None:
        document = parse_snapshot(data)
        await restore_to_file(document, self.database_path)


class BrowserSQLiteBackend(StorageBackend):
    """
    In-memory SQLite seeded from and persisted to a key-value store.

    One static connection holds the database. Its binary image is stored
    under ``settings.snapshot_key`` after each commit.
    """

    name = PLATFORM_WEB

    def __init__(self, settings: Settings, store: KeyValueStore):
        super().__init__(settings)
        self.store = store
        # Sessions share the static connection, so they must not interleave
        self._lock = asyncio.Lock()

    def exclusive(self):
        return self._lock

    async def open(self) -> AsyncEngine:
        image = await self.store.get(self.settings.snapshot_key)
        if image:
            logger.info(f"Loading persisted database image ({len(image)} bytes)")

        async def connect() -> aiosqlite.Connection:
            # Backups run on the source connection's worker thread
            connection = await aiosqlite.connect(":memory:", check_same_thread=False)
            if image:
                await _restore_image(image, connection)
            return connection

        return create_async_engine(
            "sqlite+aiosqlite://",
            echo=self.settings.db_echo,
            poolclass=StaticPool,
            async_creator=connect,
        )

    async def after_commit(self, engine: AsyncEngine) -> None:
        image = await self._serialize(engine)
        await self.store.set(self.settings.snapshot_key, image)
        logger.debug(f"Persisted database image ({len(image)} bytes)")

    async def _serialize(self, engine: AsyncEngine) -> bytes:
        async with engine.connect() as conn:
            raw = await conn.get_raw_connection()
            return await _image_of(raw.driver_connection)

    async def export_snapshot(self, engine: AsyncEngine) -> Optional[str]:
        image = await self.store.get(self.settings.snapshot_key)
        if not image:
            return None
        return base64.b64encode(image).decode("ascii")

    async def import_snapshot(self, data: str) -> None:
        try:
            image = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise SnapshotError("Snapshot is not valid base64") from e

        await _check_image(image)
        await self.store.set(self.settings.snapshot_key, image)


async def _image_of(connection: aiosqlite.Connection) -> bytes:
    """Copy a live database into a temporary file and return its bytes."""
    fd, temp_name = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    try:
        async with aiosqlite.connect(temp_name, check_same_thread=False) as target:
            await connection.backup(target)
        return await asyncio.to_thread(Path(temp_name).read_bytes)
    finally:
        os.unlink(temp_name)


async def _restore_image(image: bytes, target: aiosqlite.Connection) -> None:
    """Copy a binary database image into an open connection."""
    fd, temp_name = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    try:
        await asyncio.to_thread(Path(temp_name).write_bytes, image)
        async with aiosqlite.connect(temp_name) as source:
            await source.backup(target)
    finally:
        os.unlink(temp_name)


async def _check_image(image: bytes) -> None:
    """
    Reject byte strings that are not a readable SQLite database.

    Raises:
        SnapshotError: On a bad header or a failed integrity check
    """
    if not image.startswith(SQLITE_HEADER):
        raise SnapshotError("Snapshot is not a SQLite database image")

    fd, temp_name = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    try:
        await asyncio.to_thread(Path(temp_name).write_bytes, image)
        async with aiosqlite.connect(temp_name) as conn:
            async with conn.execute("PRAGMA quick_check") as cursor:
                row = await cursor.fetchone()
    except sqlite3.DatabaseError as e:
        raise SnapshotError(f"Snapshot image is unreadable: {e}") from e
    finally:
        os.unlink(temp_name)

    if row is None or row[0] != "ok":
        raise SnapshotError("Snapshot image failed the integrity check")
