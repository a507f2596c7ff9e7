"""
Database session configuration.

This module defines the declarative base shared by every model and the
connection handle the services run their sessions through.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from ledgerstore.app.core.config import DeletePolicy
from ledgerstore.app.core.exceptions import NotInitializedError

if TYPE_CHECKING:
    from ledgerstore.app.db.backends import StorageBackend

# Create declarative base for models
Base = declarative_base()


class LedgerConnection:
    """
    Live connection to the ledger store.

    Owns the async engine and session factory for one initialized backend,
    plus the id factory and clock used to stamp new rows.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        backend: "StorageBackend",
        id_factory: Callable[[], str],
        clock: Callable[[], datetime],
        delete_policy: DeletePolicy = DeletePolicy.ORPHAN,
    ):
        self.engine = engine
        self.backend = backend
        self.id_factory = id_factory
        self.clock = clock
        self.delete_policy = delete_policy

        # Create async session factory
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self):
        """
        Yield a read-only session.

        Nothing is committed; the session is closed on exit.
        """
        async with self.backend.exclusive():
            self._check_open()
            async with self.session_factory() as session:
                try:
                    yield session
                finally:
                    await session.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Yield a session wrapped in one engine transaction.

        Commits on success, rolls back on error, then runs the backend's
        commit hook so persistence sees every committed write.
        """
        async with self.backend.exclusive():
            self._check_open()
            async with self.session_factory() as session:
                async with session.begin():
                    yield session
            await self.backend.after_commit(self.engine)

    def _check_open(self) -> None:
        # Services can outlive a teardown or an import
        if self.backend.closed:
            raise NotInitializedError("Connection was closed by teardown or import.")
