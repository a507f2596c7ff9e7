"""
Engine bootstrap and connection manager.

``LedgerDatabase`` owns the one engine and the cached services for a
ledger store. It picks the storage backend per platform, initializes once
no matter how many callers race, and replaces everything wholesale on
teardown and snapshot import.
"""

import asyncio
import enum
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from ledgerstore.app.core.config import Settings, settings as default_settings
from ledgerstore.app.core.exceptions import NotInitializedError
from ledgerstore.app.core.observability import log_operation
from ledgerstore.app.core.redis_client import KeyValueStore, create_redis_store
from ledgerstore.app.db.backends import (
    BrowserSQLiteBackend,
    NativeSQLiteBackend,
    StorageBackend,
    detect_web_platform,
)
from ledgerstore.app.db.session import Base, LedgerConnection
from ledgerstore.app.models import registry  # noqa: F401  (registers tables)
from ledgerstore.app.services.account_service import AccountService
from ledgerstore.app.services.category_service import CategoryService
from ledgerstore.app.services.expense_service import ExpenseService
from ledgerstore.app.services.ledger_service import LedgerService
from ledgerstore.app.services.tag_service import TagService
from ledgerstore.app.services.transaction_service import TransactionService
from ledgerstore.app.services.user_service import UserService

logger = logging.getLogger(__name__)


class EngineState(str, enum.Enum):
    """Lifecycle of a ledger database."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ServiceRegistry:
    """One instance of every entity service, bound to one connection."""

    def __init__(self, connection: LedgerConnection):
        self.users = UserService(connection)
        self.ledgers = LedgerService(connection)
        self.accounts = AccountService(connection)
        self.categories = CategoryService(connection)
        self.tags = TagService(connection)
        self.transactions = TransactionService(connection)
        self.expenses = ExpenseService(connection)


class LedgerDatabase:
    """
    Storage context for one ledger store.

    Args:
        settings: Configuration (defaults to the module-level settings)
        is_web_platform: Predicate choosing the browser backend
        kv_store_factory: Builds the key-value store used by the browser backend
        id_factory: Produces primary keys for new rows
        clock: Produces ``created_at``/``updated_at`` timestamps
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        is_web_platform: Optional[Callable[[], bool]] = None,
        kv_store_factory: Optional[Callable[[Settings], KeyValueStore]] = None,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings or default_settings
        self._is_web_platform = is_web_platform or (lambda: detect_web_platform(self.settings))
        self._kv_store_factory = kv_store_factory or create_redis_store
        self.id_factory = id_factory
        self.clock = clock

        self._state = EngineState.UNINITIALIZED
        self._init_task: Optional[asyncio.Task] = None
        self._kv_store: Optional[KeyValueStore] = None
        self._backend: Optional[StorageBackend] = None
        self._connection: Optional[LedgerConnection] = None
        self._services: Optional[ServiceRegistry] = None

    @property
    def state(self) -> EngineState:
        return self._state

    def is_initialized(self) -> bool:
        return self._state is EngineState.READY

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """
        Open the store and build the services.

        Concurrent callers share one attempt and all see its outcome. A
        failed attempt resets the state so a later call retries cleanly.
        """
        if self._state is EngineState.READY:
            return

        if self._init_task is None:
            self._state = EngineState.INITIALIZING
            self._init_task = asyncio.get_running_loop().create_task(self._initialize())

        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        backend = None
        engine = None
        try:
            backend = self._create_backend()
            async with log_operation("initialize", backend.name) as log_data:
                engine = await backend.open()
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                log_data["database"] = self.settings.database_name
        except Exception:
            if engine is not None:
                await backend.close(engine)
            self._state = EngineState.UNINITIALIZED
            self._init_task = None
            raise

        connection = LedgerConnection(
            engine,
            backend,
            id_factory=self.id_factory,
            clock=self.clock,
            delete_policy=self.settings.delete_policy,
        )
        self._backend = backend
        self._connection = connection
        self._services = ServiceRegistry(connection)
        self._state = EngineState.READY
        self._init_task = None

    def _create_backend(self) -> StorageBackend:
        if not self._is_web_platform():
            return NativeSQLiteBackend(self.settings)

        if self._kv_store is None:
            self._kv_store = self._kv_store_factory(self.settings)
        return BrowserSQLiteBackend(self.settings, self._kv_store)

    async def teardown(self) -> None:
        """
        Close the engine and drop the cached services.

        Safe to call repeatedly. An in-flight initialization is allowed to
        settle first and is then torn down as well. Sessions already open on
        the engine finish before it is disposed.
        """
        await self._settle_initialization()
        connection, backend = self._detach()
        if connection is None:
            return

        async with backend.exclusive():
            await self._close(connection, backend)

    async def _settle_initialization(self) -> None:
        if self._init_task is not None:
            await asyncio.wait({self._init_task})

    def _detach(self):
        """Reset to UNINITIALIZED and return the previous connection and backend."""
        connection, backend = self._connection, self._backend
        self._services = None
        self._connection = None
        self._backend = None
        self._init_task = None
        self._state = EngineState.UNINITIALIZED
        return connection, backend

    async def _close(self, connection: LedgerConnection, backend: StorageBackend) -> None:
        async with log_operation("teardown", backend.name):
            await backend.close(connection.engine)

    # =========================================================================
    # Snapshots
    # =========================================================================

    async def export_snapshot(self) -> Optional[str]:
        """
        Export the whole store.

        Returns:
            JSON dump (native) or base64 image (web); None if the web store
            has never persisted anything

        Raises:
            NotInitializedError: If the store is not ready
        """
        connection = self.get_connection()
        async with log_operation("export", self._backend.name) as log_data:
            data = await self._backend.export_snapshot(connection.engine)
            log_data["size"] = len(data) if data else 0
        return data

    async def import_snapshot(self, data: str) -> None:
        """
        Replace the whole store with ``data`` and re-initialize.

        The payload is validated before anything is written, so a rejected
        snapshot leaves the current store untouched and usable. The write and
        the teardown run under the backend's exclusive section, so a commit
        in flight persists before the import and none can persist after it.

        Raises:
            SnapshotError: If ``data`` is not a valid snapshot for this platform
        """
        await self._settle_initialization()
        backend = self._backend or self._create_backend()

        async with backend.exclusive():
            async with log_operation("import", backend.name) as log_data:
                await backend.import_snapshot(data)
                log_data["size"] = len(data)

            connection, _ = self._detach()
            if connection is not None:
                await self._close(connection, backend)

        await self.initialize()

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_connection(self) -> LedgerConnection:
        if self._state is not EngineState.READY:
            raise NotInitializedError()
        return self._connection

    def _registry(self) -> ServiceRegistry:
        if self._state is not EngineState.READY:
            raise NotInitializedError()
        return self._services

    def get_user_service(self) -> UserService:
        return self._registry().users

    def get_ledger_service(self) -> LedgerService:
        return self._registry().ledgers

    def get_account_service(self) -> AccountService:
        return self._registry().accounts

    def get_category_service(self) -> CategoryService:
        return self._registry().categories

    def get_tag_service(self) -> TagService:
        return self._registry().tags

    def get_transaction_service(self) -> TransactionService:
        return self._registry().transactions

    def get_expense_service(self) -> ExpenseService:
        return self._registry().expenses
