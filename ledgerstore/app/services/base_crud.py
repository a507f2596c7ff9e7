"""
Base CRUD service providing common database operations.

Every call opens its own session. Writes run inside one engine transaction
(see ``LedgerConnection.transaction``) so each call commits atomically.
"""

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerstore.app.core.config import DeletePolicy
from ledgerstore.app.core.exceptions import ReferentialIntegrityError
from ledgerstore.app.db.session import LedgerConnection

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")
Payload = Union[BaseModel, Mapping[str, Any]]


class BaseCRUDService(Generic[ModelType]):
    """
    Generic repository keyed by the string ``id`` primary key.

    Subclasses set ``model`` plus the pydantic ``create_schema`` and
    ``update_schema`` used to validate partial payloads.
    """

    model: Type[ModelType]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    resource_name: str = "Entity"

    def __init__(self, db: LedgerConnection):
        self.db = db

    def default_order(self) -> tuple:
        """Natural list ordering: sort order, then name."""
        return (self.model.sort_order.asc(), self.model.name.asc())

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def find_by_id(self, key: str) -> Optional[ModelType]:
        """Find one entity by primary key, or None."""
        async with self.db.session() as session:
            return await session.get(self.model, key)

    async def find_all(self) -> List[ModelType]:
        """Find all entities, unfiltered, in natural order."""
        return await self._select()

    async def exists(self, key: str) -> bool:
        """Check if an entity exists by primary key."""
        async with self.db.session() as session:
            result = await session.execute(
                select(func.count()).select_from(self.model).where(self.model.id == key)
            )
            return result.scalar_one() > 0

    async def _select(self, *criteria, order_by: tuple = None, limit: Optional[int] = None) -> List[ModelType]:
        query = select(self.model).where(*criteria).order_by(*(order_by or self.default_order()))
        if limit is not None:
            query = query.limit(limit)

        async with self.db.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def _first(self, *criteria) -> Optional[ModelType]:
        rows = await self._select(*criteria, limit=1)
        return rows[0] if rows else None

    # =========================================================================
    # Write Operations
    # =========================================================================

    def _payload(self, data: Payload, schema: Type[BaseModel]) -> Dict[str, Any]:
        """Validate a partial payload and return only the fields it sets."""
        if isinstance(data, schema):
            validated = data
        elif isinstance(data, BaseModel):
            validated = schema.model_validate(data.model_dump(exclude_unset=True))
        else:
            validated = schema.model_validate(dict(data))
        return validated.model_dump(exclude_unset=True)

    def _prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for entity-specific defaults applied at creation."""
        return values

    def _new_entity(self, values: Dict[str, Any]) -> ModelType:
        now = self.db.clock()
        return self.model(id=self.db.id_factory(), created_at=now, updated_at=now, **values)

    async def create(self, data: Payload) -> ModelType:
        """
        Create a new entity.

        Generates the id and timestamps, persists, and returns the entity.
        """
        entity = self._new_entity(self._prepare_create(self._payload(data, self.create_schema)))

        async with self.db.transaction() as session:
            session.add(entity)

        logger.debug(f"Created {self.resource_name} {entity.id}")
        return entity

    async def update(self, key: str, data: Payload) -> Optional[ModelType]:
        """
        Update an existing entity with the fields set in ``data``.

        Returns:
            The re-read entity as committed, or None if no row has ``key``
        """
        return await self._update_values(key, self._payload(data, self.update_schema))

    async def _update_values(self, key: str, values: Dict[str, Any]) -> Optional[ModelType]:
        """
        Apply column values (plain or SQL expressions) in one UPDATE statement.

        Touches ``updated_at`` and re-reads the row after commit.
        """
        values = {**values, "updated_at": self.db.clock()}
        statement = (
            update(self.model)
            .where(self.model.id == key)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        async with self.db.transaction() as session:
            result = await session.execute(statement)
            updated = result.rowcount > 0

        if not updated:
            return None
        return await self.find_by_id(key)

    async def delete(self, key: str) -> bool:
        """
        Delete an entity by primary key.

        Returns:
            True if a row was removed, False if none matched
        """
        async with self.db.transaction() as session:
            await self._before_delete(session, key)
            result = await session.execute(
                delete(self.model)
                .where(self.model.id == key)
                .execution_options(synchronize_session=False)
            )
            deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Deleted {self.resource_name} {key}")
        return deleted

    async def _before_delete(self, session: AsyncSession, key: str) -> None:
        """Hook run in the delete transaction before the row is removed."""

    async def _apply_delete_policy(self, session: AsyncSession, key: str, references: Dict[str, int], cascade) -> None:
        """
        Enforce the connection's delete policy for a referenced entity.

        Args:
            session: Session of the delete transaction
            key: Primary key being deleted
            references: Count of referencing rows per table name
            cascade: Coroutine function removing the referencing rows
        """
        references = {name: count for name, count in references.items() if count}
        if not references:
            return

        policy = self.db.delete_policy
        if policy == DeletePolicy.RESTRICT:
            raise ReferentialIntegrityError(self.resource_name, key, references)
        if policy == DeletePolicy.CASCADE:
            logger.info(f"Cascading delete of {self.resource_name} {key}: {references}")
            await cascade(session)
        else:
            logger.warning(f"Deleting {self.resource_name} {key} leaves dangling references: {references}")
