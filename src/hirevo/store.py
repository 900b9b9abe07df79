"""Entity store gateway used by the report engine.

The engine only talks to the :class:`EntityStore` protocol. The SQLAlchemy
implementation below maps it onto an ``AsyncSession``:

- lookups and filtered queries wrap driver failures in ``QueryError``
- ``upsert_no_validate`` writes computed rows without content validation,
  using ``INSERT ... ON CONFLICT DO UPDATE`` on the model's natural key for
  rows that are not yet persistent; only values too wide for their NUMERIC
  column are refused
- ``lock`` serializes work on one key: a transaction-scoped advisory lock on
  PostgreSQL, a per-key ``asyncio.Lock`` elsewhere
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, Protocol, TypeVar

from sqlalchemy import Numeric, inspect, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hirevo.database import acquire_advisory_xact_lock
from hirevo.errors import NotFoundError, QueryError, StorageError
from hirevo.models import Base

M = TypeVar("M", bound=Base)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class KeyedLock:
    """Registry of per-key asyncio locks.

    Locks are created on first use and dropped once nobody holds or
    waits for them, so the registry only grows with concurrent keys.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


class EntityStore(Protocol):
    """Storage collaborator consumed by the report aggregators."""

    async def find_by_id(self, model: type[M], entity_id: str) -> M:
        ...

    async def find_by_filter(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Sequence[Any] | None = None,
        limit: int = 0,
        offset: int = 0,
    ) -> list[M]:
        ...

    async def find_first_by_filter(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Sequence[Any] | None = None,
    ) -> M:
        ...

    async def upsert_no_validate(self, entity: M) -> M:
        ...

    def create(self, model: type[M], **values: Any) -> M:
        ...

    async def save(self, entity: M) -> M:
        ...

    def lock(self, key: str) -> Any:
        ...

    def isolated(self) -> Any:
        ...


def collection_name(model: type[Base]) -> str:
    """Collection (table) name for a model class."""
    return model.__tablename__


class SqlAlchemyEntityStore:
    """EntityStore over a SQLAlchemy async session."""

    def __init__(self, session: AsyncSession, locks: KeyedLock | None = None):
        self.session = session
        self.locks = locks or KeyedLock()

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    async def find_by_id(self, model: type[M], entity_id: str) -> M:
        """Load one entity by primary key.

        Raises:
            NotFoundError: If no row has that id
            QueryError: If the lookup itself fails
        """
        try:
            entity = await self.session.get(model, entity_id)
        except SQLAlchemyError as exc:
            raise QueryError(collection_name(model), str(exc)) from exc
        if entity is None:
            raise NotFoundError(collection_name(model), entity_id)
        return entity

    async def find_by_filter(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Sequence[Any] | None = None,
        limit: int = 0,
        offset: int = 0,
    ) -> list[M]:
        """Load all entities matching ``criteria``.

        A ``limit`` of 0 means no limit.
        """
        query = select(model).where(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        if limit:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise QueryError(collection_name(model), str(exc)) from exc
        return list(result.scalars().all())

    async def find_first_by_filter(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Sequence[Any] | None = None,
    ) -> M:
        """Load the first entity matching ``criteria`` or raise NotFoundError."""
        rows = await self.find_by_filter(model, *criteria, order_by=order_by, limit=1)
        if not rows:
            raise NotFoundError(
                collection_name(model),
                " AND ".join(str(c) for c in criteria) or "any",
            )
        return rows[0]

    def create(self, model: type[M], **values: Any) -> M:
        """Build a transient entity with every column at its default value."""
        entity = model(**values)
        for column in model.__table__.columns:
            attr = model.__mapper__.get_property_by_column(column).key
            if attr in values or column.default is None:
                continue
            default = column.default
            if default.is_scalar:
                setattr(entity, attr, default.arg)
            elif default.is_callable:
                setattr(entity, attr, default.arg(None))
        return entity

    async def save(self, entity: M) -> M:
        """Add an entity to the session and flush it."""
        self.session.add(entity)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(
                collection_name(type(entity)), _identity(entity), str(exc)
            ) from exc
        return entity

    async def upsert_no_validate(self, entity: M) -> M:
        """Persist a system-computed entity and return the stored row.

        Persistent entities are flushed as a plain UPDATE. New entities whose
        model declares ``__natural_key__`` are written with an upsert on that
        key, so two writers creating the same report converge on one row.
        """
        _check_numeric_bounds(entity)
        model = type(entity)
        natural_key = getattr(model, "__natural_key__", None)
        insert = _UPSERT_INSERTS.get(self.dialect_name)

        if inspect(entity).persistent or natural_key is None or insert is None:
            return await self.save(entity)

        values = {
            column.name: getattr(entity, model.__mapper__.get_property_by_column(column).key)
            for column in model.__table__.columns
        }
        values = {
            name: value
            for name, value in values.items()
            if value is not None or model.__table__.c[name].server_default is None
        }
        stmt = insert(model.__table__).values(values)
        protected = {natural_key, *(c.name for c in model.__table__.primary_key)}
        stmt = stmt.on_conflict_do_update(
            index_elements=[natural_key],
            set_={
                name: stmt.excluded[name]
                for name in values
                if name not in protected and name != "created_at"
            },
        )

        key_column = getattr(model, natural_key)
        try:
            await self.session.execute(stmt)
            result = await self.session.execute(
                select(model)
                .where(key_column == values[natural_key])
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            raise StorageError(
                collection_name(model), values.get(natural_key), str(exc)
            ) from exc
        return result.scalar_one()

    @asynccontextmanager
    async def lock(self, key: str) -> AsyncIterator[None]:
        """Serialize read-compute-write sequences on ``key``.

        On PostgreSQL the advisory lock is the only lock taken. It is held until
        the transaction ends and is reentrant for the session, so a second
        recomputation of ``key`` in the same transaction does not wait. No
        in-process lock is held while waiting on the database.
        """
        if self.dialect_name == "postgresql":
            try:
                await acquire_advisory_xact_lock(self.session, key)
            except SQLAlchemyError as exc:
                raise QueryError("advisory_lock", str(exc)) from exc
            yield
            return
        async with self.locks.hold(key):
            yield

    @asynccontextmanager
    async def isolated(self) -> AsyncIterator[None]:
        """Run a block whose failure must not abort the enclosing transaction.

        Uses a SAVEPOINT on PostgreSQL, where any failed statement poisons
        the transaction. Elsewhere the block runs as is.
        """
        if self.dialect_name != "postgresql":
            yield
            return
        async with self.session.begin_nested():
            yield


def _identity(entity: Base) -> str | None:
    identity = inspect(entity).identity
    if identity:
        return str(identity[0])
    pk = type(entity).__mapper__.primary_key[0]
    value = getattr(entity, type(entity).__mapper__.get_property_by_column(pk).key, None)
    return str(value) if value is not None else None


def _check_numeric_bounds(entity: Base) -> None:
    """Raise StorageError if a decimal value cannot fit its NUMERIC column.

    SQLite stores such values silently, PostgreSQL rejects them; both end up
    as the same error here.
    """
    model = type(entity)
    for column in model.__table__.columns:
        column_type = column.type
        if not isinstance(column_type, Numeric) or column_type.precision is None:
            continue
        value = getattr(entity, model.__mapper__.get_property_by_column(column).key)
        if value is None:
            continue
        limit = Decimal(10) ** (column_type.precision - (column_type.scale or 0))
        if abs(Decimal(value)) >= limit:
            raise StorageError(
                collection_name(model),
                _identity(entity),
                f"{column.name}={value} does not fit "
                f"NUMERIC({column_type.precision},{column_type.scale or 0})",
            )
