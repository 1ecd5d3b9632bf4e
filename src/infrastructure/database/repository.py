"""Tenant-scoped repository implementation for database operations.

This module provides a generic repository that implements the storage side
of every resource service using async SQLAlchemy. Every statement is scoped
to one account: a row owned by another account behaves exactly like a row
that does not exist.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy import ColumnElement, Select, select
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ApplicationError
from src.domain.pagination import ListQuery, TimeRange
from src.infrastructure.database.base import TenantModel
from src.infrastructure.database.models import ApiKey


def time_range_conditions(
    column: ColumnElement[datetime], time_range: TimeRange
) -> list[ColumnElement[bool]]:
    """Translate a time range into one condition per supplied bound.

    Args:
        column: The timestamp column to bound.
        time_range: Bounds from the list request.

    Returns:
        list[ColumnElement[bool]]: Conditions to AND together.
    """
    conditions = []
    if time_range.gt is not None:
        conditions.append(column > time_range.gt)
    if time_range.gte is not None:
        conditions.append(column >= time_range.gte)
    if time_range.lt is not None:
        conditions.append(column < time_range.lt)
    if time_range.lte is not None:
        conditions.append(column <= time_range.lte)
    return conditions


@contextmanager
def persistence_errors(model_name: str, operation: str) -> Iterator[None]:
    """Turn SQLAlchemy and driver failures into an ``ApplicationError``.

    The original exception is kept as the cause for logging; clients only
    see the generic message.
    """
    try:
        yield
    except SQLAlchemyError as e:
        raise ApplicationError(
            context={"model": model_name, "operation": operation}, cause=e
        ) from e


class TenantRepository[T: TenantModel]:
    """Repository providing tenant-scoped CRUD and cursor listing.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        groups = TenantRepository(session, Group)
        group = await groups.get(group_id, account_id)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        logger.debug("Initialized repository for {}", model_class.__name__)

    def _scoped(self, tenant_id: UUID) -> Select[tuple[T]]:
        return select(self.model_class).where(self.model_class.account_id == tenant_id)

    def _guard(self, operation: str) -> AbstractContextManager[None]:
        return persistence_errors(self.model_class.__name__, operation)

    async def create(self, values: Mapping[str, object]) -> T:
        """Insert a new row.

        Args:
            values: Column values, including ``account_id``.

        Returns:
            T: The created row with server-generated timestamps loaded.

        Raises:
            ApplicationError: If the database rejects the insert.
        """
        obj = self.model_class(**values)
        with self._guard("create"):
            self.session.add(obj)
            await self.session.flush()  # Flush to get server defaults without committing
            await self.session.refresh(obj)

        logger.info("Created {} row {}", self.model_class.__name__, obj.id)
        return obj

    async def get(self, resource_id: UUID, tenant_id: UUID) -> T | None:
        """Fetch one row owned by the tenant.

        Returns:
            T | None: The row, or None when absent or owned by another tenant.
        """
        stmt = self._scoped(tenant_id).where(self.model_class.id == resource_id)
        with self._guard("get"):
            result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        logger.debug(
            "{} lookup for ID {}: {}",
            self.model_class.__name__,
            resource_id,
            "found" if instance else "not found",
        )
        return instance

    async def list(self, query: ListQuery) -> list[T]:
        """Fetch up to ``limit + 1`` rows for one page, newest first.

        Cursors are compared on ``created_at`` alone: with
        ``starting_after_date`` only rows created strictly before the
        boundary are considered. With ``ending_before_date`` the rows created
        strictly after the boundary are fetched oldest first (those nearest
        the boundary) and then reversed, so the surplus row, if any, comes
        first. ``id`` only makes the order of equal timestamps stable.

        Args:
            query: Resolved list request.

        Returns:
            list[T]: Rows ordered by descending creation time.
        """
        model = self.model_class
        stmt = self._scoped(query.tenant_id)

        for field, value in query.filters.items():
            stmt = stmt.where(getattr(model, field) == value)
        for field, time_range in query.ranges.items():
            stmt = stmt.where(*time_range_conditions(getattr(model, field), time_range))

        if query.starting_after_date is not None:
            stmt = stmt.where(model.created_at < query.starting_after_date)
        if query.ending_before_date is not None:
            stmt = stmt.where(model.created_at > query.ending_before_date)
            stmt = stmt.order_by(model.created_at.asc(), model.id.asc())
        else:
            stmt = stmt.order_by(model.created_at.desc(), model.id.desc())

        with self._guard("list"):
            result = await self.session.execute(stmt.limit(query.fetch_limit))
        rows: list[T] = list(result.scalars().all())
        if query.backward:
            rows.reverse()

        logger.debug(
            "Fetched {} {} rows (limit {}) with filters: {}",
            len(rows),
            model.__name__,
            query.fetch_limit,
            list(query.filters),
        )
        return rows

    async def update(
        self, resource_id: UUID, tenant_id: UUID, values: Mapping[str, object]
    ) -> T | None:
        """Update a row owned by the tenant with partial data.

        Args:
            resource_id: Id of the row.
            tenant_id: Owning account.
            values: Only the columns that change.

        Returns:
            T | None: The updated row, or None if it does not exist.
        """
        instance = await self.get(resource_id, tenant_id)
        if instance is None:
            return None

        for key, value in values.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        with self._guard("update"):
            await self.session.flush()
            await self.session.refresh(instance)

        logger.info(
            "Updated {} row {} - fields: {}",
            self.model_class.__name__,
            resource_id,
            list(values.keys()),
        )
        return instance

    async def delete(self, resource_id: UUID, tenant_id: UUID) -> bool:
        """Delete a row owned by the tenant.

        Returns:
            bool: True if a row was deleted, False if none matched.
        """
        stmt = sql_delete(self.model_class).where(
            self.model_class.id == resource_id,
            self.model_class.account_id == tenant_id,
        )
        with self._guard("delete"):
            result: Any = await self.session.execute(stmt)
        deleted = result.rowcount > 0

        if deleted:
            logger.info("Deleted {} row {}", self.model_class.__name__, resource_id)
        return deleted

    async def list_by_ids(self, ids: Sequence[UUID], tenant_id: UUID) -> list[T]:
        """Fetch every row owned by the tenant whose id is in ``ids``.

        Ids that match nothing are silently skipped.
        """
        if not ids:
            return []
        stmt = self._scoped(tenant_id).where(self.model_class.id.in_(ids))
        with self._guard("list_by_ids"):
            result = await self.session.execute(stmt)
        instances = list(result.scalars().all())

        logger.debug(
            "Batch-fetched {} of {} {} rows",
            len(instances),
            len(ids),
            self.model_class.__name__,
        )
        return instances


class ApiKeyRepository:
    """Lookup of API keys by their hash."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_hash(self, key_hash: str) -> ApiKey | None:
        stmt = select(ApiKey).where(ApiKey.key_hash == key_hash)
        with persistence_errors(ApiKey.__name__, "get_by_hash"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
