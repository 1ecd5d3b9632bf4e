"""Generic resource service.

Every resource type is served by a ``ResourceService`` subclass that only
declares what differs between resources: its name, which fields may be
expanded, and how parameters and stored rows map to and from the resource
model. The create/get/list/update/delete flows themselves are shared:

- parameters are validated before any storage call
- every lookup is scoped to the caller's tenant
- an id that does not resolve for the tenant raises ``NotFoundError``
- update and delete check existence first
- list resolves cursors, fetches ``limit + 1`` rows and trims to one page
- requested expansions run after the core operation succeeds
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import Annotated, Any, ClassVar, Protocol
from uuid import UUID

from loguru import logger
from pydantic import BaseModel

from src.core.exceptions import NotFoundError
from src.core.validation import Each, OneOf, ensure_valid
from src.domain.constants import DEFAULT_LIST_LIMIT
from src.domain.expansion import Fetchable, expand_many, expand_one
from src.domain.pagination import (
    ListParams,
    ListQuery,
    Page,
    apply_limit,
    resolve_cursor,
)
from src.domain.resources import BASE_FIELDS, Expandable, Resource


class Repository(Protocol):
    """Tenant-scoped storage for one resource type."""

    async def create(self, values: Mapping[str, object]) -> Any: ...

    async def get(self, resource_id: UUID, tenant_id: UUID) -> Any | None: ...

    async def list(self, query: ListQuery) -> list[Any]: ...

    async def update(
        self, resource_id: UUID, tenant_id: UUID, values: Mapping[str, object]
    ) -> Any | None: ...

    async def delete(self, resource_id: UUID, tenant_id: UUID) -> bool: ...

    async def list_by_ids(self, ids: Sequence[UUID], tenant_id: UUID) -> list[Any]: ...


def expand_param(fields: tuple[str, ...]) -> Any:
    """Build the ``expand`` parameter type accepting only ``fields``.

    Each resource builds it from the same tuple it sets as the service's
    ``expandable_fields``.
    """
    return Annotated[list[str] | None, Each(OneOf(*fields))]


def provided(params: BaseModel, *fields: str) -> dict[str, object]:
    """Collect the named parameter fields that were supplied (not None)."""
    values = {field: getattr(params, field) for field in fields}
    return {field: value for field, value in values.items() if value is not None}


class ResourceService[ResourceT: Resource](ABC):
    """Shared CRUD, pagination and expansion flow for one resource type.

    Subclasses set ``resource_name`` and ``expandable_fields`` and implement
    the mapping hooks. Related services are attached with ``relate`` once all
    services exist, since relations may be mutual.

    Args:
        repository: Tenant-scoped storage for this resource type.
    """

    resource_name: ClassVar[str]
    expandable_fields: ClassVar[tuple[str, ...]] = ()
    reference_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, repository: Repository) -> None:
        self.repository = repository
        self.relations: dict[str, Fetchable[Any]] = {}

    def relate(self, field: str, source: Fetchable[Any]) -> None:
        """Attach the service that resolves ``field`` references."""
        self.relations[field] = source

    # Mapping hooks

    @abstractmethod
    def to_resource(self, row: Any) -> ResourceT:
        """Map a stored row to the client-facing resource."""

    @abstractmethod
    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        """Map create parameters to storage values."""

    @abstractmethod
    def map_update(self, params: BaseModel) -> dict[str, object]:
        """Map update parameters to the storage values that change."""

    def map_filters(self, params: ListParams) -> dict[str, object]:
        """Map list parameters to equality filters on stored columns."""
        return {}

    # Operations

    async def create(self, tenant_id: UUID, params: BaseModel) -> ResourceT:
        """Validate, store and return a new resource.

        Raises:
            ValidationError: If the parameters violate their constraints.
            NotFoundError: If a referenced id does not resolve for the tenant.
        """
        ensure_valid(params)
        await self._check_references(tenant_id, params)

        row = await self.repository.create(self.map_create(tenant_id, params))
        resource = self.to_resource(row)
        logger.info(
            "Created {} {}",
            self.resource_name,
            resource.id,
            tenant_id=str(tenant_id),
        )
        return await self.expand(resource, _expand_of(params), tenant_id)

    async def get(
        self,
        resource_id: UUID,
        tenant_id: UUID,
        params: BaseModel | None = None,
        *,
        omit_base: bool = False,
    ) -> ResourceT:
        """Fetch one resource owned by the tenant.

        Args:
            resource_id: Id of the resource.
            tenant_id: Tenant the resource must belong to.
            params: Optional retrieve parameters carrying ``expand``.
            omit_base: Leave id and timestamps unset; used for existence checks.

        Returns:
            ResourceT: The resource, expanded as requested.

        Raises:
            ValidationError: If the retrieve parameters are invalid.
            NotFoundError: If the id does not resolve for the tenant.
        """
        if params is not None:
            ensure_valid(params)

        row = await self.repository.get(resource_id, tenant_id)
        if row is None:
            raise NotFoundError(self.resource_name, resource_id)

        resource = self.to_resource(row)
        if omit_base:
            for field in BASE_FIELDS:
                setattr(resource, field, None)
        return await self.expand(resource, _expand_of(params), tenant_id)

    async def list(self, tenant_id: UUID, params: ListParams) -> Page[ResourceT]:
        """Return one page of the tenant's resources, newest first.

        Raises:
            ValidationError: If the list parameters are invalid.
            NotFoundError: If a cursor id does not resolve for the tenant.
        """
        ensure_valid(params)

        query = ListQuery(
            tenant_id=tenant_id,
            limit=params.limit or DEFAULT_LIST_LIMIT,
            starting_after_date=await resolve_cursor(
                self, tenant_id, params.starting_after
            ),
            ending_before_date=await resolve_cursor(
                self, tenant_id, params.ending_before
            ),
            filters=self.map_filters(params),
            ranges=params.time_ranges(),
        )
        rows = await self.repository.list(query)
        rows, has_more = apply_limit(rows, query.limit, backward=query.backward)

        data = [self.to_resource(row) for row in rows]
        await self.expand_list(data, _expand_of(params), tenant_id)
        logger.debug(
            "Listed {} {} resource(s), has_more={}",
            len(data),
            self.resource_name,
            has_more,
        )
        return Page(data=data, has_more=has_more)

    async def list_by_ids(self, ids: Sequence[UUID], tenant_id: UUID) -> list[ResourceT]:
        """Batch-fetch the tenant's resources with the given ids.

        Ids that do not resolve are silently absent from the result.
        """
        rows = await self.repository.list_by_ids(ids, tenant_id)
        return [self.to_resource(row) for row in rows]

    async def update(
        self, resource_id: UUID, tenant_id: UUID, params: BaseModel
    ) -> ResourceT:
        """Apply the supplied parameters to an existing resource.

        Raises:
            NotFoundError: If the id (or a referenced id) does not resolve.
            ValidationError: If the parameters violate their constraints.
        """
        await self.get(resource_id, tenant_id, omit_base=True)
        ensure_valid(params)
        await self._check_references(tenant_id, params)

        row = await self.repository.update(
            resource_id, tenant_id, self.map_update(params)
        )
        if row is None:
            raise NotFoundError(self.resource_name, resource_id)

        resource = self.to_resource(row)
        logger.info(
            "Updated {} {}",
            self.resource_name,
            resource_id,
            tenant_id=str(tenant_id),
        )
        return await self.expand(resource, _expand_of(params), tenant_id)

    async def delete(self, resource_id: UUID, tenant_id: UUID) -> None:
        """Delete an existing resource.

        Raises:
            NotFoundError: If the id does not resolve for the tenant.
        """
        await self.get(resource_id, tenant_id, omit_base=True)
        if not await self.repository.delete(resource_id, tenant_id):
            raise NotFoundError(self.resource_name, resource_id)
        logger.info(
            "Deleted {} {}",
            self.resource_name,
            resource_id,
            tenant_id=str(tenant_id),
        )

    # Expansion

    async def expand(
        self, resource: ResourceT, fields: Iterable[str], tenant_id: UUID
    ) -> ResourceT:
        """Expand the requested relations of one resource.

        Raises:
            NotFoundError: If a related id does not resolve for the tenant.
        """
        for field in dict.fromkeys(fields):
            ref: Expandable[Any] = getattr(resource, field)
            await expand_one(ref, tenant_id, self.relations[field])
        return resource

    async def expand_list(
        self, resources: Sequence[ResourceT], fields: Iterable[str], tenant_id: UUID
    ) -> Sequence[ResourceT]:
        """Expand the requested relations across a page with one fetch per field."""
        if not resources:
            return resources
        for field in dict.fromkeys(fields):
            refs = [getattr(resource, field) for resource in resources]
            await expand_many(refs, tenant_id, self.relations[field])
        return resources

    async def _check_references(self, tenant_id: UUID, params: BaseModel) -> None:
        for field in self.reference_fields:
            related_id = getattr(params, field, None)
            if related_id is not None:
                await self.relations[field].get(related_id, tenant_id)


def _expand_of(params: BaseModel | None) -> list[str]:
    if params is None:
        return []
    return getattr(params, "expand", None) or []
