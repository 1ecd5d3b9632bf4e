"""Replace collapsed foreign ids with the resources they name.

Single-resource expansion fetches the related resource directly and a
missing one is an error. Batch expansion gathers the distinct ids across all
resources, makes exactly one lookup, and leaves ids that did not resolve
collapsed without failing the request.
"""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from loguru import logger

from src.domain.resources import Expandable, Resource


class Fetchable[ResourceT: Resource](Protocol):
    """Anything that can load related resources for expansion."""

    resource_name: str

    async def get(self, resource_id: UUID, tenant_id: UUID) -> ResourceT: ...

    async def list_by_ids(
        self, ids: Sequence[UUID], tenant_id: UUID
    ) -> list[ResourceT]: ...


async def expand_one[ResourceT: Resource](
    ref: Expandable[ResourceT], tenant_id: UUID, source: Fetchable[ResourceT]
) -> Expandable[ResourceT]:
    """Expand a single reference in place.

    A reference with no id is returned unchanged without any lookup.

    Raises:
        NotFoundError: If the id does not resolve for the tenant.
    """
    if ref.id is None:
        return ref
    ref.resource = await source.get(ref.id, tenant_id)
    return ref


async def expand_many[ResourceT: Resource](
    refs: Sequence[Expandable[ResourceT]],
    tenant_id: UUID,
    source: Fetchable[ResourceT],
) -> Sequence[Expandable[ResourceT]]:
    """Expand a batch of references with one lookup.

    Args:
        refs: References gathered from every resource on a page.
        tenant_id: Tenant that owns the page.
        source: Service owning the related resource type.

    Returns:
        Sequence[Expandable[ResourceT]]: The same references, expanded where
            their id resolved.
    """
    ids = list(dict.fromkeys(ref.id for ref in refs if ref.id is not None))
    if not ids:
        return refs

    found = {
        resource.id: resource
        for resource in await source.list_by_ids(ids, tenant_id)
    }
    for ref in refs:
        resource = found.get(ref.id) if ref.id is not None else None
        if resource is not None:
            ref.resource = resource.model_copy(deep=True)

    missing = len(ids) - len(found)
    if missing:
        logger.debug(
            "{} of {} {} reference(s) did not resolve during expansion",
            missing,
            len(ids),
            source.resource_name,
        )
    return refs
