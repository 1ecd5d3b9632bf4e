"""Cursor pagination over creation time.

A list request carries either ``starting_after`` or ``ending_before`` (never
both), each naming the id of a resource on a previous page. The cursor id is
resolved to that resource's ``created_at`` and the store is asked for
``limit + 1`` rows ordered newest first. The extra row only signals that more
rows exist past the page boundary and is dropped before the page is
returned:

- paging forwards (``starting_after`` or no cursor) the last row is dropped
- paging backwards (``ending_before``) the first row is dropped
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Protocol
from uuid import UUID

from loguru import logger
from pydantic import BaseModel

from src.core.validation import ExcludedWith, Gte, Lte
from src.domain.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from src.domain.resources import Resource


class TimeRange(BaseModel):
    """Optional bounds on a timestamp field."""

    gt: datetime | None = None
    gte: datetime | None = None
    lt: datetime | None = None
    lte: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return all(bound is None for bound in (self.gt, self.gte, self.lt, self.lte))


class PaginationParams(BaseModel):
    """Cursor and page size shared by every list request."""

    limit: Annotated[int | None, Gte(1), Lte(MAX_LIST_LIMIT)] = DEFAULT_LIST_LIMIT
    starting_after: Annotated[UUID | None, ExcludedWith("ending_before")] = None
    ending_before: UUID | None = None


class ListParams(PaginationParams):
    """Pagination plus the timestamp filters every resource supports."""

    created_at: TimeRange | None = None
    updated_at: TimeRange | None = None

    def time_ranges(self) -> dict[str, TimeRange]:
        """Return the supplied, non-empty timestamp ranges keyed by column."""
        ranges = {"created_at": self.created_at, "updated_at": self.updated_at}
        return {
            name: value
            for name, value in ranges.items()
            if value is not None and not value.is_empty
        }


@dataclass
class ListQuery:
    """Resolved, storage-facing form of a list request."""

    tenant_id: UUID
    limit: int = DEFAULT_LIST_LIMIT
    starting_after_date: datetime | None = None
    ending_before_date: datetime | None = None
    filters: dict[str, object] = field(default_factory=dict)
    ranges: dict[str, TimeRange] = field(default_factory=dict)

    @property
    def backward(self) -> bool:
        return self.ending_before_date is not None

    @property
    def fetch_limit(self) -> int:
        """Rows to request from storage: one beyond the page size."""
        return self.limit + 1


@dataclass
class Page[ResourceT: Resource]:
    """One page of a listing plus whether rows exist past its boundary."""

    data: list[ResourceT]
    has_more: bool


class CursorSource(Protocol):
    resource_name: str

    async def get(self, resource_id: UUID, tenant_id: UUID) -> Resource: ...


async def resolve_cursor(
    source: CursorSource, tenant_id: UUID, cursor_id: UUID | None
) -> datetime | None:
    """Resolve a cursor id to the creation time of the resource it names.

    Args:
        source: Service owning the listed resource type.
        tenant_id: Tenant whose resources are being listed.
        cursor_id: The ``starting_after`` or ``ending_before`` id, if any.

    Returns:
        datetime | None: The boundary timestamp, or None when no cursor was given.

    Raises:
        NotFoundError: If the cursor id does not resolve for the tenant.
    """
    if cursor_id is None:
        return None
    resource = await source.get(cursor_id, tenant_id)
    logger.debug(
        "Resolved {} cursor {} to {}",
        source.resource_name,
        cursor_id,
        resource.created_at,
    )
    return resource.created_at


def apply_limit[RowT](
    rows: Sequence[RowT], limit: int, *, backward: bool
) -> tuple[list[RowT], bool]:
    """Trim a ``limit + 1`` fetch down to one page.

    Args:
        rows: Rows as returned by storage, newest first.
        limit: The requested page size.
        backward: Whether the request paged with ``ending_before``.

    Returns:
        tuple[list[RowT], bool]: The page and whether more rows exist.
    """
    page = list(rows)
    has_more = len(page) > limit
    if has_more:
        page = page[1:] if backward else page[:-1]
    return page, has_more
