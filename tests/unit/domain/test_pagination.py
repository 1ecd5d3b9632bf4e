"""Unit tests for src/domain/pagination.py."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from pytest_mock import MockerFixture

from src.core.exceptions import NotFoundError
from src.domain.constants import DEFAULT_LIST_LIMIT
from src.domain.pagination import (
    ListParams,
    ListQuery,
    TimeRange,
    apply_limit,
    resolve_cursor,
)
from src.domain.resources import Inventory

BOUNDARY = datetime(2024, 3, 1, tzinfo=UTC)


@pytest.mark.unit
class TestApplyLimit:
    """Test trimming of ``limit + 1`` fetches."""

    @pytest.mark.parametrize("limit", [1, 2, 5, 10])
    @pytest.mark.parametrize("count", [0, 1, 2, 5, 6, 11])
    @pytest.mark.parametrize("backward", [False, True])
    def test_page_size_and_has_more(self, limit: int, count: int, backward: bool) -> None:
        """Verify the page never exceeds the limit and has_more is exact."""
        rows = list(range(min(count, limit + 1)))

        page, has_more = apply_limit(rows, limit, backward=backward)

        assert len(page) == min(len(rows), limit)
        assert has_more == (len(rows) > limit)

    def test_forward_drops_last_row(self) -> None:
        """Verify the look-ahead row is the oldest when paging forward."""
        page, has_more = apply_limit(["c", "b", "a"], 2, backward=False)

        assert page == ["c", "b"]
        assert has_more

    def test_backward_drops_first_row(self) -> None:
        """Verify the look-ahead row is the newest when paging backward."""
        page, has_more = apply_limit(["c", "b", "a"], 2, backward=True)

        assert page == ["b", "a"]
        assert has_more

    def test_exact_fit_has_no_more(self) -> None:
        """Verify a full page without a look-ahead row reports no more."""
        page, has_more = apply_limit(["b", "a"], 2, backward=False)

        assert page == ["b", "a"]
        assert not has_more


@pytest.mark.unit
class TestResolveCursor:
    """Test cursor id resolution."""

    async def test_no_cursor_needs_no_lookup(self, mocker: MockerFixture) -> None:
        """Verify an absent cursor resolves to None without a fetch."""
        source = mocker.Mock(resource_name="inventory")
        source.get = mocker.AsyncMock()

        assert await resolve_cursor(source, uuid4(), None) is None
        source.get.assert_not_awaited()

    async def test_cursor_resolves_to_created_at(self, mocker: MockerFixture) -> None:
        """Verify the cursor becomes the named resource's creation time."""
        cursor_id, tenant_id = uuid4(), uuid4()
        source = mocker.Mock(resource_name="inventory")
        source.get = mocker.AsyncMock(
            return_value=Inventory(id=cursor_id, created_at=BOUNDARY, in_stock=1)
        )

        assert await resolve_cursor(source, tenant_id, cursor_id) == BOUNDARY
        source.get.assert_awaited_once_with(cursor_id, tenant_id)

    async def test_unknown_cursor_propagates_not_found(
        self, mocker: MockerFixture
    ) -> None:
        """Verify a cursor that does not resolve is a not-found error."""
        cursor_id = uuid4()
        source = mocker.Mock(resource_name="inventory")
        source.get = mocker.AsyncMock(side_effect=NotFoundError("inventory", cursor_id))

        with pytest.raises(NotFoundError):
            await resolve_cursor(source, uuid4(), cursor_id)


@pytest.mark.unit
class TestListParams:
    """Test list parameter helpers."""

    def test_default_limit(self) -> None:
        """Verify the page size defaults to ten."""
        assert ListParams().limit == DEFAULT_LIST_LIMIT == 10

    def test_time_ranges_skip_empty(self) -> None:
        """Verify only ranges with at least one bound are kept."""
        params = ListParams(
            created_at=TimeRange(gte=BOUNDARY), updated_at=TimeRange()
        )

        assert params.time_ranges() == {"created_at": TimeRange(gte=BOUNDARY)}

    def test_query_fetches_one_extra_row(self) -> None:
        """Verify the storage query asks for the look-ahead row."""
        tenant_id: UUID = uuid4()
        query = ListQuery(tenant_id=tenant_id, limit=3, ending_before_date=BOUNDARY)

        assert query.fetch_limit == 4
        assert query.backward
        assert not ListQuery(tenant_id=tenant_id).backward
