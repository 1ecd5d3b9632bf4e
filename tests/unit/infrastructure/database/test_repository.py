"""Unit tests for src/infrastructure/database/repository.py.

The session is mocked; statements are compiled for PostgreSQL and checked
for tenant scoping, cursor bounds, ordering and the look-ahead limit.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

import pytest
from pytest_mock import MockType
from sqlalchemy.exc import IntegrityError, OperationalError

from src.core.exceptions import ApplicationError
from src.domain.pagination import ListQuery, TimeRange
from src.infrastructure.database.models import ApiKey, Group
from src.infrastructure.database.repository import (
    ApiKeyRepository,
    TenantRepository,
    time_range_conditions,
)

BOUNDARY = datetime(2024, 3, 1, tzinfo=UTC)

Compile = Callable[[MockType], tuple[str, dict[str, Any]]]


@pytest.mark.unit
class TestTimeRangeConditions:
    """Test translation of time ranges."""

    def test_one_condition_per_bound(self) -> None:
        """Verify every supplied bound becomes one comparison."""
        time_range = TimeRange(gt=BOUNDARY, lte=BOUNDARY)

        conditions = time_range_conditions(Group.created_at, time_range)

        assert [str(c) for c in conditions] == [
            "groups.created_at > :created_at_1",
            "groups.created_at <= :created_at_1",
        ]

    def test_empty_range_has_no_conditions(self) -> None:
        """Verify an empty range adds nothing."""
        assert time_range_conditions(Group.created_at, TimeRange()) == []


@pytest.mark.unit
class TestTenantRepository:
    """Test tenant-scoped CRUD statements."""

    async def test_create_flushes_and_refreshes(self, mock_session: MockType) -> None:
        """Verify create adds the row and loads server defaults."""
        repository = TenantRepository(mock_session, Group)
        tenant_id = uuid4()

        row = await repository.create({"account_id": tenant_id, "name": "Tools"})

        assert isinstance(row, Group)
        assert row.name == "Tools"
        mock_session.add.assert_called_once_with(row)
        mock_session.flush.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(row)

    async def test_get_is_scoped_to_tenant(
        self, mock_session: MockType, executed_sql: Compile
    ) -> None:
        """Verify the lookup filters on both id and account."""
        tenant_id, resource_id = uuid4(), uuid4()

        assert await TenantRepository(mock_session, Group).get(resource_id, tenant_id) is None

        sql, params = executed_sql(mock_session)
        assert "groups.account_id = " in sql
        assert "groups.id = " in sql
        assert tenant_id in params.values()
        assert resource_id in params.values()

    async def test_list_forward(
        self, mock_session: MockType, executed_sql: Compile
    ) -> None:
        """Verify newest-first order, cursor bound and look-ahead limit."""
        tenant_id = uuid4()
        query = ListQuery(
            tenant_id=tenant_id,
            limit=2,
            starting_after_date=BOUNDARY,
            filters={"name": "Tools"},
        )
        mock_session.rows = ["c", "b", "a"]

        rows = await TenantRepository(mock_session, Group).list(query)

        sql, params = executed_sql(mock_session)
        assert rows == ["c", "b", "a"]
        assert "groups.created_at < " in sql
        assert "groups.name = " in sql
        assert "ORDER BY groups.created_at DESC, groups.id DESC" in sql
        assert "LIMIT" in sql
        assert 3 in params.values()
        assert "Tools" in params.values()

    async def test_list_backward_reverses(
        self, mock_session: MockType, executed_sql: Compile
    ) -> None:
        """Verify ending_before fetches oldest first, then reverses."""
        query = ListQuery(tenant_id=uuid4(), limit=2, ending_before_date=BOUNDARY)
        mock_session.rows = ["a", "b", "c"]

        rows = await TenantRepository(mock_session, Group).list(query)

        sql, _ = executed_sql(mock_session)
        assert rows == ["c", "b", "a"]
        assert "groups.created_at > " in sql
        assert "ORDER BY groups.created_at ASC, groups.id ASC" in sql

    @pytest.mark.parametrize(
        ("cursor", "operator"),
        [
            ("starting_after_date", "<"),
            ("ending_before_date", ">"),
        ],
    )
    async def test_cursor_bound_is_timestamp_only(
        self,
        mock_session: MockType,
        executed_sql: Compile,
        cursor: str,
        operator: str,
    ) -> None:
        """Verify the boundary is a strict creation-time bound with no id term."""
        tenant_id = uuid4()
        query = ListQuery(tenant_id=tenant_id, limit=2, **{cursor: BOUNDARY})

        await TenantRepository(mock_session, Group).list(query)

        sql, params = executed_sql(mock_session)
        where = sql.split(" WHERE ")[1].split(" ORDER BY ")[0]
        assert f"groups.created_at {operator} " in where
        assert "groups.id" not in where
        assert sorted(map(str, params.values())) == sorted(
            map(str, [tenant_id, BOUNDARY, 3])
        )

    async def test_list_applies_time_ranges(
        self, mock_session: MockType, executed_sql: Compile
    ) -> None:
        """Verify timestamp filters are translated bound by bound."""
        query = ListQuery(
            tenant_id=uuid4(), ranges={"updated_at": TimeRange(gte=BOUNDARY)}
        )

        await TenantRepository(mock_session, Group).list(query)

        sql, params = executed_sql(mock_session)
        assert "groups.updated_at >= " in sql
        assert BOUNDARY in params.values()

    async def test_update_sets_only_given_values(self, mock_session: MockType) -> None:
        """Verify update touches only the supplied columns."""
        row = Group(name="Tools", description="Hand tools")
        mock_session.rows = [row]

        updated = await TenantRepository(mock_session, Group).update(
            uuid4(), uuid4(), {"name": "Power tools"}
        )

        assert updated is row
        assert row.name == "Power tools"
        assert row.description == "Hand tools"
        mock_session.flush.assert_awaited_once()

    async def test_update_missing_returns_none(self, mock_session: MockType) -> None:
        """Verify updating an unknown row does not flush."""
        result = await TenantRepository(mock_session, Group).update(
            uuid4(), uuid4(), {"name": "x"}
        )

        assert result is None
        mock_session.flush.assert_not_awaited()

    @pytest.mark.parametrize(("rowcount", "expected"), [(1, True), (0, False)])
    async def test_delete_reports_rowcount(
        self,
        mock_session: MockType,
        executed_sql: Compile,
        rowcount: int,
        expected: bool,
    ) -> None:
        """Verify delete is scoped and reports whether a row matched."""
        mock_session.rowcount = rowcount

        deleted = await TenantRepository(mock_session, Group).delete(uuid4(), uuid4())

        sql, _ = executed_sql(mock_session)
        assert deleted is expected
        assert sql.startswith("DELETE FROM groups")
        assert "groups.account_id = " in sql

    async def test_list_by_ids_empty_skips_query(self, mock_session: MockType) -> None:
        """Verify an empty id list does not hit the database."""
        assert await TenantRepository(mock_session, Group).list_by_ids([], uuid4()) == []
        mock_session.execute.assert_not_awaited()

    async def test_list_by_ids(
        self, mock_session: MockType, executed_sql: Compile
    ) -> None:
        """Verify the batch lookup uses one IN query."""
        mock_session.rows = ["g1"]

        rows = await TenantRepository(mock_session, Group).list_by_ids(
            [uuid4(), uuid4()], uuid4()
        )

        sql, _ = executed_sql(mock_session)
        assert rows == ["g1"]
        assert "groups.id IN" in sql
        mock_session.execute.assert_awaited_once()


@pytest.mark.unit
class TestApiKeyRepository:
    """Test API key lookup."""

    async def test_get_by_hash(self, mock_session: MockType, executed_sql: Compile) -> None:
        """Verify keys are looked up by digest."""
        stored = SimpleNamespace(account_id=uuid4())
        mock_session.rows = [stored]

        result = await ApiKeyRepository(mock_session).get_by_hash("ab" * 32)

        sql, params = executed_sql(mock_session)
        assert result is stored
        assert "api_keys.key_hash = " in sql
        assert "ab" * 32 in params.values()
        assert ApiKey.__tablename__ == "api_keys"


@pytest.mark.unit
class TestPersistenceErrors:
    """Test conversion of database failures."""

    async def test_query_failure_becomes_application_error(
        self, mock_session: MockType
    ) -> None:
        """Verify a failed query surfaces as an opaque application error."""
        failure = OperationalError("SELECT 1", {}, Exception("connection reset"))
        mock_session.execute.side_effect = failure

        with pytest.raises(ApplicationError) as exc_info:
            await TenantRepository(mock_session, Group).get(uuid4(), uuid4())

        error = exc_info.value
        assert error.cause is failure
        assert error.status_code == 500
        assert error.message == "Something went wrong."
        assert error.context == {"model": "Group", "operation": "get"}

    async def test_flush_failure_on_create(self, mock_session: MockType) -> None:
        """Verify constraint violations on insert are wrapped too."""
        mock_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("fk"))

        with pytest.raises(ApplicationError) as exc_info:
            await TenantRepository(mock_session, Group).create({"name": "Tools"})

        assert exc_info.value.context["operation"] == "create"

    async def test_api_key_lookup_failure(self, mock_session: MockType) -> None:
        """Verify key lookups share the same conversion."""
        mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception())

        with pytest.raises(ApplicationError):
            await ApiKeyRepository(mock_session).get_by_hash("ab" * 32)

    async def test_other_errors_propagate_unchanged(self, mock_session: MockType) -> None:
        """Verify only SQLAlchemy errors are converted."""
        mock_session.execute.side_effect = ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await TenantRepository(mock_session, Group).get(uuid4(), uuid4())
