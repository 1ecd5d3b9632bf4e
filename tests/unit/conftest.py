"""Shared fixtures for unit tests.

The services are exercised over ``InMemoryRepository``, an in-memory stand-in
for ``TenantRepository`` that follows the same storage contract: rows are
scoped to one account, lists are newest first and fetch ``limit + 1`` rows.
"""

from __future__ import annotations

import os
from collections.abc import Generator, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from pytest_mock import MockerFixture, MockType

from src.core.config import LogConfig, Settings, get_settings
from src.core.context import RequestContext
from src.core.error_context import _get_sensitive_fields
from src.domain.pagination import ListQuery
from src.domain.registry import Services

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class InMemoryRepository:
    """Tenant-scoped row storage kept in a dict.

    Args:
        defaults: Column values every row starts with, e.g. derived columns.
    """

    def __init__(self, defaults: Mapping[str, object] | None = None) -> None:
        self.defaults = dict(defaults or {})
        self.rows: dict[UUID, SimpleNamespace] = {}
        self.calls: list[str] = []
        self.ticks = 0

    def _now(self) -> datetime:
        self.ticks += 1
        return EPOCH + timedelta(seconds=self.ticks)

    def _owned(self, tenant_id: UUID) -> list[SimpleNamespace]:
        return [row for row in self.rows.values() if row.account_id == tenant_id]

    async def create(self, values: Mapping[str, object]) -> SimpleNamespace:
        self.calls.append("create")
        now = self._now()
        row = SimpleNamespace(
            id=uuid4(), created_at=now, updated_at=now, **{**self.defaults, **values}
        )
        self.rows[row.id] = row
        return row

    async def get(self, resource_id: UUID, tenant_id: UUID) -> SimpleNamespace | None:
        self.calls.append("get")
        row = self.rows.get(resource_id)
        if row is None or row.account_id != tenant_id:
            return None
        return row

    async def list(self, query: ListQuery) -> list[SimpleNamespace]:
        self.calls.append("list")
        rows = self._owned(query.tenant_id)
        for field, value in query.filters.items():
            rows = [row for row in rows if getattr(row, field) == value]
        for field, time_range in query.ranges.items():
            if time_range.gt is not None:
                rows = [row for row in rows if getattr(row, field) > time_range.gt]
            if time_range.gte is not None:
                rows = [row for row in rows if getattr(row, field) >= time_range.gte]
            if time_range.lt is not None:
                rows = [row for row in rows if getattr(row, field) < time_range.lt]
            if time_range.lte is not None:
                rows = [row for row in rows if getattr(row, field) <= time_range.lte]
        if query.starting_after_date is not None:
            rows = [row for row in rows if row.created_at < query.starting_after_date]
        if query.ending_before_date is not None:
            rows = [row for row in rows if row.created_at > query.ending_before_date]
            rows.sort(key=lambda row: row.created_at)
            return list(reversed(rows[: query.fetch_limit]))
        rows.sort(key=lambda row: row.created_at, reverse=True)
        return rows[: query.fetch_limit]

    async def update(
        self, resource_id: UUID, tenant_id: UUID, values: Mapping[str, object]
    ) -> SimpleNamespace | None:
        self.calls.append("update")
        row = await self.get(resource_id, tenant_id)
        if row is None:
            return None
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = self._now()
        return row

    async def delete(self, resource_id: UUID, tenant_id: UUID) -> bool:
        self.calls.append("delete")
        row = await self.get(resource_id, tenant_id)
        if row is None:
            return False
        del self.rows[resource_id]
        return True

    async def list_by_ids(
        self, ids: Sequence[UUID], tenant_id: UUID
    ) -> list[SimpleNamespace]:
        self.calls.append("list_by_ids")
        return [row for row in self._owned(tenant_id) if row.id in set(ids)]


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def repositories() -> dict[str, InMemoryRepository]:
    """Provide one in-memory repository per resource type.

    Returns:
        dict[str, InMemoryRepository]: Repositories keyed like ``Services``.
    """
    return {
        "groups": InMemoryRepository(),
        "inventories": InMemoryRepository(),
        "item_identifiers": InMemoryRepository(),
        "items": InMemoryRepository({"identifiers_id": None, "price_id": None}),
        "prices": InMemoryRepository(),
    }


@pytest.fixture
def services(repositories: dict[str, InMemoryRepository]) -> Services:
    """Provide related services over the in-memory repositories."""
    return Services.build(**repositories)


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object built from test environment variables.

    Returns:
        Settings: Settings with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")
    return Settings()


@pytest.fixture
def mock_get_settings(mocker: MockerFixture) -> MockType:
    """Mock get_settings for error_context with custom sensitive fields.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock get_settings function.
    """
    mock_settings = mocker.Mock(spec=Settings)
    mock_log_config = mocker.Mock(spec=LogConfig)
    mock_log_config.sensitive_fields = ["custom_secret", "my_password"]
    mock_settings.log_config = mock_log_config

    mock_get_settings_fn = mocker.patch("src.core.error_context.get_settings")
    mock_get_settings_fn.return_value = mock_settings

    _get_sensitive_fields.cache_clear()
    return mock_get_settings_fn


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch]:
    """Remove app-specific environment variables for the duration of a test."""
    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "MAX_REQUEST_BODY_BYTES",
        "LOG_CONFIG__",
        "DATABASE_CONFIG__",
    ]
    for key in list(os.environ):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)
    yield monkeypatch


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Clear request context before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()
