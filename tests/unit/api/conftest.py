"""Fixtures for API unit tests.

The application runs over the in-memory services with authentication and
the database session overridden, and is driven through httpx's ASGI
transport.
"""

from collections.abc import AsyncGenerator
from uuid import UUID

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_tenant_id
from src.api.main import create_app
from src.core.config import Settings
from src.domain.registry import Services
from src.infrastructure.database.dependencies import get_services


@pytest.fixture
def app(mock_settings: Settings, services: Services, tenant_id: UUID) -> FastAPI:
    """Provide the application wired to in-memory services for one tenant."""
    application = create_app(mock_settings)
    application.dependency_overrides[get_services] = lambda: services
    application.dependency_overrides[get_tenant_id] = lambda: tenant_id
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Provide an HTTP client bound to the application.

    Unhandled exceptions are turned into responses rather than re-raised so
    the opaque 500 body can be asserted.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
