"""Request dependencies: API key authentication and the calling tenant."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from loguru import logger

from src.api.constants import AUTHORIZATION_HEADER, BEARER_PREFIX
from src.domain.auth import authenticate
from src.infrastructure.database.dependencies import DatabaseSession
from src.infrastructure.database.repository import ApiKeyRepository


def bearer_token(request: Request) -> str | None:
    """Extract the key from an ``Authorization: Bearer <key>`` header."""
    header = request.headers.get(AUTHORIZATION_HEADER, "")
    if not header.startswith(BEARER_PREFIX):
        return None
    return header.removeprefix(BEARER_PREFIX).strip() or None


async def get_tenant_id(request: Request, session: DatabaseSession) -> UUID:
    """Authenticate the request and return the calling account's id.

    Raises:
        UnauthorizedError: If the API key is missing, unknown or expired.
    """
    tenant_id = await authenticate(ApiKeyRepository(session), bearer_token(request))
    logger.debug("Authenticated request for account {}", tenant_id)
    return tenant_id


TenantId = Annotated[UUID, Depends(get_tenant_id)]
