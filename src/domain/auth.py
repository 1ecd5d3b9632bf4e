"""API key authentication.

Keys are never stored; the ``api_keys`` table holds their SHA-256 digest.
A key resolves to the account that owns it, and that account id is the
tenant id for every service call made on behalf of the request.
"""

import hashlib
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import UUID

from loguru import logger

from src.core.exceptions import ErrorCode, UnauthorizedError


class ApiKeyStore(Protocol):
    async def get_by_hash(self, key_hash: str) -> Any | None: ...


def hash_api_key(api_key: str) -> str:
    """Return the hex SHA-256 digest under which a key is stored."""
    return hashlib.sha256(api_key.encode()).hexdigest()


async def authenticate(
    store: ApiKeyStore, api_key: str | None, now: datetime | None = None
) -> UUID:
    """Resolve an API key to the id of the account that owns it.

    Args:
        store: Lookup of stored keys by digest.
        api_key: The presented key, or None when none was sent.
        now: Current time; defaults to the wall clock.

    Returns:
        UUID: The owning account id.

    Raises:
        UnauthorizedError: If the key is missing, unknown or expired.
    """
    if not api_key:
        raise UnauthorizedError(context={"reason": "missing"})

    stored = await store.get_by_hash(hash_api_key(api_key))
    if stored is None:
        raise UnauthorizedError(context={"reason": "unknown"})

    now = now or datetime.now(UTC)
    if stored.expires_at is not None and now > stored.expires_at:
        logger.info("Rejected expired API key {}", stored.id)
        raise UnauthorizedError(
            code=ErrorCode.API_KEY_EXPIRED, context={"reason": "expired"}
        )

    return stored.account_id
