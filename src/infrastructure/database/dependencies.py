"""FastAPI dependency injection for database sessions and repositories.

Key features:
- **Transaction management**: One session per request, committed on success
  and rolled back on error
- **Repositories**: Tenant-scoped repositories bound to the request session
- **Type safety**: Annotated aliases for clear dependency declaration
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.registry import Services
from src.infrastructure.database.models import (
    Group,
    Inventory,
    Item,
    ItemIdentifiers,
    Price,
)
from src.infrastructure.database.repository import TenantRepository
from src.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a database session for the duration of one request.

    Yields:
        AsyncSession: Session committed on success, rolled back on error.
    """
    async with get_async_session() as session:
        logger.debug("Providing database session for request")
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def build_services(session: AsyncSession) -> Services:
    """Create the resource services over repositories bound to ``session``."""
    return Services.build(
        groups=TenantRepository(session, Group),
        inventories=TenantRepository(session, Inventory),
        item_identifiers=TenantRepository(session, ItemIdentifiers),
        items=TenantRepository(session, Item),
        prices=TenantRepository(session, Price),
    )


async def get_services(session: DatabaseSession) -> Services:
    return build_services(session)


ResourceServices = Annotated[Services, Depends(get_services)]
