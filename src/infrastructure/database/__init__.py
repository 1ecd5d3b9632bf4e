"""Database infrastructure with async PostgreSQL and the repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: Tables for accounts, API keys and the five resources
- **session**: Async engine and session management
- **repository**: Tenant-scoped repository with cursor listing
- **dependencies**: FastAPI dependency injection helpers
"""

from src.infrastructure.database.base import Base, BaseModel, TenantModel
from src.infrastructure.database.dependencies import (
    DatabaseSession,
    ResourceServices,
    get_db,
)
from src.infrastructure.database.repository import ApiKeyRepository, TenantRepository
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_async_session,
    get_engine,
)

__all__ = [
    "ApiKeyRepository",
    "Base",
    "BaseModel",
    "DatabaseSession",
    "ResourceServices",
    "TenantModel",
    "TenantRepository",
    "check_database_connection",
    "close_database",
    "get_async_session",
    "get_db",
    "get_engine",
]
