"""Inventory API - multi-tenant inventory resources over HTTP.

Architecture Overview:
- **API Layer**: FastAPI routers, middleware and exception handlers
- **Core Layer**: Configuration, logging, errors and parameter validation
- **Domain Layer**: Resource models, pagination, expansion and services
- **Infrastructure Layer**: Async PostgreSQL persistence

Every resource belongs to exactly one account (tenant), and every read and
write is scoped to the account that owns the calling API key.
"""
