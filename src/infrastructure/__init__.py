"""Infrastructure layer: persistence behind the domain services.

Key responsibilities:
- **Database access**: Async PostgreSQL with SQLAlchemy 2.0+
- **Repository pattern**: Tenant-scoped CRUD for every resource table
- **Connection management**: Pooling, health checks, and lifecycle

Repositories satisfy the ``Repository`` protocol declared by the domain
layer, so services never import from here.
"""
