"""Application factory for the Inventory API.

``create_app`` wires settings, logging, exception handlers, middleware and
routers into one FastAPI instance; the module-level ``app`` is what uvicorn
serves. Starlette runs middleware in reverse order of registration, so the
correlation id exists by the time the request is logged.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.routes import api_router
from src.api.routes.operations import router as operations_router
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.infrastructure.database.session import check_database_connection, close_database


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Refuse to start without a database; dispose of the pool on shutdown.

    Raises:
        RuntimeError: If the database is unreachable at startup.
    """
    reachable, error_msg = await check_database_connection()
    if not reachable:
        logger.error("Cannot start {}: database unreachable: {}", app_instance.title, error_msg)
        raise RuntimeError(f"Database connection failed: {error_msg}")

    logger.info("{} v{} ready", app_instance.title, app_instance.version)
    try:
        yield
    finally:
        await close_database()
        logger.info("{} stopped", app_instance.title)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use; defaults to ``get_settings()``.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)

    application.include_router(operations_router)
    application.include_router(api_router, prefix=settings.api_prefix)

    return application


app = create_app()
