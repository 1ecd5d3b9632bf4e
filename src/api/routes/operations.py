"""Unauthenticated operational endpoints, mounted outside the API prefix.

``/health`` always answers 200: an unreachable database is reported as
``degraded`` so orchestrators can tell a slow start from a dead process.
"""

from typing import Annotated, Any, cast

from fastapi import APIRouter, Depends
from loguru import logger

from src.core.config import Settings, get_settings
from src.infrastructure.database.session import check_database_connection, get_engine

router = APIRouter(tags=["operations"])


def log_pool_usage() -> None:
    pool = cast("Any", get_engine().pool)
    logger.bind(
        metric_type="db.pool.health",
        checked_out=pool.checkedout(),
        size=pool.size(),
        overflow=pool.overflow(),
    ).info("Database pool health check")


@router.get("/health")
async def health() -> dict[str, object]:
    """Report service status and database reachability."""
    reachable, error_msg = await check_database_connection()
    if not reachable:
        logger.warning("Database unreachable during health check: {}", error_msg)
        return {"status": "degraded", "database": False}

    log_pool_usage()
    return {"status": "healthy", "database": True}


@router.get("/info")
async def info(settings: Annotated[Settings, Depends(get_settings)]) -> dict[str, Any]:
    """Describe the running build."""
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
    }
