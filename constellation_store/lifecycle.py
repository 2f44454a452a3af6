"""
Store lifecycle.

Startup and shutdown for processes that embed the store: configure logging,
create missing tables, and dispose of the engine on the way out.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from constellation_store.config import Settings, get_settings
from constellation_store.database import close_db, init_db
from constellation_store.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def store_lifespan(
    settings: Optional[Settings] = None,
    bind: Optional[AsyncEngine] = None,
) -> AsyncGenerator[Settings, None]:
    """
    Run the store's startup and shutdown tasks around a block.

    Usage:
        async with store_lifespan():
            async with session_scope() as session:
                await ConstellationService(session).write(graph, VersionStatus.NEEDS_REVIEW)

    Args:
        settings: Settings to use; defaults to the cached environment settings
        bind: Engine to initialize and dispose; defaults to the module engine
    """
    settings = settings or get_settings()

    # Configure logging first
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db(bind)
    logger.info("Database initialized")

    try:
        yield settings
    finally:
        logger.info("Shutting down...")
        await close_db(bind)
        logger.info("Database connections closed")
