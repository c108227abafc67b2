"""Application lifespan: startup and shutdown.

Only wiring of infrastructure (logging, SQL engine dispose); no business
logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; consent endpoints will answer 503")
    if not settings.smtp_host:
        logger.warning("SMTP_HOST is not set; emails are logged instead of sent")

    yield

    from app.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
