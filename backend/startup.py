#!/usr/bin/env python3
"""
Process entry point for production.

Checks configuration and database connectivity, then serves the app with
uvicorn. A fatal error is logged and turned into a non-zero exit status so
the process manager (systemd, Docker restart policy, ...) restarts us.
"""

import asyncio
import logging
import sys

from sqlalchemy import text

logger = logging.getLogger("app.startup")


async def check_database() -> None:
    from app.core.database import engine
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    # Pooled connections are bound to this short-lived event loop
    await engine.dispose()


def initialize_services() -> bool:
    """Verify settings and the database before accepting traffic"""
    from app.core.config import settings

    logger.info(f"Settings loaded: DEBUG={settings.debug}")
    if settings.JWT_SECRET == "your-secret-key" and not settings.debug:
        logger.error("JWT_SECRET must be set outside debug mode")
        return False

    logger.info("Testing database connection...")
    try:
        asyncio.run(check_database())
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
    logger.info("Database connection OK")
    return True


def main() -> int:
    # Importing main configures logging and the process-wide exception hooks
    import uvicorn
    from main import app
    from app.core.config import settings

    if not initialize_services():
        return 1

    logger.info("Starting uvicorn server...")
    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=8000,
            log_level=settings.log_level,
            timeout_graceful_shutdown=30,
        )
    except Exception:
        logger.critical("Server crashed", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
