"""Process entry point: logging, store lifecycle and the uvicorn server."""
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from visualizer.api import api
from visualizer.config import settings
from visualizer.database import SessionLocal, StoreError, check_connection, dispose_engine

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without a reachable store; release the pool on the way out."""
    logger.info("Starting Candle Visualizer...")

    try:
        with SessionLocal() as session:
            check_connection(session)
    except StoreError as exc:
        logger.error(f"Startup failed: {exc}")
        dispose_engine()
        raise
    logger.info("Database connected successfully")

    try:
        yield
    finally:
        logger.info("Shutting down Candle Visualizer...")
        dispose_engine()
        logger.info("Shutdown complete")


api.router.lifespan_context = lifespan


def main():
    """Run the application."""
    logger.info(
        "Configuration loaded",
        extra={
            "host": settings.host,
            "port": settings.port,
            "log_level": settings.log_level,
            "default_figi": settings.default_figi,
            "default_interval": settings.default_interval,
            "db_pool_size": settings.db_pool_size,
            "db_max_overflow": settings.db_max_overflow,
            "db_pool_timeout_seconds": settings.db_pool_timeout_seconds,
        },
    )

    uvicorn.run(
        api,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
        access_log=True,
    )


if __name__ == "__main__":
    main()
