"""
Database connection and session management.
Provides the pooled engine, the session factory and the store error type.
"""
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from visualizer.config import settings

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the candle store cannot be reached or a query fails."""


def _connect_args(url: URL) -> dict:
    if url.get_backend_name() == "postgresql" and settings.db_statement_timeout_ms > 0:
        # Server-side cap on query duration
        return {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"}
    return {}


def create_db_engine(url: URL):
    """Create the pooled engine for the given store URL."""
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout_seconds,
        pool_pre_ping=True,  # Verify connections before using
        connect_args=_connect_args(url),
        echo=False,
    )


# Create database engine with connection pooling
engine = create_db_engine(settings.sqlalchemy_url())

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_connection(db: Session):
    """Run a trivial round-trip against the store, raising StoreError on failure."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise StoreError(f"database unavailable: {exc}") from exc


def get_db():
    """
    Dependency for FastAPI endpoints.
    Provides a database session that auto-closes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dispose_engine():
    """Close every pooled connection. Called on shutdown."""
    engine.dispose()
    logger.info("Database engine disposed")
