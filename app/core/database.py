"""PostgreSQL connection pool and session management."""

import logging
from collections.abc import Generator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=settings.DB_MIN_CONNS,
    max_overflow=max(settings.DB_MAX_CONNS - settings.DB_MIN_CONNS, 0),
    pool_timeout=settings.DB_POOL_TIMEOUT_SEC,
    pool_recycle=3600,
    connect_args={
        "connect_timeout": settings.DB_CONNECT_TIMEOUT_SEC,
        # Every statement on a pooled connection runs under this deadline.
        "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
    },
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(bind: Engine) -> bool:
    """Run `SELECT 1` on a connection of its own from `bind`, never a request session."""
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database ping failed")
        return False


def dispose_engine() -> None:
    """Close every pooled connection; called once on application shutdown."""
    engine.dispose()
    logger.info("Database connection pool closed")
