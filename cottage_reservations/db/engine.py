"""
SQLAlchemy engine singleton with production-ready connection pooling.

PostgreSQL is the production target. SQLite is accepted for local development
and tests; it gets a busy timeout instead of pool sizing, which it ignores.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from cottage_reservations.config import DATABASE_URL, DB_TIMEOUT_SECONDS

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def build_engine(database_url: str, timeout_seconds: float = DB_TIMEOUT_SECONDS) -> Engine:
    """
    Create an engine whose connections and statements are bounded by a timeout.

    Args:
        database_url: SQLAlchemy database URL
        timeout_seconds: Upper bound for pool checkout and lock/statement waits

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            future=True,
            connect_args={"timeout": timeout_seconds, "check_same_thread": False},
            echo=False,
        )

    connect_args: dict[str, Any] = {}
    if database_url.startswith("postgresql"):
        timeout_ms = int(timeout_seconds * 1000)
        connect_args["options"] = (
            f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}"
        )

    return create_engine(
        database_url,
        future=True,
        pool_size=10,  # Number of connections to maintain in the pool
        max_overflow=20,  # Additional connections when pool is exhausted
        pool_timeout=timeout_seconds,  # Wait for a free connection before failing
        pool_pre_ping=True,  # Verify connections before using (detect stale connections)
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args=connect_args,
        echo=False,
    )


engine: Engine = build_engine(DATABASE_URL)


def check_engine_health() -> bool:
    """
    Check if database engine is healthy and connections are working.

    Used by the /ready endpoint to verify database connectivity before
    allowing traffic to the service.

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
