"""Database session management."""
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from cricstats.core.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        # Single shared connection so temporary tables and in-memory data stay visible
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "poolclass": QueuePool,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_reset_on_return": "rollback",  # Discards any temporary tables left in an open transaction
    }


def build_engine(database_url: str) -> Engine:
    return create_engine(
        database_url,
        echo=settings.DB_ECHO,
        future=True,
        **_engine_options(database_url),
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def get_db():
    """Dependency that provides a transactional database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
