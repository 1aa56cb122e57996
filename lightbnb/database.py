"""
Database engine and session management.
The engine owns the process-wide connection pool; sessions are checked out per operation.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, text
from lightbnb.config import Settings, settings
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


def build_engine(config: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.
    Pool sizing only applies to PostgreSQL; SQLite uses SQLAlchemy's default pool.
    """
    url = config.sqlalchemy_database_url
    options: Dict[str, Any] = {"echo": config.debug}

    if url.startswith("postgresql"):
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=config.db_pool_recycle,
            pool_timeout=config.db_pool_timeout,
            connect_args={
                "server_settings": {
                    "application_name": "lightbnb",
                }
            },
        )

    return create_async_engine(url, **options)


# Created once at import and reused for the lifetime of the process
engine = build_engine(settings)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Every table in the schema uses an integer surrogate key.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


async def check_database_connection(
    session_factory: Optional[async_sessionmaker] = None
) -> bool:
    """
    Check database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    factory = session_factory or AsyncSessionLocal
    try:
        async with factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def create_tables(target_engine: Optional[AsyncEngine] = None):
    """
    Create all database tables.
    Used for local development and tests; production schemas are managed elsewhere.
    """
    # Register every model on Base.metadata
    import lightbnb.models  # noqa: F401

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")


async def drop_tables(target_engine: Optional[AsyncEngine] = None):
    """
    Drop all database tables.
    This should only be used in testing or development.
    """
    if target_engine is None and settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import lightbnb.models  # noqa: F401

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")


async def close_db_connection():
    """
    Dispose of the connection pool.
    Optional; the pool otherwise lives until the process exits.
    """
    await engine.dispose()
    logger.info("Database connections closed")
