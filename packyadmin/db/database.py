"""
Database engine, session and client management.

Provides the async SQLAlchemy engine, the session factory and the
process-wide catalog client used by the API.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from packyadmin.config import settings
from packyadmin.db.client import CatalogClient
from packyadmin.models.db import Base

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

catalog_client = CatalogClient(async_session_factory)


def get_client() -> CatalogClient:
    """Dependency that provides the shared catalog client."""
    return catalog_client


async def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models.
    Should be called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
