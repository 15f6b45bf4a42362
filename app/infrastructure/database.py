"""
Database setup and session management.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.settings import get_settings
from app.domain.message import Base

settings = get_settings()

# Seconds a SQLite connection waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = 10


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the message store.

    SQLite URLs get a single shared connection (StaticPool) so the
    scheduler and request handlers see the same database.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
            poolclass=StaticPool,
        )

    return create_async_engine(database_url, echo=echo, pool_timeout=SQLITE_BUSY_TIMEOUT)


engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_database() -> None:
    """Initialize database and create tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_database() -> None:
    """Close pooled connections."""
    await engine.dispose()
