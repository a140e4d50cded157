from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from fastapi import Request
from typing import AsyncGenerator, Optional

from unidirectory.core.config import Settings
from unidirectory.core.logging_config import logger

# Create base class for models
Base = declarative_base()

# Primary and foreign keys are INTEGER columns; Postgres stores them in 32 bits
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1


def fits_integer_column(value: int) -> bool:
    """False for ids no INTEGER column can hold; such ids can never match a row"""
    return INTEGER_MIN <= value <= INTEGER_MAX


def get_database_url(database_url: str) -> str:
    """Get properly formatted async database URL"""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return database_url


class Database:
    """
    Owns the async engine and session factory.

    Created by the application factory and attached to ``app.state``;
    nothing connects until the first session is opened. ``close()`` is
    called once at shutdown.

    Connection pooling strategy:
    - SQLite: NullPool (required for thread safety)
    - Development: NullPool (simpler debugging)
    - Production: QueuePool sized by DB_POOL_* settings
    """

    def __init__(self, settings: Settings):
        self.url = get_database_url(settings.DATABASE_URL)
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False
            )
        return self._session_factory

    def _create_engine(self) -> AsyncEngine:
        settings = self._settings

        if "sqlite" in self.url:
            return create_async_engine(
                self.url,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
                poolclass=NullPool,
            )

        if settings.is_dev_mode():
            return create_async_engine(
                self.url,
                echo=settings.DB_ECHO,
                poolclass=NullPool,
            )

        return create_async_engine(
            self.url,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,  # Verify connections before use
        )

    def session(self) -> AsyncSession:
        """Create a new async session"""
        return self.session_factory()

    async def create_tables(self) -> None:
        """Create any missing tables"""
        import unidirectory.models  # noqa: F401  register models on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Check that the database answers a trivial query"""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"[Database] Ping failed: {e}")
            return False

    async def close(self) -> None:
        """Dispose the engine and its pooled connections"""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


def get_database(request: Request) -> Database:
    """Dependency returning the application's Database"""
    return request.app.state.db


# Dependency to get DB session
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session - only commits if there are pending changes"""
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
