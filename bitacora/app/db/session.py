# bitacora/app/db/session.py
"""
Async database handle for SQLAlchemy.

The ``Database`` object is built explicitly by the application factory and
stored on ``app.state``; nothing here is a module-level singleton.

- Uses asyncpg for PostgreSQL (production)
- Uses aiosqlite for SQLite (local development and tests)
- Pool settings differ for SQLite (no pooling) vs PostgreSQL
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from bitacora.app.core.config import Settings
from bitacora.app.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine and the session factory.

    Lifecycle:
        db = Database(settings)
        await db.connect()      # engine + tables
        ...
        await db.disconnect()   # dispose pool
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        """
        SQLite (local development):
        - NullPool, SQLite doesn't benefit from connection pooling
        - check_same_thread=False for async compatibility

        PostgreSQL (production):
        - pool_size=5 / max_overflow=10
        - pool_pre_ping=True to detect stale connections
        - pool_recycle=300, hosted databases may close idle connections
        """
        if self._settings.is_sqlite:
            return create_async_engine(
                self._settings.DATABASE_URL,
                echo=self._settings.DATABASE_ECHO,
                poolclass=NullPool,
                connect_args={"check_same_thread": False},
            )

        return create_async_engine(
            self._settings.DATABASE_URL,
            echo=self._settings.DATABASE_ECHO,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=300,
        )

    async def connect(self, create_tables: bool = True) -> None:
        if self._engine is not None:
            logger.debug("Reusing existing database engine")
            return

        self._engine = self._create_engine()
        # expire_on_commit=False: attributes stay readable after commit
        # autoflush=False: explicit flush control
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if create_tables:
            # Models must be imported so their tables are registered on Base.metadata
            from bitacora.app import models  # noqa: F401

            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Connected to database (%s)", self._engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Disconnected from database")

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._sessionmaker()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    One session per request, closed after the response. This does NOT
    auto-commit; endpoints commit explicitly.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
