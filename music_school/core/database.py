# music_school/core/database.py
"""Database connection and session management using SQLAlchemy.

The persistence gateway is an explicitly constructed ``Database`` object,
opened in the application lifespan and closed on shutdown. There is one
subclass per supported backend; services never inspect the dialect
themselves, they ask the gateway for backend-specific statements.
"""
from typing import AsyncGenerator, Iterable, Optional
from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
import logging

from .exceptions import MusicSchoolException

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and hands out sessions."""

    backend = "generic"

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def _engine_options(self) -> dict:
        return {}

    async def connect(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, echo=self.echo, **self._engine_options())
        self._configure_engine(self.engine)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )
        logger.info(f"Database connected ({self.backend})")

    def _configure_engine(self, engine: AsyncEngine) -> None:
        pass

    async def create_all(self) -> None:
        """Create tables if they do not exist."""
        from ..models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected")
        return self.session_factory()

    def insert_if_absent(self, table, values: dict, conflict_columns: Iterable[str]):
        """Build an INSERT that silently skips rows violating the unique key.

        Returns a statement with ``RETURNING`` the primary key; executing it
        yields no row when the row already existed.
        """
        raise NotImplementedError

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self) -> None:
        """Properly close all database connections"""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")


class PostgresDatabase(Database):
    backend = "postgresql"

    def _engine_options(self) -> dict:
        return {
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
            "connect_args": {
                "server_settings": {
                    "application_name": "music_school_api",
                    "statement_timeout": "30s",
                }
            },
        }

    def insert_if_absent(self, table, values: dict, conflict_columns: Iterable[str]):
        stmt = postgresql.insert(table).values(**values)
        return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns)).returning(table.id)


class SqliteDatabase(Database):
    backend = "sqlite"

    def _configure_engine(self, engine: AsyncEngine) -> None:
        # ON DELETE CASCADE needs foreign keys switched on per connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    def insert_if_absent(self, table, values: dict, conflict_columns: Iterable[str]):
        stmt = sqlite.insert(table).values(**values)
        return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns)).returning(table.id)


def create_database(url: str, echo: bool = False) -> Database:
    """Pick the gateway implementation matching the URL's backend."""
    if url.startswith("postgresql"):
        return PostgresDatabase(url, echo=echo)
    if url.startswith("sqlite"):
        return SqliteDatabase(url, echo=echo)
    raise ValueError(f"Unsupported database URL: {url}")


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    async with get_database(request).session() as session:
        try:
            yield session
        except MusicSchoolException:
            await session.rollback()
            raise
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
