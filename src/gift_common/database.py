"""Async SQLAlchemy engine/session factory for the PostgreSQL order store.

Only built when ORDER_STORE_BACKEND=postgres; the in-memory store needs no
engine at all, so nothing here runs at import time.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings


def create_engine(app_settings: Settings) -> AsyncEngine:
    return create_async_engine(
        app_settings.DATABASE_URL,
        echo=app_settings.DEBUG,
        pool_size=app_settings.DB_POOL_SIZE,
        max_overflow=10,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
