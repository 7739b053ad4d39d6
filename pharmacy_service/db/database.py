# pharmacy_service/db/database.py
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from pharmacy_service.config import Settings

# Базовый класс для моделей
Base = declarative_base()


def _enable_sqlite_foreign_keys(engine: AsyncEngine):
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    if settings.database_url.startswith("sqlite"):
        # SQLite doesn't support connection pooling parameters
        engine = create_async_engine(settings.database_url, echo=settings.database_echo, poolclass=NullPool)
        _enable_sqlite_foreign_keys(engine)
        return engine
    return create_async_engine(settings.database_url, echo=settings.database_echo, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


# Генератор сессий
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        yield session
