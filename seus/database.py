from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from .config import Settings


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the engine (and its connection pool) for the lifetime of the app."""

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.ENVIRONMENT == "development"}
        url = make_url(settings.DATABASE_URL)
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            # A single shared connection keeps in-memory databases alive
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["poolclass"] = AsyncAdaptedQueuePool
            engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
            engine_kwargs["pool_pre_ping"] = True
            if url.get_backend_name() == "sqlite":
                # Writers on separate connections wait for the file lock
                engine_kwargs["connect_args"] = {"timeout": settings.STORE_TIMEOUT_SECONDS}

        self.engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self):
        from . import models  # noqa: F401  registers tables on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        await self.engine.dispose()
