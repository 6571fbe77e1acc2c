import pytest
from typing import AsyncGenerator
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from seus.config import Settings
from seus.database import Database
from seus.main import create_app
from seus.registry import CodeRegistry


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ENVIRONMENT="test",
        DOMAIN="seus.test",
        _env_file=None,
    )

@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    db = Database(settings)
    await db.create_all()
    yield db
    await db.close()

@pytest.fixture
def registry(database: Database) -> CodeRegistry:
    return CodeRegistry(database, timeout=5.0)

@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    app = create_app(settings)
    # ASGITransport does not emit lifespan events; run them here
    async with app.router.lifespan_context(app):
        yield app

@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
