import pytest
from httpx import AsyncClient, ASGITransport

from seus.config import Settings
from seus.redirect import create_redirect_app


def make_client(**overrides) -> AsyncClient:
    settings = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", DOMAIN="seus.test", _env_file=None, **overrides)
    app = create_redirect_app(settings)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://seus.test")


@pytest.mark.asyncio
async def test_upgrade_preserves_path_and_query():
    async with make_client(HTTPS_PORT=8443) as client:
        response = await client.get("/api/create?url=https://example.com")

    assert response.status_code == 308
    assert response.headers["location"] == "https://seus.test:8443/api/create?url=https://example.com"


@pytest.mark.asyncio
async def test_upgrade_omits_default_port():
    async with make_client(HTTPS_PORT=443) as client:
        response = await client.get("/Ab3_9Z")

    assert response.status_code == 308
    assert response.headers["location"] == "https://seus.test/Ab3_9Z"


@pytest.mark.asyncio
async def test_upgrade_root():
    async with make_client(HTTPS_PORT=443) as client:
        response = await client.post("/")

    assert response.status_code == 308
    assert response.headers["location"] == "https://seus.test/"
