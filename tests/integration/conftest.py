import fakeredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig


class TestConfig(ApplicationConfig):
    __test__ = False

    JWT_SECRET = "integration-test-jwt-secret-0123"
    ENCRYPTION_KEY = "integration-test-encryption-key!"
    REFRESH_KEY_HASH_ROUNDS = 4
    ADMIN_API_KEY = "test-admin-key-12345"
    ADMIN_ROLES = "admin,owner"
    SYMMETRIC_REVOKE = True
    EXPOSE_AUTH_ERROR_CODES = False


@pytest.fixture
def app_config():
    return TestConfig


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": TestConfig.ADMIN_API_KEY}


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def app(app_config, redis_client):
    from src.api.app import create_app

    return create_app(app_config, redis_client=redis_client)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def issue_token(client, admin_headers):
    """Issue a session through the admin endpoint and return the response body"""

    async def _issue(auth_id="user-1", role="member", session_secret=None):
        payload = {"auth_id": auth_id, "role": role}
        if session_secret is not None:
            payload["session_secret"] = session_secret
        response = await client.post("/tokens", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _issue
