import fakeredis
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from src.adapter.cache.redis_adaptor import RedisAdaptor
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.services.token_codec import JoseTokenCodec
from src.domain.settings import TokenSettings


@pytest.fixture
def token_settings():
    return TokenSettings(
        jwt_secret="unit-test-jwt-secret-0123456789",
        encryption_key="unit-test-encryption-key-32bytes",
        validity_minutes=15,
        refresh_key_hash_rounds=4,
    )


@pytest.fixture
def codec(token_settings):
    return JoseTokenCodec(token_settings)


@pytest.fixture
def mock_sessions():
    sessions = MagicMock()
    sessions.put = AsyncMock(side_effect=lambda record: record)
    sessions.get_by_session_id = AsyncMock(return_value=None)
    sessions.get_by_auth_id_field = AsyncMock(return_value=None)
    sessions.list_by_auth_id = AsyncMock(return_value=[])
    sessions.claim_rotation = AsyncMock(return_value=True)
    sessions.delete_by_session_id = AsyncMock(return_value=True)
    sessions.delete_auth_id_entry = AsyncMock(return_value=True)
    sessions.delete_many_by_session_id = AsyncMock(return_value=0)
    sessions.delete_auth_id_fields = AsyncMock(return_value=0)
    return sessions


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def session_repository(redis_client):
    return SessionRepository(RedisAdaptor(redis_client, operation_timeout=1.0))
