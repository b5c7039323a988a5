"""
End-to-end session lifecycle against an in-memory Redis
"""

import asyncio
from datetime import timedelta
from types import SimpleNamespace

import pytest

from src.app.use_cases.auth import (
    CreateTokenUseCase,
    RefreshTokenUseCase,
    ValidateTokenUseCase,
)
from src.app.use_cases.sessions import (
    ListSessionsUseCase,
    ReconcileSessionsUseCase,
    RevokeSessionsUseCase,
)
from src.domain.base import utc_now
from src.domain.entities import ErrorCode, SessionRecord


@pytest.fixture
def engine(session_repository, codec, token_settings):
    return SimpleNamespace(
        create=CreateTokenUseCase(session_repository, codec, token_settings),
        validate=ValidateTokenUseCase(session_repository, codec),
        refresh=RefreshTokenUseCase(session_repository, codec, token_settings),
        revoke=RevokeSessionsUseCase(session_repository, token_settings),
        list_sessions=ListSessionsUseCase(session_repository, token_settings),
    )


@pytest.mark.asyncio
async def test_issue_validate_revoke(engine):
    """Test issue, validate, revoke and validate again"""
    issued = (await engine.create.execute("u1", "admin")).value

    validated = await engine.validate.execute(issued.access_token)
    assert validated.is_ok()
    assert validated.value.auth_id == "u1"
    assert validated.value.role == "admin"

    revoked = await engine.revoke.revoke_session(issued.session_id)
    assert revoked.value is True

    result = await engine.validate.execute(issued.access_token)
    assert result.is_err()
    assert result.error.code == ErrorCode.token_revoked.value


@pytest.mark.asyncio
async def test_two_sessions_then_revoke_all(engine, session_repository):
    """Test revoke all removes every session of the principal"""
    laptop = (await engine.create.execute("u1", "member", "laptop")).value
    phone = (await engine.create.execute("u1", "member", "phone")).value

    assert len(await session_repository.list_by_auth_id("u1")) == 2
    listed = await engine.list_sessions.execute("u1")
    assert {r.id for r in listed.value} == {laptop.session_id, phone.session_id}

    result = await engine.revoke.revoke_all_sessions("u1")
    assert result.value == 2

    assert await session_repository.list_by_auth_id("u1") == []
    for issued in (laptop, phone):
        validated = await engine.validate.execute(issued.access_token)
        assert validated.error.code == ErrorCode.token_revoked.value


@pytest.mark.asyncio
async def test_expired_claims_fail_even_if_stored(engine, session_repository, codec):
    """Test claims expiry wins over a surviving store entry"""
    created_at = utc_now() - timedelta(minutes=20)
    record = SessionRecord(
        auth_id="u1",
        role="member",
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=15),
    )
    access_token, _ = codec.encode(record)
    await session_repository.put(record)

    result = await engine.validate.execute(access_token)

    assert result.is_err()
    assert result.error.code == ErrorCode.token_expired.value


@pytest.mark.asyncio
async def test_refresh_rotates_and_invalidates_old(engine):
    """Test refresh issues a new session and the old one stops validating"""
    issued = (await engine.create.execute("u1", "member", "phone")).value

    refreshed = await engine.refresh.execute(issued.refresh_key, issued.access_token)

    assert refreshed.is_ok()
    assert refreshed.value.session_id != issued.session_id
    assert refreshed.value.expires_at > issued.expires_at

    old = await engine.validate.execute(issued.access_token)
    assert old.error.code == ErrorCode.token_revoked.value
    new = await engine.validate.execute(refreshed.value.access_token)
    assert new.is_ok()

    # The old refresh key is single use
    replay = await engine.refresh.execute(issued.refresh_key, issued.access_token)
    assert replay.error.code == ErrorCode.token_revoked.value


@pytest.mark.asyncio
async def test_refresh_mismatch_on_valid_credential(engine):
    first = (await engine.create.execute("u1", "member", "laptop")).value
    second = (await engine.create.execute("u1", "member", "phone")).value

    result = await engine.refresh.execute(second.refresh_key, first.access_token)

    assert result.is_err()
    assert result.error.code == ErrorCode.refresh_mismatch.value
    assert (await engine.validate.execute(first.access_token)).is_ok()


@pytest.mark.asyncio
async def test_reconcile_after_asymmetric_revoke(
    session_repository, codec, token_settings
):
    """Test reconcile prunes the principal field a single revoke left behind"""
    settings = token_settings.model_copy(update={"symmetric_revoke": False})
    create = CreateTokenUseCase(session_repository, codec, settings)
    revoke = RevokeSessionsUseCase(session_repository, settings)
    issued = (await create.execute("u1", "member")).value

    await revoke.revoke_session(issued.session_id)
    assert len(await session_repository.list_by_auth_id("u1")) == 1

    pruned = await ReconcileSessionsUseCase(session_repository).execute("u1")

    assert pruned.value == 1
    assert await session_repository.list_by_auth_id("u1") == []


@pytest.mark.asyncio
async def test_same_slot_reissue_then_revoke_all(engine):
    """Test a session issued into an occupied slot replaces the earlier one"""
    first = (await engine.create.execute("u1", "admin")).value
    second = (await engine.create.execute("u1", "admin")).value

    replaced = await engine.validate.execute(first.access_token)
    assert replaced.error.code == ErrorCode.token_revoked.value
    assert (await engine.validate.execute(second.access_token)).is_ok()

    result = await engine.revoke.revoke_all_sessions("u1")
    assert result.value == 1

    for issued in (first, second):
        validated = await engine.validate.execute(issued.access_token)
        assert validated.error.code == ErrorCode.token_revoked.value


@pytest.mark.asyncio
async def test_concurrent_refresh_with_same_key(engine, session_repository):
    """Test a refresh key rotates the session only once under concurrency"""
    issued = (await engine.create.execute("u1", "member", "phone")).value

    results = await asyncio.gather(
        engine.refresh.execute(issued.refresh_key, issued.access_token),
        engine.refresh.execute(issued.refresh_key, issued.access_token),
    )

    winners = [r for r in results if r.is_ok()]
    losers = [r for r in results if r.is_err()]
    assert len(winners) == 1
    assert losers[0].error.code == ErrorCode.token_revoked.value

    listed = await session_repository.list_by_auth_id("u1")
    assert [r.id for r in listed] == [winners[0].value.session_id]

    await engine.revoke.revoke_all_sessions("u1")
    validated = await engine.validate.execute(winners[0].value.access_token)
    assert validated.error.code == ErrorCode.token_revoked.value


@pytest.mark.asyncio
async def test_concurrent_refresh_of_expired_session(engine, session_repository, codec):
    """Test the principal map fallback is also single use"""
    created_at = utc_now() - timedelta(minutes=20)
    record = SessionRecord(
        auth_id="u1",
        role="member",
        session_secret="phone",
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=15),
    )
    access_token, refresh_key = codec.encode(record)
    record.refresh_key_hash = codec.hash_refresh_key(refresh_key)
    await session_repository.put(record)
    await session_repository.delete_by_session_id(record.id)

    results = await asyncio.gather(
        engine.refresh.execute(refresh_key, access_token),
        engine.refresh.execute(refresh_key, access_token),
    )

    winners = [r for r in results if r.is_ok()]
    assert len(winners) == 1
    listed = await session_repository.list_by_auth_id("u1")
    assert [r.id for r in listed] == [winners[0].value.session_id]

    replay = await engine.refresh.execute(refresh_key, access_token)
    assert replay.error.code == ErrorCode.token_revoked.value
