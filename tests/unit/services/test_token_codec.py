"""
Unit tests for the JOSE token codec
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.adapter.services.token_codec import JoseTokenCodec
from src.domain.base import utc_now
from src.domain.entities import DEFAULT_SESSION_SECRET, SessionRecord
from src.domain.exceptions import (
    TokenEncodingError,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)
from src.domain.settings import TokenSettings


def make_record(**overrides) -> SessionRecord:
    now = utc_now()
    values = dict(
        auth_id="u1",
        role="admin",
        session_secret="laptop",
        created_at=now,
        expires_at=now + timedelta(minutes=15),
    )
    values.update(overrides)
    return SessionRecord(**values)


def test_encode_decode_round_trip(codec):
    """Decoding an encoded record returns the same claims"""
    record = make_record()

    access_token, refresh_key = codec.encode(record)
    decoded = codec.decode(access_token)

    assert decoded.id == record.id
    assert decoded.auth_id == "u1"
    assert decoded.role == "admin"
    assert decoded.session_secret == "laptop"
    assert decoded.created_at == record.created_at
    assert decoded.expires_at == record.expires_at
    assert decoded.refresh_key_hash is None
    assert refresh_key
    assert refresh_key not in access_token


def test_access_token_is_opaque(codec):
    """Claims are not readable without the encryption key"""
    access_token, _ = codec.encode(make_record(auth_id="visible-principal"))

    # Compact JWE: header.encrypted_key.iv.ciphertext.tag
    assert access_token.count(".") == 4
    assert "visible-principal" not in access_token


def test_default_session_secret_survives_round_trip(codec):
    access_token, _ = codec.encode(make_record(session_secret=None))

    assert codec.decode(access_token).session_secret == DEFAULT_SESSION_SECRET


def test_decode_expired_token(codec):
    """Claims past expiry raise TokenExpired"""
    past = utc_now() - timedelta(hours=1)
    access_token, _ = codec.encode(
        make_record(created_at=past, expires_at=past + timedelta(minutes=15))
    )

    with pytest.raises(TokenExpired):
        codec.decode(access_token)


def test_decode_expired_token_claims_only(codec):
    """Expiry is ignored on the claims-only path used by refresh"""
    past = utc_now() - timedelta(hours=1)
    record = make_record(created_at=past, expires_at=past + timedelta(minutes=15))
    access_token, _ = codec.encode(record)

    decoded = codec.decode(access_token, verify_expiry=False)

    assert decoded.id == record.id
    assert decoded.is_expired(datetime.now(UTC))


@pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c.d.e", "Bearer xyz"])
def test_decode_garbage_is_malformed(codec, garbage):
    with pytest.raises(TokenMalformed):
        codec.decode(garbage)


def test_decode_tampered_ciphertext_is_malformed(codec):
    access_token, _ = codec.encode(make_record())
    header, key, iv, ciphertext, tag = access_token.split(".")
    flipped = ("A" if ciphertext[0] != "A" else "B") + ciphertext[1:]

    with pytest.raises(TokenMalformed):
        codec.decode(".".join([header, key, iv, flipped, tag]))


def test_decode_with_other_encryption_key_is_malformed(codec, token_settings):
    access_token, _ = codec.encode(make_record())
    other = JoseTokenCodec(
        token_settings.model_copy(
            update={"encryption_key": "another-encryption-key-32-bytes!"}
        )
    )

    with pytest.raises(TokenMalformed):
        other.decode(access_token)


def test_decode_with_other_signing_key_is_signature_invalid(codec, token_settings):
    """Same encryption key, different signing secret"""
    access_token, _ = codec.encode(make_record())
    other = JoseTokenCodec(
        token_settings.model_copy(update={"jwt_secret": "some-other-jwt-secret-987654"})
    )

    with pytest.raises(TokenSignatureInvalid):
        other.decode(access_token)


def test_refresh_keys_are_unique(codec):
    record = make_record()

    _, first = codec.encode(record)
    _, second = codec.encode(record)

    assert first != second


def test_refresh_key_hash_verification(codec):
    _, refresh_key = codec.encode(make_record())
    refresh_key_hash = codec.hash_refresh_key(refresh_key)

    assert refresh_key_hash != refresh_key
    assert codec.verify_refresh_key(refresh_key, refresh_key_hash) is True
    assert codec.verify_refresh_key("wrong-key", refresh_key_hash) is False
    assert codec.verify_refresh_key(refresh_key, "not-a-bcrypt-hash") is False
    assert codec.verify_refresh_key(refresh_key, None) is False


def test_multibyte_encryption_key_rejected_at_startup():
    """32 characters but 33 bytes is unusable key material"""
    settings = TokenSettings(
        jwt_secret="unit-test-jwt-secret-0123456789",
        encryption_key="é" + "k" * 31,
        refresh_key_hash_rounds=4,
    )

    with pytest.raises(TokenEncodingError):
        JoseTokenCodec(settings)
