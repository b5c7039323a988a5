"""
Token Codec

Access tokens are HS256-signed JWTs sealed inside a compact JWE
(alg=dir, enc=A256GCM), so holders without the encryption key see an opaque
string. Refresh keys are random URL-safe strings; only their bcrypt hash is
stored server side.
"""

import secrets
from datetime import UTC, datetime
from typing import Tuple

import bcrypt
from jose import jwe, jws, jwt
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError
from pydantic import ValidationError

from src.app.services.token_codec import ITokenCodec
from src.domain.entities import SessionRecord
from src.domain.exceptions import (
    TokenEncodingError,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)
from src.domain.settings import TokenSettings

ENCRYPTION_KEY_BYTES = 32


class JoseTokenCodec(ITokenCodec):
    def __init__(self, settings: TokenSettings):
        self._jwt_secret = settings.jwt_secret
        self._encryption_key = settings.encryption_key.encode("utf-8")
        self._hash_rounds = settings.refresh_key_hash_rounds

        if len(self._encryption_key) != ENCRYPTION_KEY_BYTES:
            raise TokenEncodingError(
                f"Encryption key must be {ENCRYPTION_KEY_BYTES} bytes, "
                f"got {len(self._encryption_key)}"
            )
        self._self_check()

    def _self_check(self) -> None:
        # Fail at startup on unusable key material
        try:
            sealed = jwe.encrypt(
                b"self-check",
                self._encryption_key,
                algorithm=ALGORITHMS.DIR,
                encryption=ALGORITHMS.A256GCM,
            )
            jwe.decrypt(sealed, self._encryption_key)
            jwt.encode({"check": True}, self._jwt_secret, algorithm=ALGORITHMS.HS256)
        except (JOSEError, TypeError, ValueError) as exc:
            raise TokenEncodingError(f"Unusable token key material: {exc}") from exc

    @staticmethod
    def _claims(record: SessionRecord) -> dict:
        return {
            "sub": record.auth_id,
            "sid": record.id,
            "role": record.role,
            "ssk": record.session_secret,
            "iat": int(record.created_at.timestamp()),
            "exp": int(record.expires_at.timestamp()),
        }

    def encode(self, record: SessionRecord) -> Tuple[str, str]:
        try:
            signed = jwt.encode(
                self._claims(record), self._jwt_secret, algorithm=ALGORITHMS.HS256
            )
            sealed = jwe.encrypt(
                signed.encode("utf-8"),
                self._encryption_key,
                algorithm=ALGORITHMS.DIR,
                encryption=ALGORITHMS.A256GCM,
            )
        except (JOSEError, TypeError, ValueError) as exc:
            raise TokenEncodingError(f"Failed to encode access token: {exc}") from exc
        return sealed.decode("ascii"), self.new_refresh_key()

    def decode(self, access_token: str, verify_expiry: bool = True) -> SessionRecord:
        if not access_token:
            raise TokenMalformed("Empty access token")

        try:
            signed = jwe.decrypt(access_token, self._encryption_key)
        except (JOSEError, TypeError, ValueError) as exc:
            raise TokenMalformed("Access token could not be decrypted") from exc
        if not signed:
            raise TokenMalformed("Access token could not be decrypted")

        try:
            signed = signed.decode("utf-8")
            jws.get_unverified_claims(signed)
        except (JOSEError, UnicodeDecodeError) as exc:
            raise TokenMalformed("Access token payload is not a signed token") from exc

        try:
            claims = jwt.decode(
                signed,
                self._jwt_secret,
                algorithms=[ALGORITHMS.HS256],
                options={"verify_exp": False},
            )
        except JOSEError as exc:
            raise TokenSignatureInvalid("Access token signature is invalid") from exc

        try:
            record = SessionRecord(
                id=claims["sid"],
                auth_id=claims["sub"],
                role=claims["role"],
                session_secret=claims.get("ssk"),
                created_at=datetime.fromtimestamp(claims["iat"], UTC),
                expires_at=datetime.fromtimestamp(claims["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise TokenMalformed("Access token claims are incomplete") from exc

        if verify_expiry and record.is_expired(datetime.now(UTC)):
            raise TokenExpired("Access token has expired")
        return record

    @staticmethod
    def new_refresh_key() -> str:
        return secrets.token_urlsafe(32)

    def hash_refresh_key(self, refresh_key: str) -> str:
        return bcrypt.hashpw(
            refresh_key.encode("utf-8"), bcrypt.gensalt(self._hash_rounds)
        ).decode("utf-8")

    def verify_refresh_key(self, refresh_key: str, refresh_key_hash: str) -> bool:
        if not refresh_key or not refresh_key_hash:
            return False
        try:
            return bcrypt.checkpw(
                refresh_key.encode("utf-8"), refresh_key_hash.encode("utf-8")
            )
        except ValueError:
            return False
