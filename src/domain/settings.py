from datetime import timedelta
from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenSettings(BaseModel):
    """
    Immutable token configuration, built once before serving requests and
    injected into the codec, the use cases and the authentication gate.
    """

    model_config = ConfigDict(frozen=True)

    jwt_secret: str = Field(..., min_length=16)
    encryption_key: str = Field(..., min_length=32, max_length=32)
    validity_minutes: int = Field(15, gt=0)
    refresh_key_hash_rounds: int = Field(12, ge=4, le=31)
    session_key_prefix: str = "session"
    principal_key_prefix: str = "principal"
    redis_operation_timeout: float = Field(5.0, gt=0)
    symmetric_revoke: bool = True
    expose_auth_error_codes: bool = False
    admin_roles: FrozenSet[str] = frozenset({"admin", "owner"})

    @field_validator("admin_roles", mode="before")
    @classmethod
    def _parse_roles(cls, value):
        if isinstance(value, str):
            return frozenset(r.strip() for r in value.split(",") if r.strip())
        return value

    @property
    def validity(self) -> timedelta:
        return timedelta(minutes=self.validity_minutes)

    @classmethod
    def from_app_config(cls, app_config) -> "TokenSettings":
        return cls(
            jwt_secret=app_config.JWT_SECRET,
            encryption_key=app_config.ENCRYPTION_KEY,
            validity_minutes=app_config.TOKEN_VALIDITY_MINUTES,
            refresh_key_hash_rounds=app_config.REFRESH_KEY_HASH_ROUNDS,
            session_key_prefix=app_config.SESSION_KEY_PREFIX,
            principal_key_prefix=app_config.PRINCIPAL_KEY_PREFIX,
            redis_operation_timeout=app_config.REDIS_OPERATION_TIMEOUT,
            symmetric_revoke=app_config.SYMMETRIC_REVOKE,
            expose_auth_error_codes=app_config.EXPOSE_AUTH_ERROR_CODES,
            admin_roles=app_config.ADMIN_ROLES,
        )
