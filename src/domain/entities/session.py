"""
Session Entity

Server-side source of truth for one issued bearer credential.
"""

from datetime import UTC, datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from src.domain.base import BaseModel, generate_uuid

DEFAULT_SESSION_SECRET = "default"


class SessionRecord(BaseModel):
    """
    Session record - stored in Redis under two access paths.

    Business Rules:
    - id is unique for the lifetime of the entry
    - expires_at is strictly after created_at
    - role never changes for the lifetime of a session
    - session_secret separates concurrent sessions of one principal
    - refresh_key_hash is the bcrypt hash of the refresh key bound at issuance
    """

    id: str = Field(default_factory=generate_uuid)
    auth_id: str
    role: str
    session_secret: str = DEFAULT_SESSION_SECRET
    created_at: datetime
    expires_at: datetime
    refresh_key_hash: Optional[str] = None

    @field_validator("created_at", "expires_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(microsecond=0)

    @field_validator("session_secret", mode="before")
    @classmethod
    def _default_secret(cls, value: Optional[str]) -> str:
        return value or DEFAULT_SESSION_SECRET

    @model_validator(mode="after")
    def _check_validity_window(self) -> "SessionRecord":
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")
        return self

    @property
    def ttl_seconds(self) -> int:
        return int((self.expires_at - self.created_at).total_seconds())

    @property
    def expires_at_unix(self) -> int:
        return int(self.expires_at.timestamp())

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
