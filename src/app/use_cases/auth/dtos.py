"""
Token Use Case DTOs (Data Transfer Objects)

Command and Response classes for the token lifecycle.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

IDENTIFIER_PATTERN = r"^[A-Za-z0-9_.@:|+\-]+$"
ROLE_PATTERN = r"^[A-Za-z0-9_\-]+$"


# ============================================================================
# Command DTOs
# ============================================================================


class IssueTokenCommand(BaseModel):
    """Validated intent to issue a session for an already authenticated principal"""

    auth_id: str = Field(..., min_length=1, max_length=100, pattern=IDENTIFIER_PATTERN)
    role: str = Field(..., min_length=1, max_length=20, pattern=ROLE_PATTERN)
    session_secret: Optional[str] = Field(
        None, max_length=100, pattern=IDENTIFIER_PATTERN
    )

    @field_validator("session_secret", mode="before")
    @classmethod
    def _blank_secret_is_default(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None


# ============================================================================
# Response DTOs
# ============================================================================


class TokenResponse(BaseModel):
    """Response for token issuance and refresh"""

    access_token: str
    refresh_key: str
    expires_at: int
    session_id: str
