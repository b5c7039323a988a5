"""
Use Cases

Organized into domain folders:
- auth/: Issuance, validation and rotation of bearer credentials
- sessions/: Listing, revocation and housekeeping of sessions
"""

from .auth import (
    CreateTokenUseCase,
    ValidateTokenUseCase,
    RefreshTokenUseCase,
    IssueTokenCommand,
    TokenResponse,
)
from .sessions import (
    RevokeSessionsUseCase,
    ListSessionsUseCase,
    ReconcileSessionsUseCase,
)

__all__ = [
    # Auth
    "CreateTokenUseCase",
    "ValidateTokenUseCase",
    "RefreshTokenUseCase",
    "IssueTokenCommand",
    "TokenResponse",
    # Sessions
    "RevokeSessionsUseCase",
    "ListSessionsUseCase",
    "ReconcileSessionsUseCase",
]
