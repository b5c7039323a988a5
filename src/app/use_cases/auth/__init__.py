"""
Token Use Cases

Issuance, validation and rotation of bearer credentials.
"""

from .create_token_use_case import CreateTokenUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .dtos import IssueTokenCommand, TokenResponse

__all__ = [
    # Use Cases
    "CreateTokenUseCase",
    "ValidateTokenUseCase",
    "RefreshTokenUseCase",
    # DTOs
    "IssueTokenCommand",
    "TokenResponse",
]
