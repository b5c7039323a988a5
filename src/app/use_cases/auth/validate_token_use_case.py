"""
Validate Token Use Case

Checks a bearer credential and confirms its session is still live.
"""

from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.app.use_cases.errors import error_from_exception
from src.domain.entities import ErrorCode, SessionRecord
from src.domain.exceptions import StoreError, TokenError
from src.domain.result import Error, Result, Return


class ValidateTokenUseCase:
    """
    Use case for validating an access token.

    Business Rules:
    - Credential must decrypt, carry a valid signature and be unexpired
    - A well-formed credential whose session is gone from the store was
      revoked (explicitly, or by the store TTL)
    """

    def __init__(self, sessions: ISessionRepository, codec: ITokenCodec):
        self.sessions = sessions
        self.codec = codec

    async def execute(self, access_token: str) -> Result[SessionRecord]:
        try:
            claims = self.codec.decode(access_token)
            stored = await self.sessions.get_by_session_id(claims.id)
        except (TokenError, StoreError) as exc:
            return Return.err(error_from_exception(exc))

        if stored is None or stored.auth_id != claims.auth_id:
            return Return.err(
                Error(ErrorCode.token_revoked.value, "Session has been revoked")
            )

        return Return.ok(claims)
