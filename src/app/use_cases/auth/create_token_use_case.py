"""
Create Token Use Case

Issues a new session and its bearer credential for an authenticated principal.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.app.use_cases.errors import error_from_exception
from src.domain.base import utc_now
from src.domain.entities import ErrorCode, SessionRecord
from src.domain.exceptions import StoreError, TokenEncodingError
from src.domain.result import Error, Result, Return
from src.domain.settings import TokenSettings
from .dtos import IssueTokenCommand, TokenResponse

logger = logging.getLogger(__name__)


class CreateTokenUseCase:
    """
    Use case for issuing a session.

    Business Rules:
    - auth_id and role are required and restricted in length and charset
    - session_secret separates concurrent sessions; blank means the default slot
    - Session ID and timestamps are assigned server side
    - The credential is encoded before anything is written, so bad key
      material never leaves a half-issued session in the store
    - Only the bcrypt hash of the refresh key is stored
    """

    def __init__(
        self,
        sessions: ISessionRepository,
        codec: ITokenCodec,
        settings: TokenSettings,
    ):
        self.sessions = sessions
        self.codec = codec
        self.settings = settings

    async def execute(
        self, auth_id: str, role: str, session_secret: Optional[str] = None
    ) -> Result[TokenResponse]:
        """
        Execute create token use case.

        Args:
            auth_id: Principal the session is issued for
            role: Authorization scope of the session
            session_secret: Optional discriminator for concurrent sessions

        Returns:
            Result with TokenResponse, or Error
        """
        try:
            command = IssueTokenCommand(
                auth_id=auth_id, role=role, session_secret=session_secret
            )
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            return Return.err(
                Error(ErrorCode.validation_error.value, f"{field}: {first['msg']}")
            )

        now = utc_now()
        record = SessionRecord(
            auth_id=command.auth_id,
            role=command.role,
            session_secret=command.session_secret,
            created_at=now,
            expires_at=now + self.settings.validity,
        )

        try:
            access_token, refresh_key = self.codec.encode(record)
            record.refresh_key_hash = self.codec.hash_refresh_key(refresh_key)
            record = await self.sessions.put(record)
        except (TokenEncodingError, StoreError) as exc:
            logger.error(f"Session issue failed for {command.auth_id}: {exc}")
            return Return.err(error_from_exception(exc))

        logger.info(f"Session issued: auth_id={record.auth_id} session_id={record.id}")

        return Return.ok(
            TokenResponse(
                access_token=access_token,
                refresh_key=refresh_key,
                expires_at=record.expires_at_unix,
                session_id=record.id,
            )
        )
