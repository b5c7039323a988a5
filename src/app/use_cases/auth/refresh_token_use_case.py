"""
Refresh Token Use Case

Handles access token refresh with session rotation.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Optional

from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.app.use_cases.errors import error_from_exception
from src.domain.base import utc_now
from src.domain.entities import ErrorCode, SessionRecord
from src.domain.exceptions import StoreError, TokenEncodingError, TokenError
from src.domain.result import Error, Result, Return
from src.domain.settings import TokenSettings
from .dtos import TokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for rotating a session.

    Business Rules:
    - Access token must decrypt and verify; its expiry is ignored
    - Session must not be revoked
    - Refresh key must match the one bound at issuance (bcrypt, constant-time)
    - A new session (new ID, later expiry) replaces the old one
    - The old session is consumed before the new one is written, so a
      refresh key is single use and a leaked old access token stops
      working once the session is rotated
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

    async def _find_bound_session(
        self, claims: SessionRecord
    ) -> Optional[SessionRecord]:
        stored = await self.sessions.get_by_session_id(claims.id)
        if stored is not None or not claims.is_expired(datetime.now(UTC)):
            return stored

        # The point entry expires together with the claims; the principal map
        # keeps the latest record for each session_secret without a TTL.
        candidate = await self.sessions.get_by_auth_id_field(
            claims.auth_id, claims.session_secret
        )
        if candidate is not None and candidate.id == claims.id:
            return candidate
        return None

    async def execute(
        self, refresh_key: str, access_token: str
    ) -> Result[TokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_key: Refresh key issued alongside the access token
            access_token: Current (possibly expired) access token

        Returns:
            Result with TokenResponse containing the rotated tokens, or Error
        """
        try:
            claims = self.codec.decode(access_token, verify_expiry=False)
            stored = await self._find_bound_session(claims)
        except (TokenError, StoreError) as exc:
            return Return.err(error_from_exception(exc))

        if stored is None:
            return Return.err(
                Error(ErrorCode.token_revoked.value, "Session has been revoked")
            )

        if not self.codec.verify_refresh_key(refresh_key, stored.refresh_key_hash):
            logger.warning(f"Refresh key mismatch for session {stored.id}")
            return Return.err(
                Error(ErrorCode.refresh_mismatch.value, "Refresh key does not match")
            )

        now = utc_now()
        # Expiry must move forward even when rotating within the same second
        expires_at = max(
            now + self.settings.validity, stored.expires_at + timedelta(seconds=1)
        )
        rotated = SessionRecord(
            auth_id=stored.auth_id,
            role=stored.role,
            session_secret=stored.session_secret,
            created_at=now,
            expires_at=expires_at,
        )

        try:
            access_token, new_refresh_key = self.codec.encode(rotated)
            rotated.refresh_key_hash = self.codec.hash_refresh_key(new_refresh_key)

            # Only one of several concurrent refreshes wins the claim
            if not await self.sessions.claim_rotation(stored.id, stored.ttl_seconds):
                logger.warning(f"Refresh replay rejected for session {stored.id}")
                return Return.err(
                    Error(ErrorCode.token_revoked.value, "Session has been revoked")
                )

            await self.sessions.delete_by_session_id(stored.id)
            rotated = await self.sessions.put(rotated)
        except (TokenEncodingError, StoreError) as exc:
            logger.error(f"Session rotation failed for {stored.id}: {exc}")
            return Return.err(error_from_exception(exc))

        logger.info(
            f"Session refreshed: auth_id={rotated.auth_id} "
            f"old_session_id={stored.id} session_id={rotated.id}"
        )

        return Return.ok(
            TokenResponse(
                access_token=access_token,
                refresh_key=new_refresh_key,
                expires_at=rotated.expires_at_unix,
                session_id=rotated.id,
            )
        )
