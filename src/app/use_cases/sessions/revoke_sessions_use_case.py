"""
Revoke Sessions Use Case

Handles session revocation for logout and security incidents.
"""

import logging
from typing import Optional

from src.app.repositories.session_repository import ISessionRepository
from src.app.use_cases.errors import error_from_exception
from src.domain.entities import ErrorCode
from src.domain.exceptions import StoreError
from src.domain.result import Error, Result, Return
from src.domain.settings import TokenSettings

logger = logging.getLogger(__name__)


def is_self_or_admin(
    target_auth_id: str,
    requesting_auth_id: Optional[str],
    requesting_role: Optional[str],
    admin_roles,
) -> bool:
    """Requests without a requester are trusted internal calls"""
    if requesting_auth_id is None:
        return True
    return target_auth_id == requesting_auth_id or requesting_role in admin_roles


class RevokeSessionsUseCase:
    """
    Use case for revoking sessions.

    Business Rules:
    - Principals can revoke their own sessions
    - Admin roles can revoke any principal's sessions
    - Single revoke deletes the session ID entry; with symmetric_revoke the
      principal map field is removed too when it still points at that session
    - Revoke all: enumerate, delete every session ID entry, then drop the
      principal map, so no session ID entry outlives its enumeration
    """

    def __init__(self, sessions: ISessionRepository, settings: TokenSettings):
        self.sessions = sessions
        self.settings = settings

    async def revoke_session(
        self,
        session_id: str,
        requesting_auth_id: Optional[str] = None,
        requesting_role: Optional[str] = None,
    ) -> Result[bool]:
        """
        Revoke a specific session by ID.

        Args:
            session_id: Session to revoke
            requesting_auth_id: Principal requesting the revocation, if any
            requesting_role: Role of the requesting principal

        Returns:
            Result with True if the session existed and was removed, or Error
        """
        try:
            record = await self.sessions.get_by_session_id(session_id)

            if record is not None and not is_self_or_admin(
                record.auth_id,
                requesting_auth_id,
                requesting_role,
                self.settings.admin_roles,
            ):
                return Return.err(
                    Error(
                        ErrorCode.forbidden.value,
                        "Only admins can revoke other principals' sessions",
                    )
                )

            deleted = await self.sessions.delete_by_session_id(session_id)

            if deleted and record is not None and self.settings.symmetric_revoke:
                current = await self.sessions.get_by_auth_id_field(
                    record.auth_id, record.session_secret
                )
                if current is not None and current.id == session_id:
                    await self.sessions.delete_auth_id_fields(
                        record.auth_id, [record.session_secret]
                    )
        except StoreError as exc:
            return Return.err(error_from_exception(exc))

        if deleted:
            logger.info(f"Session revoked: session_id={session_id}")
        return Return.ok(deleted)

    async def revoke_all_sessions(
        self,
        auth_id: str,
        requesting_auth_id: Optional[str] = None,
        requesting_role: Optional[str] = None,
    ) -> Result[int]:
        """
        Revoke all sessions for a principal ("log out everywhere").

        Args:
            auth_id: Principal whose sessions will be revoked
            requesting_auth_id: Principal requesting the revocation, if any
            requesting_role: Role of the requesting principal

        Returns:
            Result with count of revoked sessions, or Error
        """
        if not is_self_or_admin(
            auth_id, requesting_auth_id, requesting_role, self.settings.admin_roles
        ):
            return Return.err(
                Error(
                    ErrorCode.forbidden.value,
                    "Only admins can revoke other principals' sessions",
                )
            )

        try:
            records = await self.sessions.list_by_auth_id(auth_id)
            count = await self.sessions.delete_many_by_session_id(
                [record.id for record in records]
            )
            await self.sessions.delete_auth_id_entry(auth_id)
        except StoreError as exc:
            return Return.err(error_from_exception(exc))

        logger.info(f"All sessions revoked: auth_id={auth_id} revoked_count={count}")
        return Return.ok(count)
