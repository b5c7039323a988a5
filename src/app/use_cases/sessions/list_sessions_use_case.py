from typing import List, Optional

from src.app.repositories.session_repository import ISessionRepository
from src.app.use_cases.errors import error_from_exception
from src.domain.entities import ErrorCode, SessionRecord
from src.domain.exceptions import StoreError
from src.domain.result import Error, Result, Return
from src.domain.settings import TokenSettings
from .revoke_sessions_use_case import is_self_or_admin


class ListSessionsUseCase:
    """
    Use case for listing a principal's live sessions.

    Entries in the principal map whose session ID entry is gone (expired or
    revoked) are left out.
    """

    def __init__(self, sessions: ISessionRepository, settings: TokenSettings):
        self.sessions = sessions
        self.settings = settings

    async def execute(
        self,
        auth_id: str,
        requesting_auth_id: Optional[str] = None,
        requesting_role: Optional[str] = None,
    ) -> Result[List[SessionRecord]]:
        if not is_self_or_admin(
            auth_id, requesting_auth_id, requesting_role, self.settings.admin_roles
        ):
            return Return.err(
                Error(
                    ErrorCode.forbidden.value,
                    "Only admins can list other principals' sessions",
                )
            )

        try:
            live = []
            for record in await self.sessions.list_by_auth_id(auth_id):
                if await self.sessions.get_by_session_id(record.id) is not None:
                    live.append(record)
        except StoreError as exc:
            return Return.err(error_from_exception(exc))

        return Return.ok(sorted(live, key=lambda r: r.created_at))
