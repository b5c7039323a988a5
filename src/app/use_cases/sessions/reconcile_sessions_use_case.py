"""
Reconcile Sessions Use Case

Housekeeping for drift between the two session indexes.
"""

import logging
from datetime import UTC, datetime

from src.app.repositories.session_repository import ISessionRepository
from src.app.use_cases.errors import error_from_exception
from src.domain.exceptions import StoreError
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)


class ReconcileSessionsUseCase:
    """
    Prunes principal map fields whose session ID entry no longer exists.

    Only the principal map is touched; session ID entries are never created
    or removed here, so running it next to live traffic is safe.

    Fields of sessions that merely expired are kept unless include_expired is
    set, because refresh still accepts them.
    """

    def __init__(self, sessions: ISessionRepository):
        self.sessions = sessions

    async def execute(self, auth_id: str, include_expired: bool = False) -> Result[int]:
        now = datetime.now(UTC)
        try:
            pruned = 0
            for record in await self.sessions.list_by_auth_id(auth_id):
                if record.is_expired(now) and not include_expired:
                    continue
                if await self.sessions.get_by_session_id(record.id) is not None:
                    continue
                # The slot may have been reissued since it was listed
                current = await self.sessions.get_by_auth_id_field(
                    auth_id, record.session_secret
                )
                if current is not None and current.id == record.id:
                    pruned += await self.sessions.delete_auth_id_fields(
                        auth_id, [record.session_secret]
                    )
        except StoreError as exc:
            return Return.err(error_from_exception(exc))

        if pruned:
            logger.info(f"Pruned {pruned} stale session field(s) for {auth_id}")
        return Return.ok(pruned)
