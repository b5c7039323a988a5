from typing import Iterable, List, Optional

from pydantic import ValidationError

from src.adapter.cache.redis_adaptor import RedisAdaptor
from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import SessionRecord
from src.domain.exceptions import StoreCorrupted


class SessionRepository(ISessionRepository):
    """
    Session repository implementation using Redis.

    Key-space:
    - <session_prefix>:<session_id> -> record JSON, TTL = validity window
    - <principal_prefix>:<auth_id>  -> hash {session_secret: record JSON}

    The two indexes are written with separate commands (point index first).
    A failure between them leaves the record reachable by session ID but
    missing from the principal map; reads on the hot path only use the
    point index. Two writers racing on the same session_secret can each
    read the field before either overwrites it; that window is accepted.
    """

    def __init__(
        self,
        adaptor: RedisAdaptor,
        session_prefix: str = "session",
        principal_prefix: str = "principal",
    ):
        self.adaptor = adaptor
        self.session_prefix = session_prefix
        self.principal_prefix = principal_prefix

    def _session_key(self, session_id: str) -> str:
        return f"{self.session_prefix}:{session_id}"

    def _principal_key(self, auth_id: str) -> str:
        return f"{self.principal_prefix}:{auth_id}"

    @staticmethod
    def _load(key: str, raw: Optional[str]) -> Optional[SessionRecord]:
        if raw is None:
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreCorrupted(key, str(exc)) from exc

    async def put(self, record: SessionRecord) -> SessionRecord:
        """
        Write point index with TTL, then merge into the principal map.

        A principal holds one session per session_secret. When the field
        already points at another session, that session's point entry is
        deleted first so it cannot outlive its enumeration.
        """
        principal_key = self._principal_key(record.auth_id)
        try:
            previous = self._load(
                principal_key,
                await self.adaptor.hget(principal_key, record.session_secret),
            )
        except StoreCorrupted:
            # Unreadable field is overwritten below
            previous = None
        if previous is not None and previous.id != record.id:
            await self.adaptor.delete(self._session_key(previous.id))

        value = record.model_dump_json()
        await self.adaptor.set(
            self._session_key(record.id), value, record.ttl_seconds
        )
        await self.adaptor.hset(principal_key, {record.session_secret: value})
        return record

    async def get_by_session_id(self, session_id: str) -> Optional[SessionRecord]:
        key = self._session_key(session_id)
        return self._load(key, await self.adaptor.get(key))

    async def get_by_auth_id_field(
        self, auth_id: str, field: str
    ) -> Optional[SessionRecord]:
        key = self._principal_key(auth_id)
        return self._load(key, await self.adaptor.hget(key, field))

    async def list_by_auth_id(self, auth_id: str) -> List[SessionRecord]:
        key = self._principal_key(auth_id)
        values = await self.adaptor.hgetall(key)
        return [self._load(key, raw) for raw in values.values()]

    async def claim_rotation(self, session_id: str, ttl_seconds: int) -> bool:
        return await self.adaptor.set_if_absent(
            f"{self._session_key(session_id)}:rotated", "1", max(ttl_seconds, 1)
        )

    async def delete_by_session_id(self, session_id: str) -> bool:
        return await self.adaptor.delete(self._session_key(session_id)) > 0

    async def delete_auth_id_entry(self, auth_id: str) -> bool:
        return await self.adaptor.delete(self._principal_key(auth_id)) > 0

    async def delete_many_by_session_id(self, session_ids: Iterable[str]) -> int:
        keys = [self._session_key(session_id) for session_id in session_ids]
        return await self.adaptor.delete_many(keys)

    async def delete_auth_id_fields(self, auth_id: str, fields: Iterable[str]) -> int:
        return await self.adaptor.hdelete(self._principal_key(auth_id), fields)
