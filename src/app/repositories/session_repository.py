from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from src.domain.entities import SessionRecord


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def put(self, record: SessionRecord) -> SessionRecord:
        """
        Store a session under its session ID (with TTL) and its principal.

        Replaces any other session held in the same session_secret slot.
        """
        pass

    @abstractmethod
    async def get_by_session_id(self, session_id: str) -> Optional[SessionRecord]:
        """Get session by ID; None when unknown or expired"""
        pass

    @abstractmethod
    async def get_by_auth_id_field(
        self, auth_id: str, field: str
    ) -> Optional[SessionRecord]:
        """Get one session from a principal's session map"""
        pass

    @abstractmethod
    async def list_by_auth_id(self, auth_id: str) -> List[SessionRecord]:
        """Get all sessions recorded for a principal"""
        pass

    @abstractmethod
    async def claim_rotation(self, session_id: str, ttl_seconds: int) -> bool:
        """Mark a session as rotated. True only for the first caller."""
        pass

    @abstractmethod
    async def delete_by_session_id(self, session_id: str) -> bool:
        """Delete a session entry. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_auth_id_entry(self, auth_id: str) -> bool:
        """Delete a principal's whole session map. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_many_by_session_id(self, session_ids: Iterable[str]) -> int:
        """Delete several session entries. Returns count removed."""
        pass

    @abstractmethod
    async def delete_auth_id_fields(self, auth_id: str, fields: Iterable[str]) -> int:
        """Remove fields from a principal's session map. Returns count removed."""
        pass
