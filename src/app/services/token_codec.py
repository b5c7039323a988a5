from abc import ABC, abstractmethod
from typing import Tuple

from src.domain.entities import SessionRecord


class ITokenCodec(ABC):
    """Token codec interface - turns session records into bearer credentials"""

    @abstractmethod
    def encode(self, record: SessionRecord) -> Tuple[str, str]:
        """Return (access_token, refresh_key) for a session record"""
        pass

    @abstractmethod
    def decode(self, access_token: str, verify_expiry: bool = True) -> SessionRecord:
        """Decrypt, verify and parse an access token into its session claims"""
        pass

    @abstractmethod
    def hash_refresh_key(self, refresh_key: str) -> str:
        """Hash a refresh key for storage"""
        pass

    @abstractmethod
    def verify_refresh_key(self, refresh_key: str, refresh_key_hash: str) -> bool:
        """Constant-time check of a presented refresh key against its hash"""
        pass
