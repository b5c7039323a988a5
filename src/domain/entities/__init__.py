"""
Session Token Service Domain Entities
"""

from .enums import AUTHENTICATION_FAULTS, ErrorCode
from .request_context import AuthContext, RequestMeta
from .session import DEFAULT_SESSION_SECRET, SessionRecord

__all__ = [
    # Enums
    "ErrorCode",
    "AUTHENTICATION_FAULTS",
    # Entities
    "SessionRecord",
    "DEFAULT_SESSION_SECRET",
    "AuthContext",
    "RequestMeta",
]
