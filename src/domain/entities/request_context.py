"""
Request Context

Identity and request metadata handed to handlers behind the authentication
gate.
"""

import logging
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RequestMeta:
    """Per-request metadata resolved from inbound headers"""

    auth_id: str = ""
    ipv4: str = ""
    device_id: str = ""
    version: str = ""
    tracking_id: str = ""
    request_time: str = ""


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller, passed explicitly to downstream handlers"""

    auth_id: str
    role: str
    session_id: str
    meta: RequestMeta
    logger: logging.LoggerAdapter = field(repr=False, compare=False)
