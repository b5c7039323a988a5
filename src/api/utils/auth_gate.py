"""
Authentication Gate

Request-scoped guard for protected routes: validates the bearer credential,
enforces role membership and hands an AuthContext to the handler.
"""

import ipaddress
import logging
import uuid
from dataclasses import replace
from datetime import UTC, datetime
from typing import FrozenSet, Optional

from fastapi import Depends, Request, status

from src.api.error import ClientError, ServerError
from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.app.use_cases.auth import ValidateTokenUseCase
from src.depends import get_session_repository, get_token_codec, get_token_settings
from src.domain.entities import (
    AUTHENTICATION_FAULTS,
    AuthContext,
    ErrorCode,
    RequestMeta,
)
from src.domain.result import Error
from src.domain.settings import TokenSettings

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("src.api.request")

REAL_IP_HEADER = "X-Real-IP"
FORWARDED_FOR_HEADER = "X-Forwarded-For"
DEVICE_ID_HEADER = "X-Device-Id"
API_VERSION_HEADER = "X-Api-Version"
TRACKING_ID_HEADER = "X-Tracking-Id"

UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


def parse_roles(roles: str) -> FrozenSet[str]:
    """Parse a comma-separated allow-set; empty means any role"""
    return frozenset(role.strip() for role in (roles or "").split(",") if role.strip())


def extract_bearer(authorization: Optional[str]) -> str:
    """Accept 'Bearer <token>' or the bare token"""
    if not authorization:
        return ""
    value = authorization.strip()
    scheme, _, credential = value.partition(" ")
    if credential and scheme.lower() == "bearer":
        return credential.strip()
    return value


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def resolve_client_ip(request: Request) -> str:
    """X-Real-IP, then the first valid X-Forwarded-For entry, then the peer"""
    real_ip = request.headers.get(REAL_IP_HEADER, "").strip()
    if _is_ip(real_ip):
        return real_ip

    for candidate in request.headers.get(FORWARDED_FOR_HEADER, "").split(","):
        candidate = candidate.strip()
        if _is_ip(candidate):
            return candidate

    if request.client is not None and _is_ip(request.client.host):
        return request.client.host
    return ""


def resolve_request_meta(request: Request) -> RequestMeta:
    return RequestMeta(
        ipv4=resolve_client_ip(request),
        device_id=request.headers.get(DEVICE_ID_HEADER, ""),
        version=request.headers.get(API_VERSION_HEADER, ""),
        tracking_id=request.headers.get(TRACKING_ID_HEADER) or str(uuid.uuid4()),
        request_time=datetime.now(UTC).isoformat(),
    )


def unauthenticated(error: Error, settings: TokenSettings) -> ClientError:
    """Collapse authentication faults into one external error unless exposed"""
    if settings.expose_auth_error_codes:
        public = error
    else:
        public = Error("UNAUTHENTICATED", "Authentication required")
    return ClientError(
        public,
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers=UNAUTHENTICATED_HEADERS,
    )


class AuthenticationGate:
    def __init__(
        self,
        sessions: ISessionRepository,
        codec: ITokenCodec,
        settings: TokenSettings,
    ):
        self.sessions = sessions
        self.codec = codec
        self.settings = settings

    async def authenticate(self, request: Request, roles: str = "") -> AuthContext:
        """
        Authenticate a request.

        Raises:
            ClientError: 401 on authentication faults and role mismatch
            ServerError: 500 on store or encoding faults
        """
        meta = resolve_request_meta(request)
        token = extract_bearer(request.headers.get("Authorization"))

        if not token:
            error = Error(ErrorCode.missing_token.value, "Authorization header missing")
        else:
            result = await ValidateTokenUseCase(self.sessions, self.codec).execute(token)
            error = result.error if result.is_err() else None

        if error is not None:
            if error.code in AUTHENTICATION_FAULTS:
                logger.warning(
                    f"Authentication failed: {error.code} "
                    f"ip={meta.ipv4} tracking_id={meta.tracking_id}"
                )
                raise unauthenticated(error, self.settings)
            logger.error(f"Authentication error: {error.code} tracking_id={meta.tracking_id}")
            raise ServerError(error)

        session = result.value
        allowed = parse_roles(roles)
        if allowed and session.role not in allowed:
            logger.warning(
                f"Role mismatch: auth_id={session.auth_id} role={session.role} "
                f"tracking_id={meta.tracking_id}"
            )
            raise ClientError(
                Error(ErrorCode.role_mismatch.value, "Role is not permitted"),
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers=UNAUTHENTICATED_HEADERS,
            )

        meta = replace(meta, auth_id=session.auth_id)
        return AuthContext(
            auth_id=session.auth_id,
            role=session.role,
            session_id=session.id,
            meta=meta,
            logger=logging.LoggerAdapter(
                request_logger,
                {"auth_id": session.auth_id, "tracking_id": meta.tracking_id},
            ),
        )


def require_roles(roles: str = ""):
    """
    Dependency factory guarding a route.

    Usage:
        @router.get("/reports")
        async def reports(auth: AuthContext = Depends(require_roles("admin,analyst"))):
            ...
    """

    async def dependency(
        request: Request,
        sessions: ISessionRepository = Depends(get_session_repository),
        codec: ITokenCodec = Depends(get_token_codec),
        settings: TokenSettings = Depends(get_token_settings),
    ) -> AuthContext:
        gate = AuthenticationGate(sessions, codec, settings)
        return await gate.authenticate(request, roles)

    return dependency


get_current_session = require_roles()
