"""
Admin API Key Authentication

Validates admin API keys for service-to-service endpoints (token issuance,
housekeeping).
"""

import secrets

from fastapi import Header, Request, status

from src.api.error import ClientError
from src.domain.result import Error


async def verify_admin_api_key(request: Request, x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Token issuance is called by the host application after it has verified
    the principal's credentials; this is service-to-service auth, separate
    from bearer tokens.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    valid_admin_key = getattr(request.app.state.config, "ADMIN_API_KEY", "")

    if not valid_admin_key or not secrets.compare_digest(
        x_admin_api_key.encode(), str(valid_admin_key).encode()
    ):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
