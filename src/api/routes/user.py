from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.api.utils.auth_gate import get_current_session
from src.domain.entities import AuthContext

router = APIRouter(tags=["User"])


class RequestMetaResponse(BaseModel):
    """Request metadata resolved by the authentication gate"""
    ipv4: str
    device_id: str
    version: str
    tracking_id: str
    request_time: str


class MeResponse(BaseModel):
    """GET /me response payload"""
    auth_id: str
    role: str
    session_id: str
    request: RequestMetaResponse


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def get_me(auth: AuthContext = Depends(get_current_session)):
    """
    Current Session Context

    Returns the identity and request metadata attached by the gate.

    Raises:
        - 401 Unauthorized: Missing, invalid, expired or revoked access token
        - 500 Internal Server Error: Session store unavailable
    """
    auth.logger.info("Loaded session context")
    return MeResponse(
        auth_id=auth.auth_id,
        role=auth.role,
        session_id=auth.session_id,
        request=RequestMetaResponse(
            ipv4=auth.meta.ipv4,
            device_id=auth.meta.device_id,
            version=auth.meta.version,
            tracking_id=auth.meta.tracking_id,
            request_time=auth.meta.request_time,
        ),
    )
