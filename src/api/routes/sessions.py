from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.auth_gate import get_current_session
from src.app.repositories.session_repository import ISessionRepository
from src.app.use_cases.sessions import ListSessionsUseCase, RevokeSessionsUseCase
from src.depends import get_session_repository, get_token_settings
from src.domain.entities import AuthContext, ErrorCode
from src.domain.result import Error
from src.domain.settings import TokenSettings

router = APIRouter(prefix="/sessions", tags=["Sessions"])


class SessionInfo(BaseModel):
    """One live session"""

    session_id: str
    auth_id: str
    role: str
    session_secret: str
    created_at: datetime
    expires_at: datetime


class RevokeAllSessionsRequest(BaseModel):
    """Request to revoke all sessions for a principal"""

    auth_id: str = Field(..., description="Principal whose sessions will be revoked")


class RevokeSessionResponse(BaseModel):
    """Response for session revocation operations"""

    message: str
    revoked_count: int


class RevokeSpecificSessionResponse(BaseModel):
    """Response for specific session revocation"""

    message: str
    session_id: str
    revoked: bool


@router.get("", status_code=status.HTTP_200_OK, response_model=List[SessionInfo])
async def list_sessions(
    auth_id: Optional[str] = Query(None, description="Principal to list; defaults to caller"),
    auth: AuthContext = Depends(get_current_session),
    sessions: ISessionRepository = Depends(get_session_repository),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    List Sessions

    Lists live sessions of the caller, or of another principal for admins.

    Raises:
        - 401 Unauthorized: Not authenticated
        - 403 Forbidden: Listing another principal without an admin role
        - 500 Internal Server Error: Server error
    """
    use_case = ListSessionsUseCase(sessions, settings)
    result = await use_case.execute(auth_id or auth.auth_id, auth.auth_id, auth.role)

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.forbidden.value:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return [
        SessionInfo(
            session_id=record.id,
            auth_id=record.auth_id,
            role=record.role,
            session_secret=record.session_secret,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )
        for record in result.value
    ]


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionResponse,
)
async def revoke_all_sessions(
    request: RevokeAllSessionsRequest,
    auth: AuthContext = Depends(get_current_session),
    sessions: ISessionRepository = Depends(get_session_repository),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    Revoke All Sessions

    Logs a principal out everywhere. Useful for:
    - Security incidents (account compromise)
    - Password changes in the host application
    - Admin-initiated logout

    Authorization:
    - Principals can revoke their own sessions
    - Admin roles can revoke any principal's sessions

    Raises:
        - 403 Forbidden: Insufficient permissions
        - 500 Internal Server Error: Server error
    """
    use_case = RevokeSessionsUseCase(sessions, settings)
    result = await use_case.revoke_all_sessions(
        request.auth_id, auth.auth_id, auth.role
    )

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.forbidden.value:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    count = result.value
    auth.logger.info(f"Revoked {count} session(s) of {request.auth_id}")
    return {
        "message": f"Successfully revoked {count} session(s)",
        "revoked_count": count,
    }


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSpecificSessionResponse,
)
async def revoke_specific_session(
    session_id: str,
    auth: AuthContext = Depends(get_current_session),
    sessions: ISessionRepository = Depends(get_session_repository),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    Revoke Specific Session

    Revokes a single session by ID (logout from one device).

    Authorization:
    - Principals can revoke their own sessions
    - Admin roles can revoke any principal's sessions

    Raises:
        - 403 Forbidden: Insufficient permissions
        - 404 Not Found: Session not found (already revoked or expired)
        - 500 Internal Server Error: Server error
    """
    use_case = RevokeSessionsUseCase(sessions, settings)
    result = await use_case.revoke_session(session_id, auth.auth_id, auth.role)

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.forbidden.value:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    if not result.value:
        raise ClientError(
            Error(ErrorCode.session_not_found.value, "Session not found"),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return {
        "message": "Session revoked successfully",
        "session_id": session_id,
        "revoked": True,
    }
