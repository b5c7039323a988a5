"""
Admin API Routes - Service Administration Endpoints

These endpoints are for internal service integrations and housekeeping jobs.
Authentication is via Admin API Key, not bearer tokens.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.repositories.session_repository import ISessionRepository
from src.app.use_cases.sessions import ReconcileSessionsUseCase, RevokeSessionsUseCase
from src.depends import get_session_repository, get_token_settings
from src.domain.settings import TokenSettings

router = APIRouter(prefix="/admin", tags=["Admin"])


class PrincipalRequest(BaseModel):
    auth_id: str = Field(..., description="Principal to operate on")


class ReconcileRequest(PrincipalRequest):
    include_expired: bool = Field(
        False, description="Also prune sessions that expired and could still be refreshed"
    )


class ReconcileResponse(BaseModel):
    auth_id: str
    pruned_count: int


class RevokeAllResponse(BaseModel):
    auth_id: str
    revoked_count: int


@router.post(
    "/sessions/reconcile",
    status_code=status.HTTP_200_OK,
    response_model=ReconcileResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def reconcile_sessions(
    request: ReconcileRequest,
    sessions: ISessionRepository = Depends(get_session_repository),
):
    """
    Reconcile Sessions

    Removes entries from a principal's session map whose session no longer
    exists. Safe to run while the principal is active.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    use_case = ReconcileSessionsUseCase(sessions)
    result = await use_case.execute(request.auth_id, request.include_expired)

    if result.is_err():
        raise ServerError(result.error)

    return ReconcileResponse(auth_id=request.auth_id, pruned_count=result.value)


@router.post(
    "/sessions/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeAllResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def revoke_all_sessions(
    request: PrincipalRequest,
    sessions: ISessionRepository = Depends(get_session_repository),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    Revoke All Sessions (service-to-service)

    Used by the host application on password change or account lockout.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    use_case = RevokeSessionsUseCase(sessions, settings)
    result = await use_case.revoke_all_sessions(request.auth_id)

    if result.is_err():
        raise ServerError(result.error)

    return RevokeAllResponse(auth_id=request.auth_id, revoked_count=result.value)
