from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.api.utils.auth_gate import extract_bearer, unauthenticated
from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.app.use_cases.auth import CreateTokenUseCase, RefreshTokenUseCase, TokenResponse
from src.depends import get_session_repository, get_token_codec, get_token_settings
from src.domain.entities import AUTHENTICATION_FAULTS, ErrorCode
from src.domain.settings import TokenSettings

router = APIRouter(prefix="/tokens", tags=["Tokens"])


class IssueTokenRequest(BaseModel):
    """
    Token issuance HTTP request payload

    Field constraints are enforced by CreateTokenUseCase so library callers
    and HTTP callers get the same validation.
    """

    auth_id: str = Field(..., description="Principal the session is issued for")
    role: str = Field(..., description="Authorization scope of the session")
    session_secret: Optional[str] = Field(
        None, description="Discriminator for concurrent sessions of one principal"
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TokenResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def issue_token(
    request: IssueTokenRequest,
    sessions: ISessionRepository = Depends(get_session_repository),
    codec: ITokenCodec = Depends(get_token_codec),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    Issue Token

    Called by the host application once it has authenticated the principal.
    Returns an access token, its refresh key and the expiry (unix seconds).

    Raises:
        - 400 Bad Request: auth_id/role/session_secret fail validation
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Store unavailable or encoding failure
    """
    use_case = CreateTokenUseCase(sessions, codec, settings)
    result = await use_case.execute(
        request.auth_id, request.role, request.session_secret
    )

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.validation_error.value:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh HTTP request payload; the access token travels in Authorization"""

    refresh_key: str = Field(..., description="Refresh key issued with the access token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=TokenResponse)
async def refresh(
    request: RefreshRequest,
    authorization: Optional[str] = Header(None),
    sessions: ISessionRepository = Depends(get_session_repository),
    codec: ITokenCodec = Depends(get_token_codec),
    settings: TokenSettings = Depends(get_token_settings),
):
    """
    Refresh Token

    Rotates the session: a new access token and refresh key are issued and
    the presented session stops validating. Expired access tokens are
    accepted as long as the session was not revoked.

    Raises:
        - 401 Unauthorized: Bad access token, revoked session or refresh key mismatch
        - 500 Internal Server Error: Store unavailable or encoding failure
    """
    use_case = RefreshTokenUseCase(sessions, codec, settings)
    result = await use_case.execute(request.refresh_key, extract_bearer(authorization))

    if result.is_err():
        error = result.error
        if error.code in AUTHENTICATION_FAULTS:
            raise unauthenticated(error, settings)
        raise ServerError(error)

    return result.value
