"""
Session Token Service Domain Enums
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned by the token lifecycle use cases"""

    validation_error = "VALIDATION_ERROR"
    missing_token = "MISSING_TOKEN"
    token_malformed = "TOKEN_MALFORMED"
    token_signature_invalid = "TOKEN_SIGNATURE_INVALID"
    token_expired = "TOKEN_EXPIRED"
    token_revoked = "TOKEN_REVOKED"
    refresh_mismatch = "REFRESH_MISMATCH"
    role_mismatch = "ROLE_MISMATCH"
    session_not_found = "SESSION_NOT_FOUND"
    forbidden = "FORBIDDEN"
    store_unavailable = "STORE_UNAVAILABLE"
    store_error = "STORE_ERROR"
    encoding_error = "ENCODING_ERROR"


# Faults that mean "caller is not authenticated" rather than "server broke"
AUTHENTICATION_FAULTS = frozenset(
    {
        ErrorCode.missing_token.value,
        ErrorCode.token_malformed.value,
        ErrorCode.token_signature_invalid.value,
        ErrorCode.token_expired.value,
        ErrorCode.token_revoked.value,
        ErrorCode.refresh_mismatch.value,
    }
)
