"""
Translation of codec and store exceptions into use case errors.
"""

from src.domain.entities import ErrorCode
from src.domain.exceptions import (
    StoreCorrupted,
    StoreUnavailable,
    TokenEncodingError,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)
from src.domain.result import Error

_EXCEPTION_ERRORS = (
    (TokenMalformed, ErrorCode.token_malformed, "Access token is malformed"),
    (TokenSignatureInvalid, ErrorCode.token_signature_invalid, "Access token signature is invalid"),
    (TokenExpired, ErrorCode.token_expired, "Access token has expired"),
    (TokenEncodingError, ErrorCode.encoding_error, "Access token could not be encoded"),
    (StoreUnavailable, ErrorCode.store_unavailable, "Session store is unavailable"),
    (StoreCorrupted, ErrorCode.store_error, "Session store returned an unreadable record"),
)


def error_from_exception(exc: Exception) -> Error:
    for exc_type, code, message in _EXCEPTION_ERRORS:
        if isinstance(exc, exc_type):
            return Error(code.value, message)
    return Error(ErrorCode.store_error.value, str(exc))
