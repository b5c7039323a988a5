"""
Domain Exceptions

Raised by the token codec and the session store. Neither layer logs or knows
about HTTP; use cases translate these into Result errors.
"""


class TokenError(Exception):
    """Base class for bearer credential faults"""


class TokenMalformed(TokenError):
    """Credential cannot be decrypted or parsed"""


class TokenSignatureInvalid(TokenError):
    """Credential decrypted but the signature check failed"""


class TokenExpired(TokenError):
    """Claims are past their expiry"""


class TokenEncodingError(Exception):
    """Serialization or key material failure while issuing a credential"""


class StoreError(Exception):
    """Base class for session store faults"""


class StoreUnavailable(StoreError):
    """Backend unreachable, timed out or refused the command"""


class StoreCorrupted(StoreError):
    """A stored value could not be deserialized into a session record"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupted session value at {key}: {reason}")
        self.key = key
