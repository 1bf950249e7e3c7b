"""
Error types raised by the authentication service.

Every error carries a human message, a stable machine-readable reason and
the HTTP status the gateway answers with.
"""

from typing import Dict


class AuthError(Exception):
    reason = "auth_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message, "reason": self.reason}


class ValidationError(AuthError):
    reason = "validation_error"
    status_code = 400


class DuplicateAccount(AuthError):
    reason = "duplicate_account"
    status_code = 400


class NotFound(AuthError):
    reason = "not_found"
    status_code = 404


class InvalidCredentials(AuthError):
    reason = "invalid_credentials"
    status_code = 401


class TokenExpired(AuthError):
    reason = "token_expired"
    status_code = 401

    def __init__(self, message: str = "token expired") -> None:
        super().__init__(message)


class TokenInvalid(AuthError):
    reason = "token_invalid"
    status_code = 401

    def __init__(self, message: str = "invalid token") -> None:
        super().__init__(message)


class DependencyFailure(AuthError):
    """Storage, hashing or transport failure. The client only sees a generic message."""

    reason = "dependency_failure"
    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)

    def to_dict(self) -> Dict[str, str]:
        return {"error": "Internal server error", "reason": self.reason}
