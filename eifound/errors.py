"""Error hierarchy for EI Found.

Every error carries a code, a category and the HTTP status the API answers
with. Messages are user-facing; platform details stay in the logs.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    REMOTE = "remote"
    CONFIGURATION = "configuration"


class EIFoundError(Exception):
    """Base exception for all EI Found errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
            }
        }


# ─── Caught before any network call ─────────────────────────────

class InputValidationError(EIFoundError):
    """Form input rejected locally (password mismatch, empty content, bad file)."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400)
        self.field = field


# ─── Identity and access ────────────────────────────────────────

class AuthenticationError(EIFoundError):
    def __init__(self, message: str = "Invalid credentials. Please check your email and password."):
        super().__init__(message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION, 401)


class AuthorizationError(EIFoundError):
    def __init__(self, message: str = "Access denied", code: str = "ACCESS_DENIED"):
        super().__init__(message, code, ErrorCategory.AUTHORIZATION, 403)


class EmailNotAuthorizedError(AuthorizationError):
    """Signup attempted with an email that is not on the allowlist."""
    def __init__(self):
        super().__init__(
            "This email is not authorized for registration. Please contact an administrator.",
            "EMAIL_NOT_AUTHORIZED",
        )


class NotFoundError(EIFoundError):
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.NOT_FOUND, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Platform failures ──────────────────────────────────────────

class RemoteCallError(EIFoundError):
    """A Supabase call (database, auth, storage) failed."""
    def __init__(self, message: str, http_status: int = 502):
        super().__init__(message, "REMOTE_CALL_FAILED", ErrorCategory.REMOTE, http_status)


class ConfigurationError(EIFoundError):
    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION, 500)
