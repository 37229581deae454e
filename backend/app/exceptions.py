"""
Portfolio Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a client-safe message, an optional context dict
       (logged, never returned) and the HTTP status it maps to. Global handlers
       registered in main.py turn them into `{"error": ..., "code": ...}` bodies.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    PortfolioError (base)
    ├── ConfigurationError              → aborts startup
    ├── ValidationError                 → 400 Bad Request
    │   ├── MissingInputError
    │   ├── NoFileError
    │   ├── UnsupportedFileTypeError
    │   └── FileTooLargeError
    ├── AuthError                       → 401 Unauthorized
    │   ├── MissingTokenError
    │   ├── InvalidCredentialsError
    │   ├── InvalidTokenError           → 403 Forbidden
    │   │   ├── TokenExpiredError
    │   │   ├── MalformedTokenError
    │   │   └── BadSignatureError
    │   └── IncorrectPasswordError      → 403 Forbidden
    ├── NotFoundError                   → 404 Not Found
    ├── MediaStoreError                 → 502 Bad Gateway
    └── PersistenceError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PortfolioError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        status_code: HTTP status used by the global handler
        code: Machine-readable error code used in the response body
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(PortfolioError):
    """Raised when the process is started without a required setting."""

    code = "configuration_error"


# ══════════════════════════════════════════════════════════════════════════
# 400 — client input
# ══════════════════════════════════════════════════════════════════════════

class ValidationError(PortfolioError):
    """
    Raised when client input fails validation.

    Example response:
        {
            "error": "File type '.pdf' is not supported. Allowed types: .gif, .jpeg, ...",
            "code": "validation_error",
            "details": {"field": "file"}
        }
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @property
    def details(self) -> Dict[str, Any]:
        """Subset of context that is safe to show to the client."""
        return {"field": self.field} if self.field else {}


class MissingInputError(ValidationError):
    """A required body field is absent or empty."""

    def __init__(self, message: str = "Required fields are missing", field: Optional[str] = None):
        super().__init__(message=message, field=field)


class NoFileError(ValidationError):
    """Upload request carried no file payload."""

    def __init__(self, message: str = "No file was uploaded"):
        super().__init__(message=message, field="file")


class UnsupportedFileTypeError(ValidationError):
    """Uploaded file is not one of the accepted raster image types."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, field="file", context=context)


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the configured size limit."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, field="file", context=context)


# ══════════════════════════════════════════════════════════════════════════
# 401 / 403 — authentication
# ══════════════════════════════════════════════════════════════════════════

class AuthError(PortfolioError):
    """Base for authentication and authorization failures."""

    status_code = 401
    code = "authentication_error"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingTokenError(AuthError):
    """No bearer token was presented."""

    def __init__(self):
        super().__init__(message="Access token is required")


class InvalidCredentialsError(AuthError):
    """
    Login failed.

    Raised for both an unknown username and a wrong password, with the same
    message, so responses cannot be used to enumerate usernames.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid username or password", context=context)


class InvalidTokenError(AuthError):
    """
    A bearer token was presented but rejected.

    Subclasses keep the reason distinguishable in logs; clients always see
    the same message and status.
    """

    status_code = 403
    code = "forbidden"
    reason = "invalid"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["reason"] = self.reason
        super().__init__(message="Invalid or expired token", context=ctx)


class TokenExpiredError(InvalidTokenError):
    reason = "expired"


class MalformedTokenError(InvalidTokenError):
    reason = "malformed"


class BadSignatureError(InvalidTokenError):
    reason = "bad_signature"


class IncorrectPasswordError(AuthError):
    """The current password supplied to change-password does not match."""

    status_code = 403
    code = "forbidden"

    def __init__(self):
        super().__init__(message="Current password is incorrect")


# ══════════════════════════════════════════════════════════════════════════
# 404 / 5xx
# ══════════════════════════════════════════════════════════════════════════

class NotFoundError(PortfolioError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception.
    """

    status_code = 404
    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class MediaStoreError(PortfolioError):
    """
    Raised when the media host is unreachable or rejects a request.

    HTTP:  502 Bad Gateway. The failure is upstream of this service.
    """

    status_code = 502
    code = "upstream_error"

    def __init__(
        self,
        message: str = "The image host could not process the request. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(PortfolioError):
    """
    Raised when a database operation fails.

    The client always receives a generic message; SQL text, constraint
    names and driver errors stay in the server log.
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
