"""
Custom Exceptions for UniDirectory
==================================

Every exception carries the HTTP status it maps to, so the API layer can
turn it into the standard ``{"statusCode": ..., "error": ...}`` body with a
single handler.

Usage:
    from unidirectory.core.exceptions import FavoriteNotFoundError

    if favorite is None:
        raise FavoriteNotFoundError(favorite_id)
"""

from typing import Optional, Any, Dict


class UniDirectoryError(Exception):
    """Base exception for all UniDirectory errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(UniDirectoryError):
    """Required input missing or malformed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Authentication Errors (401-type)
# ============================================

class AuthenticationError(UniDirectoryError):
    """Authentication failed. Message is always generic."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password, deliberately indistinguishable"""

    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


class InvalidTokenError(AuthenticationError):
    """Missing, malformed, expired or badly signed bearer token"""

    def __init__(self):
        super().__init__("Unauthorized")
        self.code = "INVALID_TOKEN"


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(UniDirectoryError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class FavoriteNotFoundError(ResourceNotFoundError):
    """Favorite not found"""

    def __init__(self, favorite_id: int):
        super().__init__("Favorite", favorite_id)


class UniversityNotFoundError(ResourceNotFoundError):
    """University not found"""

    def __init__(self, university_id: int):
        super().__init__("University", university_id)


# ============================================
# Internal Errors (500-type)
# ============================================

class InternalError(UniDirectoryError):
    """
    Unhandled failure from the database or a library primitive.

    ``message`` is the raw underlying message; ``public_message`` is an
    optional fixed summary added to the response body next to it.
    """

    status_code = 500

    def __init__(self, message: str, public_message: Optional[str] = None):
        super().__init__(message or "Internal server error", code="INTERNAL_ERROR")
        self.public_message = public_message


def error_body(error: UniDirectoryError, expose_details: bool = True) -> Dict[str, Any]:
    """Convert exception to the API error response format"""
    message = error.message
    if isinstance(error, InternalError) and not expose_details:
        message = "Internal server error"

    body: Dict[str, Any] = {"statusCode": error.status_code}
    if isinstance(error, InternalError) and error.public_message:
        body["message"] = error.public_message
    body["error"] = message
    return body
