"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    RECIPE_NOT_FOUND = "RECIPE_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_COMMENT = "INVALID_COMMENT"

    # Auth provider errors
    AUTH_PROVIDER_ERROR = "AUTH_PROVIDER_ERROR"

    # Conflict errors (409)
    DUPLICATE_LIKE = "DUPLICATE_LIKE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ConfigurationError(RuntimeError):
    """Required configuration is missing at startup."""


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class AuthProviderError(AppException):
    """The authentication provider rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(
            error_code=ErrorCode.AUTH_PROVIDER_ERROR,
            message=message,
            status_code=status_code,
        )


class RecipeNotFoundError(AppException):
    """Recipe not found."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.RECIPE_NOT_FOUND,
            message=f"Recipe not found: {recipe_id}",
            status_code=404,
            details={"recipe_id": recipe_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class CommentValidationError(AppException):
    """Comment content is outside the allowed length."""

    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_COMMENT,
            message=f"Comment must be between 1 and {max_length} characters",
            status_code=400,
            details={"length": length, "max_length": max_length},
        )


class LikeConflictError(AppException):
    """The like was written concurrently by another request."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_LIKE,
            message="Recipe is already liked",
            status_code=409,
            details={"recipe_id": recipe_id},
        )


class PersistenceError(AppException):
    """The database rejected or failed a request."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=f"Database error during {operation}",
            status_code=503,
            details={"operation": operation},
        )
