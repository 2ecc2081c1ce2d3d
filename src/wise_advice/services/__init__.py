"""Business logic services for the Wise Advice application."""

from .errors import (
    AuthenticationError,
    ConflictError,
    DuplicateReactionError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "DuplicateReactionError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceError",
    "ValidationFailedError",
]
