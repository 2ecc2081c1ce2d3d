"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status the API reports for it, so endpoint
code can let them propagate to the handlers installed in ``wise_advice.main``.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors reported to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Fields are required"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"


class ConflictError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Already exists"


class DuplicateReactionError(ConflictError):
    """The actor already holds the requested reaction on the target."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You have already reacted to this entry"


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"
