"""Domain exceptions for the catering content service.

Each exception carries a user-facing message, an optional context dict that is
logged but never returned to the client, and the HTTP status code the API layer
maps it to.
"""

from typing import Any


class CateringServiceError(Exception):
    """Base exception for all catering service errors.

    Attributes:
        message: User-facing error description (safe to return in an API response)
        context: Additional debug information, logged server-side only
        status_code: HTTP status code the API layer responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CateringServiceError):
    """Raised when an identifier is missing or not a canonical UUID."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class BadRequestError(CateringServiceError):
    """Raised for invalid pagination/sort input or an unacceptable upload."""

    status_code = 400


class ResourceNotFoundError(CateringServiceError):
    """Raised when no record exists for the requested identifier."""

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} not found with id: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DuplicateResourceError(CateringServiceError):
    """Raised when an imageId is already held by another record of the same kind."""

    status_code = 409


class InternalServerError(CateringServiceError):
    """Raised when DynamoDB or S3 fails for reasons not caused by the caller.

    The message stays generic; the underlying AWS error goes into ``context``.
    """

    status_code = 500
