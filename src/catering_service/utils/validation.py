"""Stateless validation helpers shared by every resource service."""

import re

from catering_service.exceptions import BadRequestError, ValidationError
from catering_service.models.catering_models import SortDirection
from catering_service.models.request_models import UUID_REGEX

MAX_PAGE_SIZE = 100

UUID_PATTERN = re.compile(UUID_REGEX)


def is_valid_uuid(value: str | None) -> bool:
    """Check whether a value is a canonical 8-4-4-4-12 hex UUID string."""
    if not value:
        return False
    return UUID_PATTERN.match(value) is not None


def validate_uuid(value: str | None, field_name: str) -> str:
    """Validate that a value is a canonical UUID.

    Args:
        value: The identifier to check
        field_name: Name used in the error message (e.g. "id", "imageId")

    Returns:
        The value unchanged

    Raises:
        ValidationError: If the value is blank or not a canonical UUID
    """
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} cannot be null or empty", field=field_name)
    if not is_valid_uuid(value):
        raise ValidationError(f"Invalid UUID format for {field_name}", field=field_name)
    return value


def validate_pagination(page: int, size: int) -> None:
    """Validate page number and page size.

    Raises:
        BadRequestError: If page is negative or size is outside 1..MAX_PAGE_SIZE
    """
    if page < 0:
        raise BadRequestError("Page number cannot be negative")
    if size <= 0:
        raise BadRequestError("Page size must be greater than 0")
    if size > MAX_PAGE_SIZE:
        raise BadRequestError(f"Page size cannot exceed {MAX_PAGE_SIZE}")


def parse_sort_direction(sort_dir: str) -> SortDirection:
    """Parse a case-insensitive ASC/DESC string.

    Raises:
        BadRequestError: If the direction is neither ASC nor DESC
    """
    try:
        return SortDirection(sort_dir.strip().upper())
    except (AttributeError, ValueError):
        raise BadRequestError(
            f"Invalid sort direction '{sort_dir}'. Must be one of: ASC, DESC"
        ) from None
