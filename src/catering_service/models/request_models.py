"""Request models for creating and updating catering resources.

Field bounds are enforced here, before a request reaches a service. Services only
add the rules that need the store (uniqueness, existence).
"""

from datetime import UTC, date, datetime
from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints, field_validator

from catering_service.models.catering_models import (
    CateringModel,
    EventType,
    GalleryType,
    TopPick,
)

UUID_REGEX = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
PHONE_REGEX = r"^[+]?[0-9]{10,15}$"

MenuLine = Annotated[str, StringConstraints(min_length=1, max_length=200)]


def _require_text(value: str, message: str) -> str:
    if not value.strip():
        raise ValueError(message)
    return value


class MenuRequest(CateringModel):
    """Body for creating or updating a menu item."""

    image_id: str = Field(..., pattern=UUID_REGEX, description="UUID of the menu image")
    name: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., gt=0, le=999999.99)
    description: str = Field(..., min_length=1, max_length=1000)
    items: list[MenuLine] = Field(..., min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        return _require_text(v, "Name is required")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _require_text(v, "Description is required")

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: list[str]) -> list[str]:
        """Reject blank dish names."""
        for item in v:
            _require_text(item, "Item cannot be blank")
        return v


class GalleryRequest(CateringModel):
    """Form fields sent alongside a gallery image upload."""

    type: GalleryType
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v, "Name is required")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _require_text(v, "Description is required")


class QuoteRequest(CateringModel):
    """Body for creating or updating a quote request."""

    full_name: str = Field(..., min_length=2, max_length=100)
    phone_number: str = Field(..., pattern=PHONE_REGEX)
    email: EmailStr = Field(..., max_length=100)
    event_date: date
    event_type: EventType
    expected_guests: int = Field(..., ge=1, le=100000)
    additional_details: str | None = Field(None, max_length=2000)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return _require_text(v, "Full name is required")

    @field_validator("event_date")
    @classmethod
    def validate_event_date(cls, v: date) -> date:
        """Require the event to be strictly in the future (UTC calendar date)."""
        if v <= datetime.now(UTC).date():
            raise ValueError("Event date must be in the future")
        return v


class ReviewRequest(CateringModel):
    """Body for creating or updating a review."""

    image_id: str = Field(..., pattern=UUID_REGEX, description="UUID of the review image")
    timeline: str = Field(..., min_length=1, max_length=200)
    guests_count: int = Field(..., ge=1, le=100000)
    stars: int = Field(..., ge=1, le=5)
    comments: str = Field(..., min_length=1, max_length=2000)
    top_picks: list[TopPick] = Field(..., min_length=1, max_length=5)
    event_type: EventType

    @field_validator("timeline")
    @classmethod
    def validate_timeline(cls, v: str) -> str:
        return _require_text(v, "Timeline is required")

    @field_validator("comments")
    @classmethod
    def validate_comments(cls, v: str) -> str:
        return _require_text(v, "Comments are required")
