"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, date, datetime, timedelta

# Entry point modules skip AWS wiring at import time when ENVIRONMENT is "test"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

import pytest  # noqa: E402

from catering_service.models.catering_models import (  # noqa: E402
    EventType,
    GalleryItem,
    GalleryType,
    MenuItem,
    Quote,
    Review,
    TopPick,
)

MENU_ID = "3f2b8c1e-6d4a-4e8b-9c7f-1a2b3c4d5e6f"
IMAGE_ID = "a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d"
OTHER_IMAGE_ID = "b2c3d4e5-f6a7-4b8c-9d0e-1f2a3b4c5d6e"


@pytest.fixture
def now() -> datetime:
    """Fixture providing a fixed UTC timestamp."""
    return datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def future_date() -> date:
    """Fixture providing an event date safely in the future."""
    return datetime.now(UTC).date() + timedelta(days=30)


@pytest.fixture
def menu_payload() -> dict:
    """Fixture providing a valid camelCase menu request body."""
    return {
        "imageId": IMAGE_ID,
        "name": "Thali",
        "price": 25.5,
        "description": "A full vegetarian platter",
        "items": ["Dal", "Rice", "Roti"],
    }


@pytest.fixture
def quote_payload(future_date: date) -> dict:
    """Fixture providing a valid camelCase quote request body."""
    return {
        "fullName": "Priya Sharma",
        "phoneNumber": "+14155550123",
        "email": "priya@example.com",
        "eventDate": future_date.isoformat(),
        "eventType": "WEDDING",
        "expectedGuests": 150,
        "additionalDetails": "Vegetarian only",
    }


@pytest.fixture
def review_payload() -> dict:
    """Fixture providing a valid camelCase review request body."""
    return {
        "imageId": IMAGE_ID,
        "timeline": "March 2024",
        "guestsCount": 80,
        "stars": 5,
        "comments": "Wonderful food and service",
        "topPicks": ["FOOD", "SERVICE"],
        "eventType": "BIRTHDAY",
    }


@pytest.fixture
def menu_item(now: datetime) -> MenuItem:
    """Fixture providing a stored menu item."""
    return MenuItem(
        id=MENU_ID,
        created_at=now,
        updated_at=now,
        image_id=IMAGE_ID,
        name="Thali",
        price=25.5,
        description="A full vegetarian platter",
        items=["Dal", "Rice", "Roti"],
    )


@pytest.fixture
def gallery_item(now: datetime) -> GalleryItem:
    """Fixture providing a stored gallery item."""
    return GalleryItem(
        id=MENU_ID,
        created_at=now,
        updated_at=now,
        image_id="gallery/5e6f7a8b-9c0d-4e1f-a2b3-c4d5e6f7a8b9.png",
        type=GalleryType.GALLERY,
        name="Wedding setup",
        description="Stage decoration",
    )


@pytest.fixture
def quote(now: datetime, future_date: date) -> Quote:
    """Fixture providing a stored quote."""
    return Quote(
        id=MENU_ID,
        created_at=now,
        updated_at=now,
        full_name="Priya Sharma",
        phone_number="+14155550123",
        email="priya@example.com",
        event_date=future_date,
        event_type=EventType.WEDDING,
        expected_guests=150,
    )


@pytest.fixture
def review(now: datetime) -> Review:
    """Fixture providing a stored review."""
    return Review(
        id=MENU_ID,
        created_at=now,
        updated_at=now,
        image_id=IMAGE_ID,
        timeline="March 2024",
        guests_count=80,
        stars=5,
        comments="Wonderful food and service",
        top_picks=[TopPick.FOOD, TopPick.SERVICE],
        event_type=EventType.BIRTHDAY,
    )
