"""Catering resource models.

These models represent the four public-facing resources (menu items, gallery
items, quotes and reviews) and their DynamoDB storage format. Attribute names are
camelCase both in DynamoDB items and in JSON bodies; Python code uses snake_case.
"""

from abc import abstractmethod
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SortDirection(str, Enum):
    """Sort direction for paginated listings."""

    ASC = "ASC"
    DESC = "DESC"


class GalleryType(str, Enum):
    """Section of the site a gallery image belongs to."""

    MENU = "MENU"
    SERVICES = "SERVICES"
    TEAM = "TEAM"
    REVIEWS = "REVIEWS"
    GALLERY = "GALLERY"


class EventType(str, Enum):
    """Kind of event a quote or review refers to."""

    WEDDING = "WEDDING"
    BIRTHDAY = "BIRTHDAY"
    CORPORATE = "CORPORATE"
    ENGAGEMENT = "ENGAGEMENT"
    HOUSEWARMING = "HOUSEWARMING"
    RELIGIOUS = "RELIGIOUS"
    OTHER = "OTHER"


class TopPick(str, Enum):
    """What a reviewer liked most."""

    FOOD = "FOOD"
    SERVICE = "SERVICE"
    PRESENTATION = "PRESENTATION"
    HOSPITALITY = "HOSPITALITY"
    PUNCTUALITY = "PUNCTUALITY"
    VALUE = "VALUE"


class CateringModel(BaseModel):
    """Base model serializing to camelCase while accepting either naming style."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CateringEntity(CateringModel):
    """Fields shared by every stored resource.

    The id is assigned once at creation; created_at never changes after that and
    updated_at is refreshed on every mutation.
    """

    id: str = Field(..., description="Unique identifier (UUID)")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last modification timestamp (UTC)")

    def _base_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @staticmethod
    def _base_data(item: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": item["id"],
            "created_at": datetime.fromisoformat(item["createdAt"]),
            "updated_at": datetime.fromisoformat(item["updatedAt"]),
        }

    @abstractmethod
    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""

    @classmethod
    @abstractmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "CateringEntity":
        """Create the entity from a DynamoDB item."""


class MenuItem(CateringEntity):
    """Catering menu package.

    Stored in DynamoDB with id as partition key. imageId references an image
    uploaded elsewhere and is unique across menu items.
    """

    image_id: str = Field(..., description="Identifier of the referenced image")
    name: str = Field(..., description="Menu name")
    price: float = Field(..., description="Package price", gt=0)
    description: str = Field(..., description="Menu description")
    items: list[str] = Field(..., description="Dishes included in the menu")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation (price as Decimal)
        """
        item = self._base_item()
        item.update(
            {
                "imageId": self.image_id,
                "name": self.name,
                "price": Decimal(str(self.price)),
                "description": self.description,
                "items": list(self.items),
            }
        )
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            **cls._base_data(item),
            image_id=item["imageId"],
            name=item["name"],
            price=float(item["price"]),
            description=item["description"],
            items=list(item.get("items", [])),
        )


class GalleryItem(CateringEntity):
    """Gallery image entry.

    Unlike menu items and reviews, a gallery item owns its image: imageId is the
    object-store key created on upload and removed when the item is deleted.
    """

    image_id: str = Field(..., description="Object-store key of the owned image")
    type: GalleryType = Field(..., description="Site section the image belongs to")
    name: str = Field(..., description="Image title")
    description: str = Field(..., description="Image description")

    def to_dynamodb_item(self) -> dict[str, Any]:
        item = self._base_item()
        item.update(
            {
                "imageId": self.image_id,
                "type": self.type.value,
                "name": self.name,
                "description": self.description,
            }
        )
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "GalleryItem":
        return cls(
            **cls._base_data(item),
            image_id=item["imageId"],
            type=GalleryType(item["type"]),
            name=item["name"],
            description=item["description"],
        )


class Quote(CateringEntity):
    """Customer quote request for an upcoming event."""

    full_name: str = Field(..., description="Customer full name")
    phone_number: str = Field(..., description="Contact phone number")
    email: str = Field(..., description="Contact email")
    event_date: date = Field(..., description="Date of the event")
    event_type: EventType = Field(..., description="Kind of event")
    expected_guests: int = Field(..., description="Expected number of guests", ge=1)
    additional_details: str | None = Field(None, description="Free-form notes")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        additionalDetails is omitted when not provided.
        """
        item = self._base_item()
        item.update(
            {
                "fullName": self.full_name,
                "phoneNumber": self.phone_number,
                "email": self.email,
                "eventDate": self.event_date.isoformat(),
                "eventType": self.event_type.value,
                "expectedGuests": self.expected_guests,
            }
        )

        if self.additional_details is not None:
            item["additionalDetails"] = self.additional_details

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Quote":
        return cls(
            **cls._base_data(item),
            full_name=item["fullName"],
            phone_number=item["phoneNumber"],
            email=item["email"],
            event_date=date.fromisoformat(item["eventDate"]),
            event_type=EventType(item["eventType"]),
            expected_guests=int(item["expectedGuests"]),
            additional_details=item.get("additionalDetails"),
        )


class Review(CateringEntity):
    """Customer review of a past event.

    imageId references an image uploaded elsewhere and is unique across reviews.
    """

    image_id: str = Field(..., description="Identifier of the referenced image")
    timeline: str = Field(..., description="When the event took place")
    guests_count: int = Field(..., description="Number of guests served", ge=1)
    stars: int = Field(..., description="Rating from 1 to 5", ge=1, le=5)
    comments: str = Field(..., description="Review text")
    top_picks: list[TopPick] = Field(..., description="Highlights chosen by the reviewer")
    event_type: EventType = Field(..., description="Kind of event")

    def to_dynamodb_item(self) -> dict[str, Any]:
        item = self._base_item()
        item.update(
            {
                "imageId": self.image_id,
                "timeline": self.timeline,
                "guestsCount": self.guests_count,
                "stars": self.stars,
                "comments": self.comments,
                "topPicks": [pick.value for pick in self.top_picks],
                "eventType": self.event_type.value,
            }
        )
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Review":
        return cls(
            **cls._base_data(item),
            image_id=item["imageId"],
            timeline=item["timeline"],
            guests_count=int(item["guestsCount"]),
            stars=int(item["stars"]),
            comments=item["comments"],
            top_picks=[TopPick(pick) for pick in item.get("topPicks", [])],
            event_type=EventType(item["eventType"]),
        )
