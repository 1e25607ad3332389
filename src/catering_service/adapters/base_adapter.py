"""Base adapter for image object storage.

This module defines the abstract base class that object-store adapters implement,
the upload payload they accept, and the key prefix used for each gallery section.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from catering_service.models.catering_models import GalleryType

GALLERY_PREFIXES: dict[GalleryType, str] = {
    GalleryType.MENU: "menu/",
    GalleryType.SERVICES: "services/",
    GalleryType.TEAM: "team/",
    GalleryType.REVIEWS: "reviews/",
    GalleryType.GALLERY: "gallery/",
}


def destination_prefix(gallery_type: GalleryType) -> str:
    """Return the object-store key prefix for a gallery section."""
    return GALLERY_PREFIXES[gallery_type]


@dataclass
class ImageUpload:
    """An image received from a client, held in memory.

    Attributes:
        content: Raw file bytes
        filename: Original filename as sent by the client
        content_type: MIME type sent by the client, if any
    """

    content: bytes
    filename: str | None
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_empty(self) -> bool:
        return not self.content


class ImageStore(ABC):
    """Abstract base class for image object stores.

    Adapters raise domain exceptions instead of returning sentinel values:
    - BadRequestError when the caller's upload or key is unacceptable
    - InternalServerError when the backing store fails
    """

    @abstractmethod
    def upload(self, image: ImageUpload, destination_prefix: str) -> str:
        """Validate and store an image under a newly generated key.

        Args:
            image: The image to store
            destination_prefix: Key prefix, e.g. "gallery/"

        Returns:
            str: The generated object key (prefix + uuid4 + original extension)
        """

    @abstractmethod
    def replace(self, existing_key: str, image: ImageUpload) -> str:
        """Replace an existing object with a new image under the same prefix.

        Returns:
            str: The key of the new object
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove an object."""

    @abstractmethod
    def presign(self, key: str, expiration_minutes: int) -> str:
        """Return a time-limited read URL for an object."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether an object exists."""
