"""Gallery service: CRUD for gallery items plus the lifecycle of their images.

A gallery item owns the object-store image its imageId points at. Ordering
rules for keeping the record and the bucket consistent:

- create: upload, then save. If the save fails the new upload is removed.
- update with a new image: upload new, save record, then delete old. A failed
  delete of the old image leaves an orphan, which is logged and counted.
- delete: remove the image, then the record.
"""

import logging
from typing import Any

from catering_service.adapters.base_adapter import ImageStore, ImageUpload, destination_prefix
from catering_service.exceptions import BadRequestError, CateringServiceError
from catering_service.models.catering_models import GalleryItem
from catering_service.models.request_models import GalleryRequest
from catering_service.observability.decorators import traced
from catering_service.observability.metrics import (
    record_orphaned_asset,
    record_resource_operation,
)
from catering_service.repositories.catering_repositories import GalleryRepository
from catering_service.services.resource_service import ResourceService
from catering_service.utils.validation import validate_uuid

logger = logging.getLogger(__name__)

MIN_URL_EXPIRATION_MINUTES = 1
MAX_URL_EXPIRATION_MINUTES = 10080


class GalleryService(ResourceService[GalleryItem, GalleryRequest]):
    """Gallery item CRUD with image upload, replacement and cleanup."""

    def __init__(self, repository: GalleryRepository, image_store: ImageStore) -> None:
        """Initialize the service.

        Args:
            repository: Repository for the gallery table
            image_store: Object store holding gallery images
        """
        super().__init__(repository)
        self.image_store = image_store

    @traced("gallery.create")
    async def create(  # type: ignore[override]
        self, request: GalleryRequest, image: ImageUpload | None = None
    ) -> GalleryItem:
        """Upload an image and create the gallery item that owns it.

        Args:
            request: Validated form fields
            image: The uploaded image (required)

        Returns:
            The stored gallery item, with imageId set to the new object key

        Raises:
            BadRequestError: If the image is missing or rejected by the store
            InternalServerError: If the store or the table fails
        """
        logger.info(f"Creating new Gallery item of type {request.type.value}")
        if image is None:
            raise BadRequestError("File cannot be empty")

        key = self.image_store.upload(image, destination_prefix(request.type))
        entity = self._new_entity({**request.model_dump(), "image_id": key})

        try:
            saved = self.repository.save(entity)
        except CateringServiceError:
            logger.error(f"Failed to save Gallery item, removing uploaded image {key}")
            self._discard(key)
            raise

        record_resource_operation(self.resource_name, "create")
        logger.info(f"Gallery item created with id: {saved.id}")
        return saved

    @traced("gallery.update")
    async def update(  # type: ignore[override]
        self,
        entity_id: str,
        request: GalleryRequest,
        image: ImageUpload | None = None,
    ) -> GalleryItem:
        """Update a gallery item, optionally replacing its image.

        Args:
            entity_id: Gallery item id
            request: Validated form fields
            image: New image; when missing or empty the current image is kept

        Raises:
            ValidationError: If entity_id is not a canonical UUID
            ResourceNotFoundError: If no gallery item has that id
            BadRequestError: If the new image is rejected by the store
        """
        logger.info(f"Updating Gallery item with id: {entity_id}")
        validate_uuid(entity_id, "id")
        existing = self._get_existing(entity_id)

        new_key = None
        if image is not None and not image.is_empty:
            new_key = self.image_store.upload(image, destination_prefix(request.type))

        fields: dict[str, Any] = request.model_dump()
        fields["image_id"] = new_key or existing.image_id
        updated = self._apply_update(existing, fields)

        try:
            saved = self.repository.save(updated)
        except CateringServiceError:
            if new_key:
                logger.error(f"Failed to save Gallery item, removing uploaded image {new_key}")
                self._discard(new_key)
            raise

        if new_key:
            self._discard(existing.image_id)

        record_resource_operation(self.resource_name, "update")
        logger.info(f"Gallery item updated with id: {entity_id}")
        return saved

    @traced("gallery.delete")
    async def delete(self, entity_id: str) -> None:
        """Delete a gallery item and its image.

        Raises:
            ValidationError: If entity_id is not a canonical UUID
            ResourceNotFoundError: If no gallery item has that id
            InternalServerError: If the image or the record cannot be removed
        """
        logger.info(f"Deleting Gallery item with id: {entity_id}")
        validate_uuid(entity_id, "id")
        existing = self._get_existing(entity_id)

        self.image_store.delete(existing.image_id)
        self.repository.delete_by_id(entity_id)

        record_resource_operation(self.resource_name, "delete")
        logger.info(f"Gallery item deleted with id: {entity_id}")

    @traced("gallery.get_image_url")
    async def get_image_url(self, entity_id: str, expiration_minutes: int = 60) -> str:
        """Return a presigned URL for a gallery item's image.

        Args:
            entity_id: Gallery item id
            expiration_minutes: URL lifetime, 1 to 10080 minutes

        Raises:
            ValidationError: If entity_id is not a canonical UUID
            BadRequestError: If expiration_minutes is out of range
            ResourceNotFoundError: If no gallery item has that id
        """
        validate_uuid(entity_id, "id")
        if not MIN_URL_EXPIRATION_MINUTES <= expiration_minutes <= MAX_URL_EXPIRATION_MINUTES:
            raise BadRequestError(
                f"Expiration must be between {MIN_URL_EXPIRATION_MINUTES} and "
                f"{MAX_URL_EXPIRATION_MINUTES} minutes"
            )

        existing = self._get_existing(entity_id)
        return self.image_store.presign(existing.image_id, expiration_minutes)

    def _discard(self, key: str) -> None:
        try:
            self.image_store.delete(key)
        except CateringServiceError as e:
            logger.error(f"Failed to delete image {key}, leaving orphaned asset: {e.message}")
            record_orphaned_asset(self.resource_name)
