"""Generic CRUD service shared by every catering resource."""

import logging
import math
import uuid
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from catering_service.exceptions import DuplicateResourceError, ResourceNotFoundError
from catering_service.models.api_models import PageResponse
from catering_service.models.catering_models import CateringEntity
from catering_service.observability.decorators import traced
from catering_service.observability.metrics import record_resource_operation
from catering_service.repositories.catering_repositories import DocumentRepository
from catering_service.utils.validation import (
    parse_sort_direction,
    validate_pagination,
    validate_uuid,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CateringEntity)
R = TypeVar("R", bound=BaseModel)


class ResourceService(Generic[E, R]):
    """CRUD and pagination for one resource.

    Field bounds are already enforced by the request model. This service adds
    identifier validation, existence checks, imageId uniqueness (when the
    repository tracks it) and timestamp bookkeeping.
    """

    def __init__(self, repository: DocumentRepository[E]) -> None:
        """Initialize the service.

        Args:
            repository: Repository for the resource's table
        """
        self.repository = repository
        self.resource_name = repository.resource_name

    @property
    def enforces_unique_image_id(self) -> bool:
        return self.repository.unique_image_id

    @traced("resource.create")
    async def create(self, request: R) -> E:
        """Create a record from a validated request.

        Args:
            request: Validated request body

        Returns:
            The stored entity with a fresh id and timestamps

        Raises:
            ValidationError: If imageId is not a canonical UUID
            DuplicateResourceError: If imageId is already held by another record
        """
        logger.info(f"Creating new {self.resource_name}")

        if self.enforces_unique_image_id:
            image_id = validate_uuid(getattr(request, "image_id", None), "imageId")
            if self.repository.exists_by_image_id(image_id):
                raise self._duplicate(image_id)

        entity = self._new_entity(request.model_dump())
        saved = self.repository.save(entity)

        record_resource_operation(self.resource_name, "create")
        logger.info(f"{self.resource_name} created with id: {saved.id}")
        return saved

    @traced("resource.get_by_id")
    async def get_by_id(self, entity_id: str) -> E:
        """Fetch one record.

        Raises:
            ValidationError: If entity_id is not a canonical UUID
            ResourceNotFoundError: If no record has that id
        """
        logger.info(f"Fetching {self.resource_name} with id: {entity_id}")
        validate_uuid(entity_id, "id")
        return self._get_existing(entity_id)

    @traced("resource.get_all")
    async def get_all(
        self,
        page: int = 0,
        size: int = 10,
        sort_by: str = "createdAt",
        sort_dir: str = "DESC",
    ) -> PageResponse[E]:
        """Return one page of records.

        Args:
            page: Zero-based page number
            size: Page size (1..100)
            sort_by: camelCase attribute to order by
            sort_dir: "ASC" or "DESC", case-insensitive

        Returns:
            PageResponse with the slice and the page metadata

        Raises:
            BadRequestError: If the paging or sort parameters are invalid
        """
        logger.info(
            f"Fetching {self.resource_name} page {page} (size={size}, sortBy={sort_by}, "
            f"sortDir={sort_dir})"
        )
        validate_pagination(page, size)
        direction = parse_sort_direction(sort_dir)

        content = self.repository.find_all(page, size, sort_by, direction)
        total = self.repository.count()
        total_pages = math.ceil(total / size)

        return PageResponse(
            content=content,
            page_number=page,
            page_size=size,
            total_elements=total,
            total_pages=total_pages,
            last=page >= total_pages - 1,
        )

    @traced("resource.update")
    async def update(self, entity_id: str, request: R) -> E:
        """Replace a record's fields, keeping its id and createdAt.

        Raises:
            ValidationError: If entity_id or imageId is not a canonical UUID
            ResourceNotFoundError: If no record has that id
            DuplicateResourceError: If imageId is held by a different record
        """
        logger.info(f"Updating {self.resource_name} with id: {entity_id}")
        validate_uuid(entity_id, "id")
        image_id = None
        if self.enforces_unique_image_id:
            image_id = validate_uuid(getattr(request, "image_id", None), "imageId")

        existing = self._get_existing(entity_id)

        previous_image_id = None
        if image_id is not None:
            if self.repository.exists_by_image_id_excluding_id(image_id, entity_id):
                raise self._duplicate(image_id)
            previous_image_id = getattr(existing, "image_id", None)

        updated = self._apply_update(existing, request.model_dump())
        saved = self.repository.save(updated, previous_image_id=previous_image_id)

        record_resource_operation(self.resource_name, "update")
        logger.info(f"{self.resource_name} updated with id: {entity_id}")
        return saved

    @traced("resource.delete")
    async def delete(self, entity_id: str) -> None:
        """Delete a record.

        Raises:
            ValidationError: If entity_id is not a canonical UUID
            ResourceNotFoundError: If no record has that id
        """
        logger.info(f"Deleting {self.resource_name} with id: {entity_id}")
        validate_uuid(entity_id, "id")
        existing = self._get_existing(entity_id)

        image_id = getattr(existing, "image_id", None) if self.enforces_unique_image_id else None
        self.repository.delete_by_id(entity_id, image_id=image_id)

        record_resource_operation(self.resource_name, "delete")
        logger.info(f"{self.resource_name} deleted with id: {entity_id}")

    def _get_existing(self, entity_id: str) -> E:
        entity = self.repository.find_by_id(entity_id)
        if entity is None:
            raise ResourceNotFoundError(self.resource_name, entity_id)
        return entity

    def _new_entity(self, fields: dict[str, Any]) -> E:
        now = datetime.now(UTC)
        entity: E = self.repository.entity_class(  # type: ignore[assignment]
            **fields,
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        return entity

    @staticmethod
    def _apply_update(existing: E, fields: dict[str, Any]) -> E:
        # id and created_at are never part of a request, so they carry over
        return existing.model_copy(update={**fields, "updated_at": datetime.now(UTC)})

    def _duplicate(self, image_id: str) -> DuplicateResourceError:
        logger.warning(f"Duplicate imageId {image_id} for {self.resource_name}")
        return DuplicateResourceError(
            f"{self.resource_name} with imageId {image_id} already exists",
            context={"image_id": image_id},
        )
