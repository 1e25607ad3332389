"""DynamoDB repository classes for catering resources.

Every resource lives in its own table keyed by ``id``. One generic
DocumentRepository provides save/find/list/count/delete; the per-resource
subclasses only declare the entity type and whether imageId must be unique.

Unique imageIds are enforced in the store itself: each record that holds an
imageId also owns a claim item (``claimKey = "<collection>#<imageId>"``) in a
shared claims table. The record and its claim are written in one transaction
whose condition fails if another record already owns the claim.
"""

import logging
from typing import Any, ClassVar, Generic, TypeVar

from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from catering_service.exceptions import DuplicateResourceError, InternalServerError
from catering_service.models.catering_models import (
    CateringEntity,
    GalleryItem,
    MenuItem,
    Quote,
    Review,
    SortDirection,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CateringEntity)

CLAIM_CONDITION = "attribute_not_exists(claimKey) OR ownerId = :owner"


def _sort_key(item: dict[str, Any], sort_field: str) -> tuple[Any, ...]:
    # Missing values sort first ascending; id breaks ties so page order is stable.
    value = item.get(sort_field)
    return (value is not None, value if value is not None else "", item.get("id", ""))


class DocumentRepository(Generic[E]):
    """Generic repository for one catering resource table.

    Subclasses set ``entity_class``, ``resource_name`` and ``collection``, and
    ``unique_image_id`` when imageId must be unique within the collection.
    """

    entity_class: ClassVar[type[CateringEntity]]
    resource_name: ClassVar[str]
    collection: ClassVar[str]
    unique_image_id: ClassVar[bool] = False

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        claims_table_name: str | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the resource's DynamoDB table
            claims_table_name: Name of the imageId claims table (required when
                the resource enforces unique imageIds)

        Raises:
            ValueError: If a unique-imageId resource has no claims table
        """
        if self.unique_image_id and not claims_table_name:
            raise ValueError(f"{self.resource_name} repository requires a claims table")

        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.claims_table_name = claims_table_name
        self.claims_table: Table | None = (
            dynamodb_resource.Table(claims_table_name) if claims_table_name else None
        )
        self._serializer = TypeSerializer()

    def save(self, entity: E, previous_image_id: str | None = None) -> E:
        """Create or replace a record.

        Args:
            entity: The record to store
            previous_image_id: imageId the record held before this save, so its
                claim can be released when the imageId changes

        Returns:
            The saved entity

        Raises:
            DuplicateResourceError: If another record already holds the imageId
            InternalServerError: If DynamoDB fails
        """
        if self.unique_image_id:
            self._save_with_claim(entity, previous_image_id)
            return entity

        try:
            self.table.put_item(Item=entity.to_dynamodb_item())
        except ClientError as e:
            raise self._internal_error("save", e, entity.id) from e

        return entity

    def find_by_id(self, entity_id: str) -> E | None:
        """Retrieve a record by id.

        Returns:
            The entity if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": entity_id})
        except ClientError as e:
            raise self._internal_error("get", e, entity_id) from e

        if "Item" not in response:
            return None

        return self.entity_class.from_dynamodb_item(response["Item"])  # type: ignore[return-value]

    def find_all(
        self, page: int, size: int, sort_field: str, sort_direction: SortDirection
    ) -> list[E]:
        """Return one page of records ordered by a stored attribute.

        The whole table is scanned and sorted in memory; the page bounds are
        trusted to have been validated by the caller.

        Args:
            page: Zero-based page number
            size: Page size
            sort_field: camelCase attribute name to order by
            sort_direction: Ascending or descending

        Returns:
            Up to ``size`` entities starting at offset ``page * size``
        """
        items = self._scan_all()
        items.sort(
            key=lambda item: _sort_key(item, sort_field),
            reverse=sort_direction == SortDirection.DESC,
        )

        start = page * size
        return [
            self.entity_class.from_dynamodb_item(item)  # type: ignore[misc]
            for item in items[start : start + size]
        ]

    def count(self) -> int:
        """Count every record in the table."""
        total = 0
        scan_kwargs: dict[str, Any] = {"Select": "COUNT"}

        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                total += response.get("Count", 0)
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            raise self._internal_error("count", e) from e

        return total

    def delete_by_id(self, entity_id: str, image_id: str | None = None) -> None:
        """Delete a record, releasing its imageId claim when one is given."""
        if self.unique_image_id and image_id:
            self._transact(
                [
                    {"Delete": {"TableName": self.table_name, "Key": {"id": {"S": entity_id}}}},
                    {
                        "Delete": {
                            "TableName": self.claims_table_name,
                            "Key": {"claimKey": {"S": self._claim_key(image_id)}},
                        }
                    },
                ],
                entity_id,
            )
            return

        try:
            self.table.delete_item(Key={"id": entity_id})
        except ClientError as e:
            raise self._internal_error("delete", e, entity_id) from e

    def exists_by_image_id(self, image_id: str) -> bool:
        """Check whether any record in this collection holds the imageId."""
        return self._get_claim(image_id) is not None

    def exists_by_image_id_excluding_id(self, image_id: str, entity_id: str) -> bool:
        """Check whether a record other than ``entity_id`` holds the imageId."""
        claim = self._get_claim(image_id)
        return claim is not None and claim.get("ownerId") != entity_id

    def _scan_all(self) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            raise self._internal_error("list", e) from e

        return items

    def _get_claim(self, image_id: str) -> dict[str, Any] | None:
        if self.claims_table is None:
            raise TypeError(f"{self.resource_name} does not track imageId claims")

        try:
            response = self.claims_table.get_item(Key={"claimKey": self._claim_key(image_id)})
        except ClientError as e:
            raise self._internal_error("claim lookup", e) from e

        item: dict[str, Any] | None = response.get("Item")
        return item

    def _save_with_claim(self, entity: E, previous_image_id: str | None) -> None:
        image_id: str = entity.image_id  # type: ignore[attr-defined]
        transact_items: list[dict[str, Any]] = [
            {"Put": {"TableName": self.table_name, "Item": self._serialize(entity.to_dynamodb_item())}},
            {
                "Put": {
                    "TableName": self.claims_table_name,
                    "Item": self._serialize(
                        {"claimKey": self._claim_key(image_id), "ownerId": entity.id}
                    ),
                    "ConditionExpression": CLAIM_CONDITION,
                    "ExpressionAttributeValues": {":owner": {"S": entity.id}},
                }
            },
        ]

        if previous_image_id and previous_image_id != image_id:
            transact_items.append(
                {
                    "Delete": {
                        "TableName": self.claims_table_name,
                        "Key": {"claimKey": {"S": self._claim_key(previous_image_id)}},
                    }
                }
            )

        try:
            self._transact(transact_items, entity.id)
        except _ClaimConflict:
            logger.warning(f"imageId {image_id} already claimed in {self.collection}")
            raise DuplicateResourceError(
                f"{self.resource_name} with imageId {image_id} already exists",
                context={"image_id": image_id, "collection": self.collection},
            ) from None

    def _transact(self, transact_items: list[dict[str, Any]], entity_id: str) -> None:
        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            if _is_condition_failure(e):
                raise _ClaimConflict() from e
            raise self._internal_error("transaction", e, entity_id) from e

    def _claim_key(self, image_id: str) -> str:
        return f"{self.collection}#{image_id}"

    def _serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {key: self._serializer.serialize(value) for key, value in item.items()}

    def _internal_error(
        self, operation: str, error: ClientError, entity_id: str | None = None
    ) -> InternalServerError:
        logger.error(f"DynamoDB {operation} failed on {self.table_name}: {error}")
        return InternalServerError(
            f"Failed to {operation} {self.resource_name.lower()} record",
            context={"table": self.table_name, "id": entity_id, "error": str(error)},
        )


class _ClaimConflict(Exception):
    """Internal signal that the imageId claim condition failed."""


def _is_condition_failure(error: ClientError) -> bool:
    if error.response.get("Error", {}).get("Code") != "TransactionCanceledException":
        return False

    reasons = error.response.get("CancellationReasons") or []
    if any(reason.get("Code") == "ConditionalCheckFailed" for reason in reasons):
        return True

    return "ConditionalCheckFailed" in str(error)


class MenuRepository(DocumentRepository[MenuItem]):
    """Repository for menu items; imageId is unique across menus."""

    entity_class = MenuItem
    resource_name = "Menu"
    collection = "menu"
    unique_image_id = True


class GalleryRepository(DocumentRepository[GalleryItem]):
    """Repository for gallery items.

    Gallery imageIds are object-store keys generated on upload, so no claim is kept.
    """

    entity_class = GalleryItem
    resource_name = "Gallery"
    collection = "gallery"


class QuoteRepository(DocumentRepository[Quote]):
    """Repository for quote requests."""

    entity_class = Quote
    resource_name = "Quote"
    collection = "quotes"


class ReviewRepository(DocumentRepository[Review]):
    """Repository for reviews; imageId is unique across reviews."""

    entity_class = Review
    resource_name = "Review"
    collection = "reviews"
    unique_image_id = True
