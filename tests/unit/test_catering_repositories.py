"""Unit tests for DynamoDB repository classes."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from catering_service.exceptions import DuplicateResourceError, InternalServerError
from catering_service.models.catering_models import MenuItem, Quote, SortDirection
from catering_service.repositories.catering_repositories import (
    GalleryRepository,
    MenuRepository,
    QuoteRepository,
    ReviewRepository,
)

IMAGE_ID = "a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d"
NEW_IMAGE_ID = "b2c3d4e5-f6a7-4b8c-9d0e-1f2a3b4c5d6e"


def client_error(code: str, operation: str = "PutItem", **extra: object) -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": code}, **extra}, operation)  # type: ignore[arg-type]


def quote_item(quote_id: str, created_at: datetime, event_date: str = "2030-05-01") -> dict:
    """Build a stored quote item."""
    return {
        "id": quote_id,
        "createdAt": created_at.isoformat(),
        "updatedAt": created_at.isoformat(),
        "fullName": f"Customer {quote_id}",
        "phoneNumber": "+14155550123",
        "email": "customer@example.com",
        "eventDate": event_date,
        "eventType": "CORPORATE",
        "expectedGuests": Decimal("40"),
    }


@pytest.fixture
def tables() -> dict[str, MagicMock]:
    """Mock tables keyed by name."""
    return {"menu": MagicMock(), "claims": MagicMock(), "quotes": MagicMock()}


@pytest.fixture
def mock_dynamodb(tables: dict[str, MagicMock]) -> MagicMock:
    """Create a mock DynamoDB resource handing out the mock tables."""
    dynamodb = MagicMock()
    dynamodb.Table.side_effect = lambda name: tables[name]
    return dynamodb


@pytest.mark.unit
class TestRepositoryInitialization:
    """Tests for repository construction."""

    def test_unique_repository_requires_claims_table(self, mock_dynamodb: MagicMock) -> None:
        """Test that unique-imageId repositories need a claims table."""
        with pytest.raises(ValueError, match="requires a claims table"):
            MenuRepository(dynamodb_resource=mock_dynamodb, table_name="menu")

        with pytest.raises(ValueError):
            ReviewRepository(dynamodb_resource=mock_dynamodb, table_name="menu")

    def test_plain_repository_has_no_claims(self, mock_dynamodb: MagicMock) -> None:
        """Test that plain repositories only open their own table."""
        repo = QuoteRepository(dynamodb_resource=mock_dynamodb, table_name="quotes")

        assert repo.table_name == "quotes"
        assert repo.claims_table is None
        mock_dynamodb.Table.assert_called_once_with("quotes")

    def test_gallery_does_not_enforce_unique_image_id(self, mock_dynamodb: MagicMock) -> None:
        """Test the gallery repository configuration."""
        repo = GalleryRepository(dynamodb_resource=mock_dynamodb, table_name="quotes")

        assert repo.unique_image_id is False
        assert repo.resource_name == "Gallery"


@pytest.mark.unit
class TestQuoteRepository:
    """Tests for the plain document path, using quotes."""

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> QuoteRepository:
        """Create a QuoteRepository with mocked DynamoDB."""
        return QuoteRepository(dynamodb_resource=mock_dynamodb, table_name="quotes")

    def test_save_puts_item(
        self, repository: QuoteRepository, tables: dict[str, MagicMock], quote: Quote
    ) -> None:
        """Test that save writes the DynamoDB item."""
        result = repository.save(quote)

        assert result == quote
        tables["quotes"].put_item.assert_called_once_with(Item=quote.to_dynamodb_item())

    def test_save_wraps_client_error(
        self, repository: QuoteRepository, tables: dict[str, MagicMock], quote: Quote
    ) -> None:
        """Test that DynamoDB failures surface as InternalServerError."""
        tables["quotes"].put_item.side_effect = client_error("ProvisionedThroughputExceededException")

        with pytest.raises(InternalServerError, match="Failed to save quote record"):
            repository.save(quote)

    def test_find_by_id_found(
        self, repository: QuoteRepository, tables: dict[str, MagicMock], quote: Quote
    ) -> None:
        """Test retrieving an existing record."""
        tables["quotes"].get_item.return_value = {"Item": quote.to_dynamodb_item()}

        result = repository.find_by_id(quote.id)

        assert result == quote
        tables["quotes"].get_item.assert_called_once_with(Key={"id": quote.id})

    def test_find_by_id_missing(self, repository: QuoteRepository, tables: dict[str, MagicMock]) -> None:
        """Test that a missing record returns None."""
        tables["quotes"].get_item.return_value = {}

        assert repository.find_by_id("missing") is None

    def test_find_all_sorts_and_slices(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test in-memory ordering and offset paging over a paginated scan."""
        base = datetime(2024, 1, 1, tzinfo=UTC)
        items = [quote_item(f"q{i}", base + timedelta(days=i)) for i in range(5)]
        tables["quotes"].scan.side_effect = [
            {"Items": items[:3], "LastEvaluatedKey": {"id": "q2"}},
            {"Items": items[3:]},
        ]

        result = repository.find_all(1, 2, "createdAt", SortDirection.DESC)

        assert [q.id for q in result] == ["q2", "q1"]
        assert tables["quotes"].scan.call_count == 2
        tables["quotes"].scan.assert_called_with(ExclusiveStartKey={"id": "q2"})

    def test_find_all_ascending_missing_values_first(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that records without the sort attribute come first ascending."""
        base = datetime(2024, 1, 1, tzinfo=UTC)
        with_details = quote_item("b", base)
        with_details["additionalDetails"] = "Buffet"
        without_details = quote_item("a", base)
        tables["quotes"].scan.return_value = {"Items": [with_details, without_details]}

        result = repository.find_all(0, 10, "additionalDetails", SortDirection.ASC)

        assert [q.id for q in result] == ["a", "b"]

    def test_find_all_ties_broken_by_id(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that equal sort values keep a stable id order."""
        base = datetime(2024, 1, 1, tzinfo=UTC)
        tables["quotes"].scan.return_value = {
            "Items": [quote_item("c", base), quote_item("a", base), quote_item("b", base)]
        }

        result = repository.find_all(0, 10, "eventDate", SortDirection.ASC)

        assert [q.id for q in result] == ["a", "b", "c"]

    def test_find_all_page_past_end_is_empty(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that a page beyond the data returns no records."""
        tables["quotes"].scan.return_value = {"Items": [quote_item("a", datetime.now(UTC))]}

        assert repository.find_all(3, 10, "createdAt", SortDirection.DESC) == []

    def test_count_follows_pagination(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that count adds up every scan page."""
        tables["quotes"].scan.side_effect = [
            {"Count": 3, "LastEvaluatedKey": {"id": "x"}},
            {"Count": 2},
        ]

        assert repository.count() == 5
        tables["quotes"].scan.assert_any_call(Select="COUNT")

    def test_count_wraps_client_error(
        self, repository: QuoteRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that count failures surface as InternalServerError."""
        tables["quotes"].scan.side_effect = client_error("InternalServerError", "Scan")

        with pytest.raises(InternalServerError):
            repository.count()

    def test_delete_by_id(self, repository: QuoteRepository, tables: dict[str, MagicMock]) -> None:
        """Test deleting a plain record."""
        repository.delete_by_id("q1")

        tables["quotes"].delete_item.assert_called_once_with(Key={"id": "q1"})

    def test_image_claims_not_supported(self, repository: QuoteRepository) -> None:
        """Test that quotes do not track imageIds."""
        with pytest.raises(TypeError, match="Quote does not track imageId claims"):
            repository.exists_by_image_id(IMAGE_ID)


@pytest.mark.unit
class TestMenuRepository:
    """Tests for the claim-backed unique imageId path, using menus."""

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> MenuRepository:
        """Create a MenuRepository with mocked DynamoDB."""
        return MenuRepository(
            dynamodb_resource=mock_dynamodb, table_name="menu", claims_table_name="claims"
        )

    def test_save_writes_record_and_claim_in_one_transaction(
        self,
        repository: MenuRepository,
        mock_dynamodb: MagicMock,
        tables: dict[str, MagicMock],
        menu_item: MenuItem,
    ) -> None:
        """Test the transactional create."""
        repository.save(menu_item)

        transact = mock_dynamodb.meta.client.transact_write_items
        transact.assert_called_once()
        items = transact.call_args.kwargs["TransactItems"]

        assert len(items) == 2
        assert items[0]["Put"]["TableName"] == "menu"
        assert items[0]["Put"]["Item"]["id"] == {"S": menu_item.id}
        assert items[0]["Put"]["Item"]["price"] == {"N": "25.5"}
        claim = items[1]["Put"]
        assert claim["TableName"] == "claims"
        assert claim["Item"]["claimKey"] == {"S": f"menu#{IMAGE_ID}"}
        assert claim["Item"]["ownerId"] == {"S": menu_item.id}
        assert claim["ConditionExpression"] == "attribute_not_exists(claimKey) OR ownerId = :owner"
        tables["menu"].put_item.assert_not_called()

    def test_save_releases_previous_claim_on_image_change(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, menu_item: MenuItem
    ) -> None:
        """Test that changing imageId deletes the old claim in the same transaction."""
        updated = menu_item.model_copy(update={"image_id": NEW_IMAGE_ID})

        repository.save(updated, previous_image_id=IMAGE_ID)

        items = mock_dynamodb.meta.client.transact_write_items.call_args.kwargs["TransactItems"]
        assert len(items) == 3
        assert items[2]["Delete"]["Key"] == {"claimKey": {"S": f"menu#{IMAGE_ID}"}}

    def test_save_keeping_image_does_not_release_claim(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, menu_item: MenuItem
    ) -> None:
        """Test that an unchanged imageId keeps its claim."""
        repository.save(menu_item, previous_image_id=IMAGE_ID)

        items = mock_dynamodb.meta.client.transact_write_items.call_args.kwargs["TransactItems"]
        assert len(items) == 2

    def test_save_claim_conflict_raises_duplicate(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, menu_item: MenuItem
    ) -> None:
        """Test that a failed claim condition is a duplicate."""
        mock_dynamodb.meta.client.transact_write_items.side_effect = client_error(
            "TransactionCanceledException",
            "TransactWriteItems",
            CancellationReasons=[{"Code": "None"}, {"Code": "ConditionalCheckFailed"}],
        )

        with pytest.raises(DuplicateResourceError, match=f"Menu with imageId {IMAGE_ID} already exists"):
            repository.save(menu_item)

    def test_save_other_transaction_failure_is_internal(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, menu_item: MenuItem
    ) -> None:
        """Test that non-condition transaction failures are internal errors."""
        mock_dynamodb.meta.client.transact_write_items.side_effect = client_error(
            "TransactionCanceledException",
            "TransactWriteItems",
            CancellationReasons=[{"Code": "ThrottlingError"}, {"Code": "None"}],
        )

        with pytest.raises(InternalServerError):
            repository.save(menu_item)

    def test_exists_by_image_id(self, repository: MenuRepository, tables: dict[str, MagicMock]) -> None:
        """Test the claim lookup."""
        tables["claims"].get_item.return_value = {"Item": {"claimKey": f"menu#{IMAGE_ID}", "ownerId": "m1"}}

        assert repository.exists_by_image_id(IMAGE_ID) is True
        tables["claims"].get_item.assert_called_once_with(Key={"claimKey": f"menu#{IMAGE_ID}"})

    def test_exists_by_image_id_absent(self, repository: MenuRepository, tables: dict[str, MagicMock]) -> None:
        """Test the claim lookup when nothing holds the imageId."""
        tables["claims"].get_item.return_value = {}

        assert repository.exists_by_image_id(IMAGE_ID) is False

    def test_exists_excluding_own_record(
        self, repository: MenuRepository, tables: dict[str, MagicMock]
    ) -> None:
        """Test that a record's own claim does not count as a conflict."""
        tables["claims"].get_item.return_value = {"Item": {"claimKey": f"menu#{IMAGE_ID}", "ownerId": "m1"}}

        assert repository.exists_by_image_id_excluding_id(IMAGE_ID, "m1") is False
        assert repository.exists_by_image_id_excluding_id(IMAGE_ID, "m2") is True

    def test_delete_removes_record_and_claim(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, tables: dict[str, MagicMock]
    ) -> None:
        """Test that delete releases the imageId claim."""
        repository.delete_by_id("m1", image_id=IMAGE_ID)

        items = mock_dynamodb.meta.client.transact_write_items.call_args.kwargs["TransactItems"]
        assert items[0]["Delete"] == {"TableName": "menu", "Key": {"id": {"S": "m1"}}}
        assert items[1]["Delete"] == {"TableName": "claims", "Key": {"claimKey": {"S": f"menu#{IMAGE_ID}"}}}
        tables["menu"].delete_item.assert_not_called()

    def test_delete_without_image_id_deletes_record_only(
        self, repository: MenuRepository, mock_dynamodb: MagicMock, tables: dict[str, MagicMock]
    ) -> None:
        """Test the fallback when no imageId is known."""
        repository.delete_by_id("m1")

        tables["menu"].delete_item.assert_called_once_with(Key={"id": "m1"})
        mock_dynamodb.meta.client.transact_write_items.assert_not_called()
