"""Fixtures for component tests against in-memory AWS services (moto)."""

from collections.abc import Iterator
from typing import Any

import boto3
import pytest
from moto import mock_aws

REGION = "us-east-1"
BUCKET_NAME = "catering-assets"
RESOURCE_TABLES = ("catering-menu", "catering-gallery", "catering-quotes", "catering-reviews")
CLAIMS_TABLE = "catering-image-claims"


def create_table(dynamodb: Any, table_name: str, key_name: str) -> None:
    """Create an on-demand table with a single string hash key."""
    dynamodb.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": key_name, "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": key_name, "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )


@pytest.fixture
def aws() -> Iterator[None]:
    """Run the test inside moto's in-memory AWS."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb(aws: None) -> Any:
    """DynamoDB resource with every catering table created."""
    resource = boto3.resource("dynamodb", region_name=REGION)
    for table_name in RESOURCE_TABLES:
        create_table(resource, table_name, "id")
    create_table(resource, CLAIMS_TABLE, "claimKey")
    return resource


@pytest.fixture
def s3_client(aws: None) -> Any:
    """S3 client with the asset bucket created."""
    client = boto3.client("s3", region_name=REGION)
    client.create_bucket(Bucket=BUCKET_NAME)
    return client
