"""Wiring shared by the uvicorn and Lambda entry points.

Table and bucket names, AWS region and local endpoints come from environment
variables. Each entry point decides how long the clients it builds here live.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from fastapi import FastAPI

from catering_service.adapters.s3_image_store import S3ImageStore
from catering_service.handlers.api_handler import create_app
from catering_service.repositories.catering_repositories import (
    GalleryRepository,
    MenuRepository,
    QuoteRepository,
    ReviewRepository,
)
from catering_service.services.catering_services import MenuService, QuoteService, ReviewService
from catering_service.services.gallery_service import GalleryService

logger = logging.getLogger(__name__)


@dataclass
class CateringServices:
    """The four resource services, ready to hand to ``create_app``."""

    menu_service: MenuService
    gallery_service: GalleryService
    quote_service: QuoteService
    review_service: ReviewService


def create_dynamodb_resource() -> Any:
    """Create a DynamoDB resource, pointed at DYNAMODB_ENDPOINT when set."""
    region = os.getenv("AWS_REGION", "us-east-1")
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")

    if not endpoint_url:
        logger.info(f"Using AWS DynamoDB in region {region}")
        return boto3.resource("dynamodb", region_name=region)

    logger.info(f"Using local DynamoDB at {endpoint_url}")
    return boto3.resource("dynamodb", **_local_endpoint_kwargs(endpoint_url, region))


def create_s3_client() -> Any:
    """Create an S3 client, pointed at S3_ENDPOINT when set.

    Local endpoints use path-style addressing, since emulators do not resolve
    bucket subdomains.
    """
    region = os.getenv("AWS_REGION", "us-east-1")
    endpoint_url = os.getenv("S3_ENDPOINT")

    if not endpoint_url:
        logger.info(f"Using AWS S3 in region {region}")
        return boto3.client("s3", region_name=region)

    logger.info(f"Using local S3 at {endpoint_url}")
    return boto3.client(
        "s3",
        config=Config(s3={"addressing_style": "path"}),
        **_local_endpoint_kwargs(endpoint_url, region),
    )


def _local_endpoint_kwargs(endpoint_url: str, region: str) -> dict[str, Any]:
    return {
        "endpoint_url": endpoint_url,
        "region_name": region,
        "aws_access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "aws_secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
    }


def get_bucket_name() -> str:
    """Read the asset bucket name.

    Raises:
        ValueError: If S3_BUCKET_NAME is not set
    """
    bucket_name = os.getenv("S3_BUCKET_NAME")
    if not bucket_name:
        raise ValueError("S3_BUCKET_NAME must be set in environment")
    return bucket_name


def create_services(dynamodb_resource: Any, s3_client: Any) -> CateringServices:
    """Create repositories, the image store and the services on top of them.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource
        s3_client: Boto3 S3 client

    Returns:
        CateringServices holding one service per resource

    Raises:
        ValueError: If S3_BUCKET_NAME is not set
    """
    bucket_name = get_bucket_name()

    menu_table = os.getenv("DYNAMODB_MENU_TABLE", "catering-menu")
    gallery_table = os.getenv("DYNAMODB_GALLERY_TABLE", "catering-gallery")
    quotes_table = os.getenv("DYNAMODB_QUOTES_TABLE", "catering-quotes")
    reviews_table = os.getenv("DYNAMODB_REVIEWS_TABLE", "catering-reviews")
    claims_table = os.getenv("DYNAMODB_IMAGE_CLAIMS_TABLE", "catering-image-claims")

    menu_repository = MenuRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=menu_table,
        claims_table_name=claims_table,
    )
    gallery_repository = GalleryRepository(
        dynamodb_resource=dynamodb_resource, table_name=gallery_table
    )
    quote_repository = QuoteRepository(dynamodb_resource=dynamodb_resource, table_name=quotes_table)
    review_repository = ReviewRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=reviews_table,
        claims_table_name=claims_table,
    )

    logger.info(
        f"Repositories configured - menu: {menu_table}, gallery: {gallery_table}, "
        f"quotes: {quotes_table}, reviews: {reviews_table}, claims: {claims_table}"
    )

    image_store = S3ImageStore(s3_client=s3_client, bucket_name=bucket_name)
    logger.info(f"Image store configured - bucket: {bucket_name}")

    return CateringServices(
        menu_service=MenuService(menu_repository),
        gallery_service=GalleryService(gallery_repository, image_store),
        quote_service=QuoteService(quote_repository),
        review_service=ReviewService(review_repository),
    )


def create_catering_app(services: CateringServices) -> FastAPI:
    """Build the FastAPI app serving the given services."""
    return create_app(
        menu_service=services.menu_service,
        gallery_service=services.gallery_service,
        quote_service=services.quote_service,
        review_service=services.review_service,
    )
