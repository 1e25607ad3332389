"""Per-container dependency cache for the Lambda handler.

AWS clients, services and the app are built on the first invocation and reused
while the container stays warm.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI

from catering_service.bootstrap import (
    CateringServices,
    create_catering_app,
    create_dynamodb_resource,
    create_s3_client,
    create_services,
)
from catering_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)

_dynamodb_resource: Any | None = None
_s3_client: Any | None = None
_services: CateringServices | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Return the container's DynamoDB resource."""
    global _dynamodb_resource

    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource()
    return _dynamodb_resource


def get_s3_client() -> Any:
    """Return the container's S3 client."""
    global _s3_client

    if _s3_client is None:
        _s3_client = create_s3_client()
    return _s3_client


def get_services() -> CateringServices:
    """Return the container's resource services.

    Raises:
        ValueError: If S3_BUCKET_NAME is not set
    """
    global _services

    if _services is None:
        _services = create_services(
            dynamodb_resource=get_dynamodb_resource(),
            s3_client=get_s3_client(),
        )
        logger.info("Catering services initialized")
    return _services


def get_fastapi_app() -> FastAPI:
    """Return the container's instrumented FastAPI application."""
    global _fastapi_app

    if _fastapi_app is None:
        _fastapi_app = create_catering_app(get_services())
        setup_observability(_fastapi_app)
        logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure JSON logging. Called once per cold start."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Lambda environment initialized")
