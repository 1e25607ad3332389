"""Local entry point for the catering content service.

``python src/main.py`` serves the API with uvicorn. Point DYNAMODB_ENDPOINT and
S3_ENDPOINT at local emulators to run without AWS.
"""

import logging
import os

from fastapi import FastAPI

from catering_service.bootstrap import (
    create_catering_app,
    create_dynamodb_resource,
    create_s3_client,
    create_services,
)
from catering_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Build the instrumented FastAPI application against configured AWS endpoints.

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If S3_BUCKET_NAME is not set
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Initializing catering content service...")

    services = create_services(
        dynamodb_resource=create_dynamodb_resource(),
        s3_client=create_s3_client(),
    )
    app = create_catering_app(services)
    setup_observability(app)

    logger.info("Catering content service initialized successfully")
    return app


# Only build the real app outside tests so collection never touches AWS
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}, docs at /docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
