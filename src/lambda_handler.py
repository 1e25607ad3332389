"""AWS Lambda handler serving API Gateway requests through Mangum."""

import logging
import os
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from mangum import Mangum

from catering_service.handlers.api_handler import UNEXPECTED_ERROR_MESSAGE
from catering_service.models.api_models import ErrorResponse
from lambda_dependencies import get_fastapi_app, initialize_lambda_environment

logger = logging.getLogger(__name__)

_cold_start = True

# Cold-start initialization, skipped during tests
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()
    app = get_fastapi_app()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway events.

    Args:
        event: API Gateway (REST or HTTP API) event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict with statusCode, headers and body
    """
    global _cold_start
    logger.info(
        f"Received Lambda invocation, request_id: {context.aws_request_id}",
        extra={"request_id": context.aws_request_id, "cold_start": _cold_start},
    )
    _cold_start = False

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result
    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return error_result(event, 500, UNEXPECTED_ERROR_MESSAGE)


def error_result(event: dict[str, Any], status_code: int, message: str) -> dict[str, Any]:
    """Build an API Gateway response carrying the standard error envelope."""
    path = event.get("rawPath") or event.get("path") or ""
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=path,
    )
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": body.model_dump_json(by_alias=True),
    }
