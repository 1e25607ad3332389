"""FastAPI application exposing the catering content API."""

import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from catering_service.adapters.base_adapter import ImageUpload
from catering_service.exceptions import CateringServiceError
from catering_service.models.api_models import ApiResponse, ErrorResponse, HealthResponse, PageResponse
from catering_service.models.catering_models import CateringEntity, GalleryItem, MenuItem, Quote, Review
from catering_service.models.request_models import (
    GalleryRequest,
    MenuRequest,
    QuoteRequest,
    ReviewRequest,
)
from catering_service.services.catering_services import MenuService, QuoteService, ReviewService
from catering_service.services.gallery_service import GalleryService

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
LOCATION_PREFIXES = ("body", "query", "form", "path")


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build the error envelope returned for every failed request."""
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def format_validation_errors(errors: Any) -> str:
    """Join pydantic error details into a single message.

    Each entry reads "<field>: <message>"; the "body"/"query"/"form" location
    prefix and pydantic's "Value error, " prefix are dropped.
    """
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in LOCATION_PREFIXES]
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        messages.append(f"{'.'.join(location)}: {message}" if location else message)
    return ", ".join(messages)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and framework errors onto the error envelope."""

    @app.exception_handler(CateringServiceError)
    async def handle_service_error(request: Request, exc: CateringServiceError) -> JSONResponse:
        logger.error(
            f"{type(exc).__name__} on {request.url.path}: {exc.message}",
            extra={"context": exc.context, "status": exc.status_code},
        )
        return error_response(request, exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = format_validation_errors(exc.errors())
        logger.error(f"Request validation failed on {request.url.path}: {message}")
        return error_response(request, 400, message)

    @app.exception_handler(PydanticValidationError)
    async def handle_model_validation_error(request: Request, exc: PydanticValidationError) -> JSONResponse:
        message = format_validation_errors(exc.errors())
        logger.error(f"Model validation failed on {request.url.path}: {message}")
        return error_response(request, 400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return error_response(request, 500, UNEXPECTED_ERROR_MESSAGE)


def register_resource_routes(
    app: FastAPI,
    *,
    path: str,
    service_key: str,
    entity_model: type[CateringEntity],
    request_model: type[BaseModel],
    singular: str,
    plural: str,
) -> None:
    """Register the five JSON CRUD routes for one resource.

    Args:
        app: Application to register on
        path: Base path, e.g. "/api/menu"
        service_key: Attribute name of the service on ``app.state``
        entity_model: Entity returned in responses
        request_model: Body model for create and update
        singular: Resource label for single-record messages ("Menu")
        plural: Resource label for listing messages ("Menus")
    """

    def service() -> Any:
        return getattr(app.state, service_key)

    single_model = ApiResponse[entity_model]  # type: ignore[valid-type]
    page_model = ApiResponse[PageResponse[entity_model]]  # type: ignore[valid-type]

    @app.post(path, status_code=201, response_model=single_model, tags=[plural])
    async def create_resource(body: request_model) -> ApiResponse[Any]:  # type: ignore[valid-type]
        entity = await service().create(body)
        return ApiResponse(message=f"{singular} created successfully", data=entity)

    @app.get(f"{path}/{{entity_id}}", response_model=single_model, tags=[plural])
    async def get_resource(entity_id: str) -> ApiResponse[Any]:
        entity = await service().get_by_id(entity_id)
        return ApiResponse(message=f"{singular} retrieved successfully", data=entity)

    @app.get(path, response_model=page_model, tags=[plural])
    async def list_resources(
        page: int = Query(0),
        size: int = Query(10),
        sort_by: str = Query("createdAt", alias="sortBy"),
        sort_dir: str = Query("DESC", alias="sortDir"),
    ) -> ApiResponse[Any]:
        result = await service().get_all(
            page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
        )
        return ApiResponse(message=f"{plural} retrieved successfully", data=result)

    @app.put(f"{path}/{{entity_id}}", response_model=single_model, tags=[plural])
    async def update_resource(entity_id: str, body: request_model) -> ApiResponse[Any]:  # type: ignore[valid-type]
        entity = await service().update(entity_id, body)
        return ApiResponse(message=f"{singular} updated successfully", data=entity)

    @app.delete(f"{path}/{{entity_id}}", response_model=ApiResponse[None], tags=[plural])
    async def delete_resource(entity_id: str) -> ApiResponse[None]:
        await service().delete(entity_id)
        return ApiResponse(message=f"{singular} deleted successfully")


async def read_upload(image: UploadFile | None) -> ImageUpload | None:
    """Read a multipart upload into memory."""
    if image is None:
        return None
    return ImageUpload(
        content=await image.read(),
        filename=image.filename,
        content_type=image.content_type,
    )


def register_gallery_routes(app: FastAPI) -> None:
    """Register the multipart gallery routes."""

    @app.post(
        "/api/gallery",
        status_code=201,
        response_model=ApiResponse[GalleryItem],
        tags=["Galleries"],
    )
    async def create_gallery(
        image: UploadFile = File(...),
        gallery_type: str = Form(..., alias="type"),
        name: str = Form(...),
        description: str = Form(...),
    ) -> ApiResponse[GalleryItem]:
        gallery_request = GalleryRequest(type=gallery_type, name=name, description=description)  # type: ignore[arg-type]
        upload = await read_upload(image)

        service: GalleryService = app.state.gallery_service
        entity = await service.create(gallery_request, upload)
        return ApiResponse(message="Gallery created successfully", data=entity)

    @app.get("/api/gallery/{entity_id}", response_model=ApiResponse[GalleryItem], tags=["Galleries"])
    async def get_gallery(entity_id: str) -> ApiResponse[GalleryItem]:
        entity = await app.state.gallery_service.get_by_id(entity_id)
        return ApiResponse(message="Gallery retrieved successfully", data=entity)

    @app.get(
        "/api/gallery",
        response_model=ApiResponse[PageResponse[GalleryItem]],
        tags=["Galleries"],
    )
    async def list_galleries(
        page: int = Query(0),
        size: int = Query(10),
        sort_by: str = Query("createdAt", alias="sortBy"),
        sort_dir: str = Query("DESC", alias="sortDir"),
    ) -> ApiResponse[Any]:
        result = await app.state.gallery_service.get_all(
            page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
        )
        return ApiResponse(message="Galleries retrieved successfully", data=result)

    @app.put("/api/gallery/{entity_id}", response_model=ApiResponse[GalleryItem], tags=["Galleries"])
    async def update_gallery(
        entity_id: str,
        image: UploadFile | None = File(None),
        gallery_type: str = Form(..., alias="type"),
        name: str = Form(...),
        description: str = Form(...),
    ) -> ApiResponse[GalleryItem]:
        gallery_request = GalleryRequest(type=gallery_type, name=name, description=description)  # type: ignore[arg-type]
        upload = await read_upload(image)

        service: GalleryService = app.state.gallery_service
        entity = await service.update(entity_id, gallery_request, upload)
        return ApiResponse(message="Gallery updated successfully", data=entity)

    @app.delete("/api/gallery/{entity_id}", response_model=ApiResponse[None], tags=["Galleries"])
    async def delete_gallery(entity_id: str) -> ApiResponse[None]:
        await app.state.gallery_service.delete(entity_id)
        return ApiResponse(message="Gallery deleted successfully")

    @app.get(
        "/api/gallery/{entity_id}/image-url",
        response_model=ApiResponse[str],
        tags=["Galleries"],
    )
    async def get_gallery_image_url(
        entity_id: str,
        expiration_minutes: int = Query(60, alias="expirationMinutes"),
    ) -> ApiResponse[str]:
        url = await app.state.gallery_service.get_image_url(entity_id, expiration_minutes)
        return ApiResponse(message="Image URL generated successfully", data=url)


def create_app(
    menu_service: MenuService,
    gallery_service: GalleryService,
    quote_service: QuoteService,
    review_service: ReviewService,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for menu items
        gallery_service: Service for gallery items and their images
        quote_service: Service for quote requests
        review_service: Service for reviews

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Catering Content API",
        description="CRUD API for a catering business's menus, gallery, quotes and reviews",
        version="1.0.0",
    )

    app.state.menu_service = menu_service
    app.state.gallery_service = gallery_service
    app.state.quote_service = quote_service
    app.state.review_service = review_service

    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    register_resource_routes(
        app,
        path="/api/menu",
        service_key="menu_service",
        entity_model=MenuItem,
        request_model=MenuRequest,
        singular="Menu",
        plural="Menus",
    )
    register_gallery_routes(app)
    register_resource_routes(
        app,
        path="/api/quotes",
        service_key="quote_service",
        entity_model=Quote,
        request_model=QuoteRequest,
        singular="Quote",
        plural="Quotes",
    )
    register_resource_routes(
        app,
        path="/api/reviews",
        service_key="review_service",
        entity_model=Review,
        request_model=ReviewRequest,
        singular="Review",
        plural="Reviews",
    )

    return app
