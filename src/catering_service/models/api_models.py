"""Response envelopes shared by every API endpoint."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import Field

from catering_service.models.catering_models import CateringModel

T = TypeVar("T")


class PageResponse(CateringModel, Generic[T]):
    """A bounded, offset-addressed slice of a sorted collection."""

    content: list[T] = Field(default_factory=list)
    page_number: int = Field(..., ge=0)
    page_size: int = Field(..., gt=0)
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    last: bool


class ApiResponse(CateringModel, Generic[T]):
    """Success envelope wrapping every response payload."""

    success: bool = True
    message: str
    data: T | None = None


class ErrorResponse(CateringModel):
    """Error envelope returned for every failed request."""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str


class HealthResponse(CateringModel):
    """Health check response model."""

    status: str
