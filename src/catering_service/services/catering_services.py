"""Services for resources whose records are plain documents."""

from catering_service.models.catering_models import MenuItem, Quote, Review
from catering_service.models.request_models import MenuRequest, QuoteRequest, ReviewRequest
from catering_service.repositories.catering_repositories import (
    MenuRepository,
    QuoteRepository,
    ReviewRepository,
)
from catering_service.services.resource_service import ResourceService


class MenuService(ResourceService[MenuItem, MenuRequest]):
    """Menu item CRUD. imageId must be unique across menu items."""

    def __init__(self, repository: MenuRepository) -> None:
        super().__init__(repository)


class QuoteService(ResourceService[Quote, QuoteRequest]):
    """Quote request CRUD."""

    def __init__(self, repository: QuoteRepository) -> None:
        super().__init__(repository)


class ReviewService(ResourceService[Review, ReviewRequest]):
    """Review CRUD. imageId must be unique across reviews."""

    def __init__(self, repository: ReviewRepository) -> None:
        super().__init__(repository)
