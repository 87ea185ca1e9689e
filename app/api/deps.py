"""Dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Query

from app.config import get_settings
from app.database import get_db
from app.services.random_customer import RandomCustomerGenerator

__all__ = [
    "get_db",
    "get_customer_generator",
    "PaginationParams",
]

settings = get_settings()


def get_customer_generator() -> RandomCustomerGenerator:
    """Random customer generator used by the bulk endpoint."""
    return RandomCustomerGenerator()


# Pagination parameters
class PaginationParams:
    """Page-based pagination query parameters.

    Out-of-range values are normalised instead of rejected: ``page < 1``
    becomes 1, ``pageSize < 1`` falls back to the default and ``pageSize``
    above the maximum is capped.
    """

    def __init__(
        self,
        page: Annotated[int, Query(description="1-based page number")] = 1,
        page_size: Annotated[
            int | None, Query(alias="pageSize", description="Number of items per page")
        ] = None,
    ):
        if page_size is None or page_size < 1:
            page_size = settings.default_page_size
        self.page = max(page, 1)
        self.page_size = min(page_size, settings.max_page_size)

    @property
    def skip(self) -> int:
        """Number of records to skip."""
        return (self.page - 1) * self.page_size
