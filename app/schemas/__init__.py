"""Pydantic schemas for the customer API."""

from app.schemas.customer import (
    BulkCreateError,
    BulkCreateRequest,
    BulkCreateResponse,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    ErrorResponse,
    PaginatedResponse,
)

__all__ = [
    # Customer
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    # Paging
    "PaginatedResponse",
    # Bulk create
    "BulkCreateRequest",
    "BulkCreateResponse",
    "BulkCreateError",
    # Errors
    "ErrorResponse",
]
