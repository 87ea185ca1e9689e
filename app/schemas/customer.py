"""Customer schemas for API requests and responses."""

import math
import re
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

from app.config import get_settings
from app.models.customer import (
    ADDRESS_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)

T = TypeVar("T")

settings = get_settings()

_PHONE_PATTERN = re.compile(r"^[0-9+\-(). ]+$")


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys (accepts snake_case too)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerBase(CamelModel):
    """Fields shared by create and update payloads."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Full name")
    email: str = Field(..., max_length=EMAIL_MAX_LENGTH, description="Email address")
    phone: str | None = Field(None, max_length=PHONE_MAX_LENGTH, description="Phone number")
    address: str | None = Field(None, max_length=ADDRESS_MAX_LENGTH, description="Postal address")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        """Trim surrounding whitespace so a blank name is rejected."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("phone", "address", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank optional fields as missing."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Accept a bare address only; ``Name <addr>`` forms are rejected."""
        v = v.strip()
        if "<" in v or ">" in v:
            raise ValueError("value is not a valid email address: display names are not allowed")
        _, address = validate_email(v)
        return address

    @field_validator("phone")
    @classmethod
    def validate_phone_format(cls, v: str | None) -> str | None:
        """Allow digits and the usual phone punctuation only."""
        if v is not None and not _PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone format")
        return v


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""


class CustomerUpdate(CustomerBase):
    """Schema for updating a customer - replaces every mutable field."""


class CustomerResponse(CamelModel):
    """Public shape of a customer (the soft-delete flag is never exposed)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    created_at: datetime
    updated_at: datetime


class PaginatedResponse(CamelModel, Generic[T]):
    """One page of results plus the metadata needed to page through the rest."""

    items: list[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total_count: int, page: int, page_size: int) -> "PaginatedResponse[T]":
        """Assemble a page, computing total_pages from the count."""
        total_pages = math.ceil(total_count / page_size) if total_count > 0 else 0
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )


class BulkCreateRequest(CamelModel):
    """Request to generate and store random customers."""

    count: int = Field(..., description="Number of customers to create, 1..max_bulk_count")

    @field_validator("count")
    @classmethod
    def count_in_range(cls, v: int) -> int:
        """Bound the batch size by the configured maximum."""
        if v < 1 or v > settings.max_bulk_count:
            raise ValueError(f"Count must be between 1 and {settings.max_bulk_count}")
        return v


class BulkCreateError(CamelModel):
    """A single record that could not be stored."""

    index: int = Field(..., description="0-based position in the requested batch")
    message: str


class BulkCreateResponse(CamelModel):
    """Outcome of a bulk create - successes are kept even when some records fail."""

    success_count: int = 0
    failure_count: int = 0
    created_customers: list[CustomerResponse] = Field(default_factory=list)
    errors: list[BulkCreateError] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    message: str
    errors: dict[str, list[str]] | None = None
