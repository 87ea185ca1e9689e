"""SQLAlchemy models for the customer search API."""

from app.models.base import Base, TimestampMixin, UUIDMixin, utc_now
from app.models.customer import Customer

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
    "Customer",
]
