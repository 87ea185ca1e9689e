"""Customer model - the searchable customer record."""

from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDMixin

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20
ADDRESS_MAX_LENGTH = 500


class Customer(Base, UUIDMixin, TimestampMixin):
    """A customer record.

    Rows are never physically removed: deleting a customer sets
    ``is_deleted`` and every read path filters those rows out. Email
    uniqueness only applies to rows that are not deleted, which is why it is
    a partial unique index rather than a column constraint.
    """

    __tablename__ = "customers"
    __table_args__ = (
        Index(
            "uq_customers_email_active",
            "email",
            unique=True,
            postgresql_where=text("is_deleted = false"),
            sqlite_where=text("is_deleted = 0"),
        ),
        Index("ix_customers_name", "name"),
        Index("ix_customers_created_at", "created_at"),
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(PHONE_MAX_LENGTH), nullable=True)
    address: Mapped[str | None] = mapped_column(String(ADDRESS_MAX_LENGTH), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Customer(id={self.id}, name='{self.name}', email='{self.email}')>"
