"""Customer service - storage access and the filtered, paginated customer query.

Every read in this module excludes soft-deleted rows except
``exists_including_deleted``, which exists to prove a deleted row is still
physically present.
"""

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Customer, utc_now
from app.schemas.customer import CustomerCreate, CustomerUpdate
from app.services.errors import (
    CustomerConflictError,
    CustomerNotFoundError,
    InvalidArgumentError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_SORT_BY = "name"
DEFAULT_SORT_ORDER = "asc"

STORE_UNAVAILABLE_MESSAGE = "Customer store is unavailable"

_SORT_COLUMNS = {
    "name": Customer.name,
    "email": Customer.email,
    "createdat": Customer.created_at,
    "created_at": Customer.created_at,
}
_SORT_ORDERS = ("asc", "desc")


@asynccontextmanager
async def storage_errors(action: str) -> AsyncIterator[None]:
    """Translate connection failures into StorageUnavailableError.

    A refused or dropped connection surfaces either as a SQLAlchemy
    ``OperationalError``/``InterfaceError`` or, straight from the driver, as
    an ``OSError`` such as ``ConnectionRefusedError``.
    """
    try:
        yield
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error(f"Customer store unavailable while {action}: {e!r}")
        raise StorageUnavailableError(STORE_UNAVAILABLE_MESSAGE) from e


def _active() -> Select:
    """Base select over customers that are not soft-deleted."""
    return select(Customer).where(Customer.is_deleted.is_(False))


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _conflict(email: str) -> CustomerConflictError:
    return CustomerConflictError(f"A customer with email {email} already exists")


async def _count(db: AsyncSession, *conditions) -> int:
    async with storage_errors("counting customers"):
        result = await db.execute(select(func.count()).select_from(Customer).where(*conditions))
    return result.scalar_one()


async def get_customer(db: AsyncSession, customer_id: UUID) -> Customer | None:
    """Get an active customer by ID."""
    async with storage_errors(f"loading customer {customer_id}"):
        result = await db.execute(_active().where(Customer.id == customer_id))
    return result.scalar_one_or_none()


async def get_customer_by_email(db: AsyncSession, email: str) -> Customer | None:
    """Get an active customer by exact email."""
    async with storage_errors("looking up a customer by email"):
        result = await db.execute(_active().where(Customer.email == email))
    return result.scalar_one_or_none()


async def customer_exists(db: AsyncSession, customer_id: UUID) -> bool:
    """Check whether an active customer with this ID exists."""
    return await _count(db, Customer.id == customer_id, Customer.is_deleted.is_(False)) > 0


async def exists_including_deleted(db: AsyncSession, customer_id: UUID) -> bool:
    """Check whether the row is physically present, ignoring the soft-delete flag."""
    return await _count(db, Customer.id == customer_id) > 0


async def email_exists(db: AsyncSession, email: str) -> bool:
    """Check whether an active customer already uses this email."""
    return await _count(db, Customer.email == email, Customer.is_deleted.is_(False)) > 0


async def get_existing_emails(db: AsyncSession, emails: Iterable[str]) -> set[str]:
    """Return the subset of ``emails`` already used by active customers."""
    emails = list(emails)
    if not emails:
        return set()
    async with storage_errors("checking existing emails"):
        result = await db.execute(
            select(Customer.email).where(
                Customer.email.in_(emails), Customer.is_deleted.is_(False)
            )
        )
    return set(result.scalars().all())


async def search_customers(
    db: AsyncSession,
    *,
    skip: int = 0,
    take: int = 10,
    search_term: str | None = None,
    email: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> tuple[list[Customer], int]:
    """Filter, sort and page the active customers.

    Args:
        skip: Number of matching rows to skip (>= 0)
        take: Maximum number of rows to return (> 0)
        search_term: Case-insensitive substring matched against name OR email;
            blank means no filter
        email: Exact email match; blank means no filter
        date_from: Inclusive lower bound on created_at (UTC)
        date_to: Inclusive upper bound on created_at (UTC)
        sort_by: ``name``, ``email`` or ``createdAt`` (default ``name``)
        sort_order: ``asc`` or ``desc`` (default ``asc``)

    Returns:
        The requested page and the total number of matching rows

    Raises:
        InvalidArgumentError: for negative skip, non-positive take, or an
            unknown sort field/direction
        StorageUnavailableError: if the store cannot be reached
    """
    if skip < 0:
        raise InvalidArgumentError("skip must be greater than or equal to 0")
    if take < 1:
        raise InvalidArgumentError("take must be greater than 0")

    sort_key = (sort_by or DEFAULT_SORT_BY).strip().lower()
    sort_column = _SORT_COLUMNS.get(sort_key)
    if sort_column is None:
        raise InvalidArgumentError(
            f"Invalid sortBy value '{sort_by}'. Allowed values: name, email, createdAt"
        )
    direction = (sort_order or DEFAULT_SORT_ORDER).strip().lower()
    if direction not in _SORT_ORDERS:
        raise InvalidArgumentError(
            f"Invalid sortOrder value '{sort_order}'. Allowed values: asc, desc"
        )

    conditions = [Customer.is_deleted.is_(False)]

    term = search_term.strip() if search_term else ""
    if term:
        conditions.append(
            or_(
                Customer.name.icontains(term, autoescape=True),
                Customer.email.icontains(term, autoescape=True),
            )
        )

    exact_email = email.strip() if email else ""
    if exact_email:
        conditions.append(Customer.email == exact_email)

    if date_from is not None:
        conditions.append(Customer.created_at >= _as_utc(date_from))
    if date_to is not None:
        conditions.append(Customer.created_at <= _as_utc(date_to))

    ordering = sort_column.desc() if direction == "desc" else sort_column.asc()

    total_count = await _count(db, *conditions)
    async with storage_errors("searching customers"):
        result = await db.execute(
            select(Customer)
            .where(*conditions)
            .order_by(ordering, Customer.id.asc())
            .offset(skip)
            .limit(take)
        )

    return list(result.scalars().all()), total_count


async def create_customer(db: AsyncSession, customer_data: CustomerCreate) -> Customer:
    """Create a new customer.

    Uniqueness is enforced by the partial unique index on email; a violation
    rolls the session back and raises CustomerConflictError.
    """
    now = utc_now()
    customer = Customer(
        name=customer_data.name,
        email=customer_data.email,
        phone=customer_data.phone,
        address=customer_data.address,
        is_deleted=False,
        created_at=now,
        updated_at=now,
    )
    db.add(customer)
    try:
        async with storage_errors("creating a customer"):
            await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Duplicate email on create: {customer_data.email}")
        raise _conflict(customer_data.email) from e
    logger.info(f"Created customer {customer.id}")
    return customer


async def update_customer(
    db: AsyncSession, customer_id: UUID, customer_data: CustomerUpdate
) -> Customer:
    """Replace a customer's mutable fields and refresh updated_at."""
    customer = await get_customer(db, customer_id)
    if customer is None:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")

    customer.name = customer_data.name
    customer.email = customer_data.email
    customer.phone = customer_data.phone
    customer.address = customer_data.address
    customer.updated_at = utc_now()
    try:
        async with storage_errors(f"updating customer {customer_id}"):
            await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Duplicate email on update of {customer_id}: {customer_data.email}")
        raise _conflict(customer_data.email) from e
    return customer


async def soft_delete_customer(db: AsyncSession, customer_id: UUID) -> None:
    """Mark a customer as deleted; the row itself is kept."""
    customer = await get_customer(db, customer_id)
    if customer is None:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")

    customer.is_deleted = True
    customer.updated_at = utc_now()
    async with storage_errors(f"deleting customer {customer_id}"):
        await db.flush()
    logger.info(f"Soft-deleted customer {customer_id}")
