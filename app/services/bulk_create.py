"""Bulk creation of random customers with per-record failure reporting.

A failing record never fails the batch: successes are committed and kept,
and each failure is reported with its 0-based position in the batch.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import Customer, utc_now
from app.schemas.customer import CustomerCreate
from app.services import customer as customer_service
from app.services.customer import storage_errors
from app.services.errors import (
    CustomerServiceError,
    InvalidArgumentError,
    StorageUnavailableError,
)
from app.services.random_customer import RandomCustomerGenerator

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class BulkCreateFailure:
    """A record that could not be stored."""

    index: int
    message: str


@dataclass
class BulkCreateResult:
    """Aggregated outcome of a bulk create, in batch order."""

    success_count: int = 0
    failure_count: int = 0
    created_customers: list[Customer] = field(default_factory=list)
    errors: list[BulkCreateFailure] = field(default_factory=list)


def _duplicate_message(email: str) -> str:
    return f"A customer with email {email} already exists"


async def _insert_batch(
    db: AsyncSession, candidates: list[tuple[int, CustomerCreate]]
) -> dict[int, Customer]:
    """Insert every candidate in one flush and commit."""
    now = utc_now()
    created = {
        index: Customer(
            name=data.name,
            email=data.email,
            phone=data.phone,
            address=data.address,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        for index, data in candidates
    }
    db.add_all(created.values())
    async with storage_errors("bulk inserting customers"):
        await db.flush()
        await db.commit()
    return created


async def _insert_one(db: AsyncSession, data: CustomerCreate) -> Customer | str:
    """Insert and commit a single record; return the error message on failure.

    Raises:
        StorageUnavailableError: if the store goes away mid-batch
    """
    try:
        customer = await customer_service.create_customer(db, data)
        async with storage_errors("committing a customer"):
            await db.commit()
    except StorageUnavailableError:
        raise
    except CustomerServiceError as e:
        return e.message
    except IntegrityError:
        await db.rollback()
        return _duplicate_message(data.email)
    return customer


async def bulk_create_customers(
    db: AsyncSession,
    count: int,
    generator: RandomCustomerGenerator | None = None,
) -> BulkCreateResult:
    """Generate ``count`` random customers and store as many as possible.

    Candidates whose email is already taken are reported up front. The rest
    are written with a single bulk insert; if that insert still hits the
    unique index (another writer got there first) the batch is rolled back
    and every record is retried as its own unit of work.

    Args:
        db: Database session (committed by this function)
        count: Number of customers to generate, 1..max_bulk_count
        generator: Source of random customers

    Returns:
        Counts, the stored customers and the per-record errors

    Raises:
        InvalidArgumentError: if count is out of range (nothing is generated)
    """
    if count < 1 or count > settings.max_bulk_count:
        raise InvalidArgumentError(
            f"Count must be between 1 and {settings.max_bulk_count}"
        )

    generator = generator or RandomCustomerGenerator()
    candidates = generator.generate(count)

    taken = await customer_service.get_existing_emails(db, (c.email for c in candidates))

    outcomes: dict[int, Customer | str] = {}
    pending: list[tuple[int, CustomerCreate]] = []
    for index, candidate in enumerate(candidates):
        if candidate.email in taken:
            outcomes[index] = _duplicate_message(candidate.email)
        else:
            pending.append((index, candidate))

    if pending:
        try:
            outcomes.update(await _insert_batch(db, pending))
        except IntegrityError:
            async with storage_errors("rolling back a bulk insert"):
                await db.rollback()
            logger.warning(
                f"Bulk insert of {len(pending)} customers hit a constraint violation, "
                "retrying record by record"
            )
            for index, candidate in pending:
                outcomes[index] = await _insert_one(db, candidate)
            # A rollback expires everything in the session, including rows
            # committed earlier in the loop.
            async with storage_errors("reloading created customers"):
                for outcome in outcomes.values():
                    if isinstance(outcome, Customer):
                        await db.refresh(outcome)

    result = BulkCreateResult()
    for index in range(len(candidates)):
        outcome = outcomes[index]
        if isinstance(outcome, Customer):
            result.created_customers.append(outcome)
            result.success_count += 1
        else:
            result.errors.append(BulkCreateFailure(index=index, message=outcome))
            result.failure_count += 1

    logger.info(
        f"Bulk create finished: requested={count} "
        f"succeeded={result.success_count} failed={result.failure_count}"
    )
    return result
