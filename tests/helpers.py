"""Shared test helpers."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Customer, utc_now
from app.schemas.customer import CustomerCreate
from app.services.random_customer import RandomCustomerGenerator


async def add_customer(
    session: AsyncSession,
    name: str = "Test Customer",
    email: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    created_at: datetime | None = None,
    is_deleted: bool = False,
) -> Customer:
    """Insert and commit a customer row directly."""
    timestamp = created_at or utc_now()
    customer = Customer(
        name=name,
        email=email or f"customer.{uuid4().hex[:10]}@mail.com",
        phone=phone,
        address=address,
        is_deleted=is_deleted,
        created_at=timestamp,
        updated_at=timestamp,
    )
    session.add(customer)
    await session.commit()
    return customer


def candidate(index: int, email: str | None = None) -> CustomerCreate:
    """A valid generated-customer payload."""
    return CustomerCreate(
        name=f"Generated Person{index}",
        email=email or f"generated.person{index}@mail.com",
        phone=f"+1-555-200-{1000 + index}",
        address=f"{index + 1} Main St, Boston, MA 02101, United States",
    )


class StubGenerator(RandomCustomerGenerator):
    """Generator returning a fixed batch, so collisions can be arranged."""

    def __init__(self, customers: list[CustomerCreate]):
        super().__init__()
        self.customers = customers
        self.calls: list[int] = []

    def generate(self, count: int) -> list[CustomerCreate]:
        self.calls.append(count)
        return self.customers[:count]
