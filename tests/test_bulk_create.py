"""Tests for the bulk create coordinator."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.services import customer as customer_service
from app.services.bulk_create import bulk_create_customers
from app.services.errors import InvalidArgumentError, StorageUnavailableError
from app.services.random_customer import RandomCustomerGenerator
from tests.helpers import StubGenerator, add_customer, candidate

pytestmark = pytest.mark.asyncio


class TestBulkCreateArguments:
    """Batch-level argument checks."""

    @pytest.mark.parametrize("count", [0, -5, 1001])
    async def test_out_of_range_count_is_rejected_before_generating(
        self, db: AsyncSession, count
    ):
        generator = MagicMock(spec=RandomCustomerGenerator)

        with pytest.raises(InvalidArgumentError):
            await bulk_create_customers(db, count, generator)

        generator.generate.assert_not_called()

    async def test_limit_follows_settings(self, db: AsyncSession):
        with patch("app.services.bulk_create.settings") as mock_settings:
            mock_settings.max_bulk_count = 5
            with pytest.raises(InvalidArgumentError):
                await bulk_create_customers(db, 6, StubGenerator([]))


class TestBulkCreateOutcomes:
    """Successes and per-record failures."""

    async def test_all_records_succeed_on_empty_store(self, db: AsyncSession):
        result = await bulk_create_customers(db, 50, RandomCustomerGenerator())

        assert result.success_count == 50
        assert result.failure_count == 0
        assert result.errors == []
        assert len(result.created_customers) == 50
        _, total = await customer_service.search_customers(db, skip=0, take=10)
        assert total == 50

    async def test_collisions_with_stored_rows_are_reported_per_record(self, db: AsyncSession):
        batch = [candidate(i) for i in range(10)]
        await add_customer(db, email=batch[3].email)
        await add_customer(db, email=batch[7].email)

        result = await bulk_create_customers(db, 10, StubGenerator(batch))

        assert result.success_count == 8
        assert result.failure_count == 2
        assert [e.index for e in result.errors] == [3, 7]
        assert batch[3].email in result.errors[0].message
        assert [c.email for c in result.created_customers] == [
            batch[i].email for i in range(10) if i not in (3, 7)
        ]

    async def test_successes_are_committed(self, db: AsyncSession, session_factory):
        batch = [candidate(i) for i in range(4)]
        await add_customer(db, email=batch[0].email)

        result = await bulk_create_customers(db, 4, StubGenerator(batch))

        async with session_factory() as other:
            for customer in result.created_customers:
                assert await customer_service.get_customer(other, customer.id) is not None

    async def test_counts_always_add_up(self, db: AsyncSession):
        batch = [candidate(i) for i in range(6)]
        for i in (0, 2, 4):
            await add_customer(db, email=batch[i].email)

        result = await bulk_create_customers(db, 6, StubGenerator(batch))

        assert result.success_count + result.failure_count == 6
        assert result.success_count == 3

    async def test_deleted_rows_do_not_block_their_email(self, db: AsyncSession):
        batch = [candidate(i) for i in range(2)]
        await add_customer(db, email=batch[0].email, is_deleted=True)

        result = await bulk_create_customers(db, 2, StubGenerator(batch))

        assert result.success_count == 2


class TestBulkCreateFallback:
    """Per-record retry when the bulk insert hits the unique index."""

    async def test_race_falls_back_to_one_record_at_a_time(self, db: AsyncSession):
        batch = [candidate(i) for i in range(10)]
        await add_customer(db, email=batch[1].email)
        await add_customer(db, email=batch[8].email)

        # Simulate rows appearing between the email check and the insert.
        with patch.object(
            customer_service, "get_existing_emails", AsyncMock(return_value=set())
        ):
            result = await bulk_create_customers(db, 10, StubGenerator(batch))

        assert result.success_count == 8
        assert result.failure_count == 2
        assert [e.index for e in result.errors] == [1, 8]
        assert all(c.name.startswith("Generated Person") for c in result.created_customers)
        _, total = await customer_service.search_customers(db, skip=0, take=100)
        assert total == 10


class TestBulkCreateStoreUnavailable:
    """An unreachable store fails the whole request instead of every record."""

    async def test_refused_connection_before_insert(self, db: AsyncSession):
        with patch.object(
            db, "execute", AsyncMock(side_effect=ConnectionRefusedError(111, "Connection refused"))
        ):
            with pytest.raises(StorageUnavailableError):
                await bulk_create_customers(db, 3, StubGenerator([candidate(i) for i in range(3)]))

    async def test_outage_during_record_by_record_retry(self, db: AsyncSession):
        batch = [candidate(i) for i in range(3)]
        await add_customer(db, email=batch[0].email)

        with (
            patch.object(customer_service, "get_existing_emails", AsyncMock(return_value=set())),
            patch.object(
                customer_service,
                "create_customer",
                AsyncMock(side_effect=StorageUnavailableError("Customer store is unavailable")),
            ),
        ):
            with pytest.raises(StorageUnavailableError):
                await bulk_create_customers(db, 3, StubGenerator(batch))
