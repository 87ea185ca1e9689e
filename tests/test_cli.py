"""Tests for the customer-search command line front end."""

import io
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.client.cli import build_parser, format_table, run
from app.client.customer_api import ApiError, CustomerApiClient

pytestmark = pytest.mark.asyncio

JOHN = {
    "id": "6f1c3a52-4d2b-4c89-9a57-3f8c2b8e0a11",
    "name": "John Smith",
    "email": "john.smith@mail.com",
    "phone": "+1-555-123-4567",
    "address": None,
    "createdAt": "2026-01-15T10:30:00Z",
    "updatedAt": "2026-01-15T10:30:00Z",
}


def fake_client(**methods) -> MagicMock:
    client = MagicMock(spec=CustomerApiClient)
    for name, value in methods.items():
        setattr(client, name, value)
    return client


async def invoke(argv: list[str], client: MagicMock) -> tuple[int, str, str]:
    out, err = io.StringIO(), io.StringIO()
    code = await run(build_parser().parse_args(argv), client, out, err)
    return code, out.getvalue(), err.getvalue()


class TestSearchCommand:
    async def test_empty_result(self):
        client = fake_client(
            search_customers=AsyncMock(
                return_value={"items": [], "totalCount": 0, "page": 1, "pageSize": 10, "totalPages": 0}
            )
        )

        code, out, _ = await invoke(["search", "--search", "nobody"], client)

        assert code == 0
        assert out.strip() == "No customers found."

    async def test_table_and_page_summary(self):
        client = fake_client(
            search_customers=AsyncMock(
                return_value={"items": [JOHN], "totalCount": 11, "page": 2, "pageSize": 10, "totalPages": 2}
            )
        )

        code, out, _ = await invoke(
            ["search", "--sort-by", "createdAt", "--sort-order", "desc", "--page", "2"], client
        )

        assert code == 0
        assert "John Smith" in out
        assert "john.smith@mail.com" in out
        assert "Page 2 of 2 (11 customers)" in out
        kwargs = client.search_customers.await_args.kwargs
        assert kwargs["sort_by"] == "createdAt"
        assert kwargs["sort_order"] == "desc"
        assert kwargs["page"] == 2

    async def test_invalid_sort_field_is_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["search", "--sort-by", "phone"])


class TestWriteCommands:
    async def test_create_prints_new_id(self):
        client = fake_client(create_customer=AsyncMock(return_value=JOHN))

        code, out, _ = await invoke(
            ["create", "--name", "John Smith", "--email", "john.smith@mail.com"], client
        )

        assert code == 0
        assert JOHN["id"] in out
        client.create_customer.assert_awaited_once_with(
            {"name": "John Smith", "email": "john.smith@mail.com"}
        )

    async def test_validation_error_prints_fields_and_fails(self):
        error = ApiError(
            "One or more validation errors occurred.",
            status=400,
            errors={"email": ["value is not a valid email address"]},
        )
        client = fake_client(create_customer=AsyncMock(side_effect=error))

        code, out, err = await invoke(["create", "--name", "John", "--email", "bad"], client)

        assert code == 1
        assert out == ""
        assert "Error: One or more validation errors occurred." in err
        assert "  email: value is not a valid email address" in err

    async def test_delete(self):
        client = fake_client(delete_customer=AsyncMock(return_value=None))

        code, out, _ = await invoke(["delete", JOHN["id"]], client)

        assert code == 0
        assert f"Deleted customer {JOHN['id']}" in out

    async def test_show_missing_customer(self):
        client = fake_client(
            get_customer=AsyncMock(side_effect=ApiError("Customer 1 not found", status=404))
        )

        code, _, err = await invoke(["show", "1"], client)

        assert code == 1
        assert "Error: Customer 1 not found" in err


class TestGenerateCommand:
    async def test_reports_counts_and_failures(self):
        client = fake_client(
            bulk_create_customers=AsyncMock(
                return_value={
                    "successCount": 8,
                    "failureCount": 2,
                    "createdCustomers": [],
                    "errors": [
                        {"index": 3, "message": "A customer with email a@mail.com already exists"},
                        {"index": 7, "message": "A customer with email b@mail.com already exists"},
                    ],
                }
            )
        )

        code, out, _ = await invoke(["generate", "10"], client)

        assert code == 0
        assert "Created 8 customers, 2 failed" in out
        assert "  #3: A customer with email a@mail.com already exists" in out
        client.bulk_create_customers.assert_awaited_once_with(10)


class TestFormatting:
    async def test_long_values_are_truncated(self):
        table = format_table([{**JOHN, "name": "N" * 40}])
        row = table.splitlines()[2]
        assert "N" * 40 not in row
        assert row.startswith("N" * 23 + "…")
