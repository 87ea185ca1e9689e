"""Terminal front end for the customer API.

Usage:
    customer-search search --search john --sort-by createdAt --sort-order desc
    customer-search show 3fa85f64-5717-4562-b3fc-2c963f66afa6
    customer-search create --name "Jane Doe" --email jane@mail.com
    customer-search generate 50
"""

import argparse
import asyncio
import sys
from typing import Any, TextIO

from app.client.customer_api import ApiError, CustomerApiClient

COLUMNS = (
    ("name", "Name", 24),
    ("email", "Email", 32),
    ("phone", "Phone", 16),
    ("createdAt", "Created", 19),
)


def _cell(value: Any, width: int) -> str:
    text = "" if value is None else str(value)
    if len(text) > width:
        text = text[: width - 1] + "…"
    return text.ljust(width)


def format_table(customers: list[dict[str, Any]]) -> str:
    """Render customers as a fixed-width table."""
    header = "  ".join(_cell(title, width) for _, title, width in COLUMNS)
    rule = "  ".join("-" * width for _, _, width in COLUMNS)
    rows = [
        "  ".join(_cell(customer.get(key), width) for key, _, width in COLUMNS)
        for customer in customers
    ]
    return "\n".join([header, rule, *rows])


def format_customer(customer: dict[str, Any]) -> str:
    """Render one customer as labelled lines."""
    fields = (
        ("ID", "id"),
        ("Name", "name"),
        ("Email", "email"),
        ("Phone", "phone"),
        ("Address", "address"),
        ("Created", "createdAt"),
        ("Updated", "updatedAt"),
    )
    return "\n".join(f"{label:<8} {customer.get(key) or '-'}" for label, key in fields)


def print_error(error: ApiError, err: TextIO) -> None:
    """Print an API error, including any field-level messages."""
    print(f"Error: {error.message}", file=err)
    for field, messages in (error.errors or {}).items():
        for message in messages:
            print(f"  {field}: {message}", file=err)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="customer-search", description="Search and manage customers"
    )
    parser.add_argument("--api-url", help="API base URL (defaults to API_BASE_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search customers")
    search.add_argument("--search", help="Text matched against name or email")
    search.add_argument("--email", help="Exact email")
    search.add_argument("--date-from", help="Created on or after (ISO 8601)")
    search.add_argument("--date-to", help="Created on or before (ISO 8601)")
    search.add_argument("--sort-by", choices=["name", "email", "createdAt"])
    search.add_argument("--sort-order", choices=["asc", "desc"])
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--page-size", type=int, default=10)

    show = subparsers.add_parser("show", help="Show one customer")
    show.add_argument("customer_id")

    for name, help_text in (("create", "Create a customer"), ("update", "Update a customer")):
        sub = subparsers.add_parser(name, help=help_text)
        if name == "update":
            sub.add_argument("customer_id")
        sub.add_argument("--name", required=True)
        sub.add_argument("--email", required=True)
        sub.add_argument("--phone")
        sub.add_argument("--address")

    delete = subparsers.add_parser("delete", help="Delete a customer")
    delete.add_argument("customer_id")

    generate = subparsers.add_parser("generate", help="Generate random customers")
    generate.add_argument("count", type=int)

    return parser


def _customer_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload = {"name": args.name, "email": args.email}
    if args.phone:
        payload["phone"] = args.phone
    if args.address:
        payload["address"] = args.address
    return payload


async def run(
    args: argparse.Namespace,
    client: CustomerApiClient,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
) -> int:
    """Execute a parsed command; returns the process exit code."""
    try:
        if args.command == "search":
            print("Searching...", file=err)
            result = await client.search_customers(
                search=args.search,
                email=args.email,
                page=args.page,
                page_size=args.page_size,
                sort_by=args.sort_by,
                sort_order=args.sort_order,
                date_from=args.date_from,
                date_to=args.date_to,
            )
            if not result["items"]:
                print("No customers found.", file=out)
                return 0
            print(format_table(result["items"]), file=out)
            print(
                f"\nPage {result['page']} of {result['totalPages']} "
                f"({result['totalCount']} customers)",
                file=out,
            )

        elif args.command == "show":
            print(format_customer(await client.get_customer(args.customer_id)), file=out)

        elif args.command == "create":
            customer = await client.create_customer(_customer_payload(args))
            print(f"Created customer {customer['id']}", file=out)

        elif args.command == "update":
            customer = await client.update_customer(args.customer_id, _customer_payload(args))
            print(f"Updated customer {customer['id']}", file=out)

        elif args.command == "delete":
            await client.delete_customer(args.customer_id)
            print(f"Deleted customer {args.customer_id}", file=out)

        elif args.command == "generate":
            print(f"Generating {args.count} customers...", file=err)
            result = await client.bulk_create_customers(args.count)
            print(
                f"Created {result['successCount']} customers, "
                f"{result['failureCount']} failed",
                file=out,
            )
            for error in result["errors"]:
                print(f"  #{error['index']}: {error['message']}", file=out)

    except ApiError as e:
        print_error(e, err)
        return 1

    return 0


async def _main(args: argparse.Namespace) -> int:
    async with CustomerApiClient(base_url=args.api_url) as client:
        return await run(args, client)


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
