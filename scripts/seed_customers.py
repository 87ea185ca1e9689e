"""Seed demo customers.

Creates ten demo customers (skipping any whose email is already in use) or,
with --random N, generates N random customers through the bulk create
service.

Run this after creating the database schema with Alembic.

Usage:
    python scripts/seed_customers.py
    python scripts/seed_customers.py --random 200
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from app.database import async_session_maker
from app.schemas.customer import CustomerCreate
from app.services import bulk_create as bulk_service
from app.services import customer as customer_service

DEMO_CUSTOMERS = [
    ("John Smith", "john.smith@email.com", "+1-555-0101", "123 Main St, New York, NY 10001, USA"),
    ("Emma Johnson", "emma.j@email.com", "+1-555-0102", "456 Oak Ave, Los Angeles, CA 90001, USA"),
    ("Michael Williams", "m.williams@email.com", "+1-555-0103", "789 Pine Rd, Chicago, IL 60601, USA"),
    ("Sophia Brown", "sophia.brown@email.com", "+1-555-0104", "321 Elm St, Houston, TX 77001, USA"),
    ("James Davis", "james.davis@email.com", "+1-555-0105", "654 Maple Dr, Phoenix, AZ 85001, USA"),
    ("Olivia Miller", "olivia.m@email.com", "+1-555-0106", "987 Cedar Ln, Philadelphia, PA 19101, USA"),
    ("William Wilson", "will.wilson@email.com", "+1-555-0107", "147 Birch Blvd, San Antonio, TX 78201, USA"),
    ("Ava Moore", "ava.moore@email.com", "+1-555-0108", "258 Spruce Way, San Diego, CA 92101, USA"),
    ("Robert Taylor", "rob.taylor@email.com", "+1-555-0109", "369 Willow Ct, Dallas, TX 75201, USA"),
    ("Isabella Anderson", "isabella.a@email.com", "+1-555-0110", "741 Ash Ter, San Jose, CA 95101, USA"),
]


async def seed_demo_customers():
    """Seed the demo customers."""
    async with async_session_maker() as db:
        try:
            print("🌱 Seeding demo customers...")
            created = 0
            for name, email, phone, address in DEMO_CUSTOMERS:
                if await customer_service.email_exists(db, email):
                    print(f"✅ Already exists: {name} <{email}>")
                    continue
                await customer_service.create_customer(
                    db, CustomerCreate(name=name, email=email, phone=phone, address=address)
                )
                print(f"➕ Created: {name} <{email}>")
                created += 1
            await db.commit()
            print(f"✅ Done - {created} customers created")

        except SQLAlchemyError as e:
            print(f"❌ Error seeding customers: {e}")
            await db.rollback()
            sys.exit(1)


async def seed_random_customers(count: int):
    """Generate random customers through the bulk create service."""
    async with async_session_maker() as db:
        print(f"🎲 Generating {count} random customers...")
        result = await bulk_service.bulk_create_customers(db, count)
        print(f"✅ Created {result.success_count}, failed {result.failure_count}")
        for error in result.errors:
            print(f"  #{error.index}: {error.message}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed demo customers")
    parser.add_argument(
        "--random",
        type=int,
        metavar="N",
        help="Generate N random customers instead of the demo set",
    )

    args = parser.parse_args()

    if args.random:
        asyncio.run(seed_random_customers(args.random))
    else:
        asyncio.run(seed_demo_customers())
