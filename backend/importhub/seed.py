#!/usr/bin/env python3
"""
Creates the tables and loads the sample users, suppliers and products.

Usage:
    python -m importhub.seed                  # tables + sample data
    python -m importhub.seed --schema-only    # tables only
    python -m importhub.seed --token admin    # also print a 24h token for that user
"""
import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from typing import Optional

from sqlalchemy import select

from importhub.config import settings
from importhub.core.auth import create_access_token
from importhub.core.logging_config import configure_logging
from importhub.database import Database, transaction
from importhub.model.product import Product
from importhub.model.supplier import Supplier
from importhub.model.user import User

logger = logging.getLogger("importhub.seed")

# passwords are managed by the users service; this hash matches no real password
PLACEHOLDER_HASH = "$2a$10$rQ4Q4Q4Q4Q4Q4Q4Q4Q4Q4."

SAMPLE_USERS = [
    {"username": "admin", "email": "admin@imports.com", "role": "admin"},
    {"username": "importer1", "email": "importer1@company.com", "role": "user"},
]

SAMPLE_SUPPLIERS = [
    {"name": "Tech Supplies China", "country": "China", "contact_email": "contact@techsupplies.cn",
     "phone": "+86-138-0013-8000", "address": "Shenzhen, Guangdong"},
    {"name": "European Electronics", "country": "Germany", "contact_email": "sales@euroelectronics.de",
     "phone": "+49-30-12345678", "address": "Berlin, Germany"},
    {"name": "Global Components", "country": "Taiwan", "contact_email": "info@globalcomp.tw",
     "phone": "+886-2-1234-5678", "address": "Taipei, Taiwan"},
]

# supplier given by position in SAMPLE_SUPPLIERS
SAMPLE_PRODUCTS = [
    {"name": "Smartphone XYZ", "description": "High-end smartphone", "price": Decimal("299.99"),
     "category": "Electronics", "supplier": 0, "stock": 50, "hs_code": "8517.12.00", "weight": Decimal("0.18")},
    {"name": "Laptop ABC", "description": "Professional laptop", "price": Decimal("899.99"),
     "category": "Electronics", "supplier": 1, "stock": 25, "hs_code": "8471.30.01", "weight": Decimal("2.10")},
    {"name": "Tablet DEF", "description": "General purpose tablet", "price": Decimal("199.99"),
     "category": "Electronics", "supplier": 0, "stock": 30, "hs_code": "8471.30.02", "weight": Decimal("0.50")},
    {"name": "Headphones GHI", "description": "Wireless headphones", "price": Decimal("89.99"),
     "category": "Accessories", "supplier": 2, "stock": 100, "hs_code": "8518.30.00", "weight": Decimal("0.25")},
]


async def seed(database: Database, schema_only: bool = False) -> None:
    await database.create_all()
    if schema_only:
        return

    async with database.session() as session:
        async with transaction(session):
            for data in SAMPLE_USERS:
                exists = await session.scalar(select(User.id).where(User.username == data["username"]))
                if exists is None:
                    session.add(User(password=PLACEHOLDER_HASH, **data))

            suppliers = []
            for data in SAMPLE_SUPPLIERS:
                supplier = await session.scalar(select(Supplier).where(Supplier.name == data["name"]))
                if supplier is None:
                    supplier = Supplier(**data)
                    session.add(supplier)
                suppliers.append(supplier)
            await session.flush()

            for data in SAMPLE_PRODUCTS:
                fields = dict(data)
                supplier = suppliers[fields.pop("supplier")]
                exists = await session.scalar(select(Product.id).where(Product.name == fields["name"]))
                if exists is None:
                    session.add(Product(supplier_id=supplier.id, **fields))

    logger.info("Sample data loaded into %s", database.url)


async def token_for(database: Database, username: str) -> Optional[str]:
    async with database.session() as session:
        user = await session.scalar(select(User).where(User.username == username))
    if user is None:
        return None
    return create_access_token(user.id, settings, username=user.username, role=user.role)


async def _main(args: argparse.Namespace) -> int:
    database = Database(args.database_url or settings.database_url)
    try:
        await seed(database, schema_only=args.schema_only)
        if args.token:
            token = await token_for(database, args.token)
            if token is None:
                logger.error("User not found: %s", args.token)
                return 1
            print(token)
    finally:
        await database.dispose()
    return 0


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialise the imports database")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--schema-only", action="store_true", help="Create tables without sample data")
    parser.add_argument("--token", metavar="USERNAME", help="Print an access token for USERNAME")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    configure_logging(settings)
    return asyncio.run(_main(parse_arguments(argv)))


if __name__ == "__main__":
    sys.exit(main())
