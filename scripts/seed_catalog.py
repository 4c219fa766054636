#!/usr/bin/env python3
"""Seed product catalog script.

Creates the database tables and seeds a small deterministic catalog of
categories and products through the catalog services.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --clear
    python scripts/seed_catalog.py --database-url sqlite+aiosqlite:///./dev.db
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from storefront.catalog.admin import ProductAdminService, parse_product_form
from storefront.catalog.categories import CategoryService
from storefront.catalog.models import Category, Product
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import Base, create_engine, create_session_factory
from storefront.infrastructure.logging import configure_logging
import storefront.orders.models  # noqa: F401

CATALOG: dict[str, list[dict[str, str]]] = {
    "Electronics": [
        {"name": "Laptop", "description": "14 inch ultrabook, 16GB RAM", "price": "1299.99", "quantity": "12", "shipping": "yes"},
        {"name": "Smartphone", "description": "6.1 inch OLED display", "price": "799", "quantity": "30", "shipping": "yes"},
        {"name": "Wireless Headphones", "description": "Noise cancelling, 30h battery", "price": "199.5", "quantity": "45", "shipping": "yes"},
        {"name": "USB-C Charger", "description": "65W fast charger", "price": "39.99", "quantity": "100", "shipping": "yes"},
    ],
    "Books": [
        {"name": "The Pragmatic Programmer", "description": "Classic software engineering book", "price": "42", "quantity": "20", "shipping": "yes"},
        {"name": "Clean Architecture", "description": "Software structure and design", "price": "35.5", "quantity": "15", "shipping": "yes"},
        {"name": "Python Cookbook", "description": "Recipes for mastering Python", "price": "49.99", "quantity": "8", "shipping": "no"},
    ],
    "Home & Kitchen": [
        {"name": "Coffee Grinder", "description": "Burr grinder with 15 settings", "price": "89", "quantity": "25", "shipping": "yes"},
        {"name": "Chef Knife", "description": "8 inch stainless steel", "price": "59.9", "quantity": "40", "shipping": "yes"},
        {"name": "Cast Iron Pan", "description": "Pre-seasoned 12 inch skillet", "price": "34", "quantity": "0", "shipping": "no"},
    ],
}


async def create_tables(engine) -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def clear_catalog(session_factory) -> None:
    """Delete every product and category."""
    async with session_factory() as session:
        await session.execute(delete(Product))
        await session.execute(delete(Category))
        await session.commit()


async def seed_catalog(session_factory) -> dict:
    """Seed categories and their products.

    Categories that already exist are reused, so running the script
    twice adds a second copy of each product under a suffixed slug.

    Returns:
        Seeding result.
    """
    categories_created = 0
    products_created = 0

    async with session_factory() as session:
        categories = CategoryService(session)
        products = ProductAdminService(session, slug_retry_limit=settings.slug_retry_limit)

        existing = {c.name: c for c in await categories.list_categories()}
        for category_name, items in CATALOG.items():
            category = existing.get(category_name)
            if category is None:
                category = await categories.create_category(category_name)
                categories_created += 1

            for item in items:
                draft = parse_product_form({**item, "category": category.id})
                await products.create_product(draft)
                products_created += 1

    return {
        "categories_created": categories_created,
        "products_created": products_created,
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront product catalog",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="Database URL (default: DATABASE_URL from the environment)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing products and categories before seeding",
    )

    args = parser.parse_args()

    configure_logging(settings.log_level, json_output=False)

    engine = create_engine(args.database_url)
    session_factory = create_session_factory(engine)

    try:
        print("Creating database tables...")
        await create_tables(engine)

        if args.clear:
            print("Clearing existing catalog...")
            await clear_catalog(session_factory)

        result = await seed_catalog(session_factory)
        print(
            f"  Created {result['categories_created']} categories, "
            f"{result['products_created']} products"
        )
        print("\nSeeding complete!")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
