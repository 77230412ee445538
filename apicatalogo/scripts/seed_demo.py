"""Seed demo data for development."""

from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from apicatalogo.database import AsyncSessionLocal, init_db
from apicatalogo.models import Category, Product

DEMO_CATALOG = [
    {
        "name": "Bebidas",
        "image_url": "bebidas.jpg",
        "products": [
            {
                "name": "Coca-Cola Diet",
                "description": "Refrigerante de cola 350 ml",
                "price": Decimal("5.45"),
                "image_url": "cocacola.jpg",
                "stock": 50,
            },
        ],
    },
    {
        "name": "Lanches",
        "image_url": "lanches.jpg",
        "products": [
            {
                "name": "Lanche de Atum",
                "description": "Lanche de atum com maionese",
                "price": Decimal("8.50"),
                "image_url": "atum.jpg",
                "stock": 10,
            },
        ],
    },
    {
        "name": "Sobremesas",
        "image_url": "sobremesas.jpg",
        "products": [
            {
                "name": "Pudim 100 g",
                "description": "Pudim de leite condensado 100g",
                "price": Decimal("6.75"),
                "image_url": "pudim.jpg",
                "stock": 20,
            },
        ],
    },
]


async def seed_catalog(db: AsyncSession) -> int:
    """Insert the demo catalog unless categories already exist.

    Returns the number of categories created.
    """
    existing = await db.execute(select(Category.id).limit(1))
    if existing.first() is not None:
        print("Catalog already has categories, skipping seed")
        return 0

    for entry in DEMO_CATALOG:
        category = Category(name=entry["name"], image_url=entry["image_url"])
        db.add(category)
        await db.flush()
        print(f"Creating category {category.name}")
        for product_data in entry["products"]:
            db.add(Product(category_id=category.id, **product_data))

    await db.commit()
    return len(DEMO_CATALOG)


async def seed_demo_data() -> None:
    """Seed demo data into the configured database."""
    await init_db()
    async with AsyncSessionLocal() as db:
        await seed_catalog(db)


def main() -> None:
    asyncio.run(seed_demo_data())


if __name__ == "__main__":
    main()
