"""CLI tool for API Catálogo."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from apicatalogo.database import AsyncSessionLocal, init_db
from apicatalogo.models import Category, Product
from apicatalogo.services import catalog

API_ENDPOINTS = {
    "categorias": "/Categorias",
    "categorias-produtos": "/Categorias/produtos",
    "produtos": "/Produtos",
}


async def list_categories() -> None:
    """List all categories."""
    await init_db()
    async with AsyncSessionLocal() as session:
        for category in await catalog.get_all_categories(session):
            print(f"ID: {category.id}, Nome: {category.name}")


async def list_products() -> None:
    """List all products."""
    await init_db()
    async with AsyncSessionLocal() as session:
        for product in await catalog.get_all_products(session):
            print(
                f"ID: {product.id}, Nome: {product.name}, "
                f"Preço: {product.price}, Categoria: {product.category_id}"
            )


async def delete_category(category_id: int) -> bool:
    """Delete a category and, through the cascade, its products."""
    await init_db()
    async with AsyncSessionLocal() as session:
        category = await catalog.get_category(session, category_id, track=True)
        if category is None:
            print(f"Category {category_id} not found.", file=sys.stderr)
            return False
        await catalog.delete_category(session, category)
        print(f"Deleted category {category_id}")
        return True


async def delete_product(product_id: int) -> bool:
    """Delete a product."""
    await init_db()
    async with AsyncSessionLocal() as session:
        product = await catalog.get_product(session, product_id, track=True)
        if product is None:
            print(f"Product {product_id} not found.", file=sys.stderr)
            return False
        await catalog.delete_product(session, product)
        print(f"Deleted product {product_id}")
        return True


async def show_stats() -> None:
    """Print row counts per table."""
    await init_db()
    async with AsyncSessionLocal() as session:
        counts = await catalog.count_rows(session, [Category, Product])
    for table, count in counts.items():
        print(f"{table}: {count}")


async def api_request(url: str, endpoint: str) -> None:
    """Fetch ``endpoint`` from a running server and pretty-print it."""
    async with httpx.AsyncClient() as client:
        resp = await client.get(
            f"{url}{endpoint}", headers={"Accept": "application/json"}
        )

    if resp.status_code == 200:
        try:
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
        except json.JSONDecodeError:
            print(resp.text)
    else:
        print(f"Error: {resp.status_code}", file=sys.stderr)
        print(resp.text, file=sys.stderr)


def main() -> None:
    parser = argparse.ArgumentParser(description="API Catálogo CLI tool.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Categories
    category_parser = subparsers.add_parser("categories", help="Manage categories")
    category_subparsers = category_parser.add_subparsers(
        dest="category_command", required=True
    )
    category_subparsers.add_parser("list", help="List all categories")
    category_delete = category_subparsers.add_parser(
        "delete", help="Delete a category and its products"
    )
    category_delete.add_argument("id", type=int, help="Category id")

    # Products
    product_parser = subparsers.add_parser("products", help="Manage products")
    product_subparsers = product_parser.add_subparsers(
        dest="product_command", required=True
    )
    product_subparsers.add_parser("list", help="List all products")
    product_delete = product_subparsers.add_parser("delete", help="Delete a product")
    product_delete.add_argument("id", type=int, help="Product id")

    subparsers.add_parser("stats", help="Show row counts")

    # API interaction
    api_parser = subparsers.add_parser("api", help="Query a running server")
    api_parser.add_argument("--url", default="http://localhost:5000", help="API URL")
    api_parser.add_argument("resource", choices=sorted(API_ENDPOINTS))

    args = parser.parse_args()

    if args.command == "categories":
        if args.category_command == "list":
            asyncio.run(list_categories())
        elif args.category_command == "delete":
            if not asyncio.run(delete_category(args.id)):
                sys.exit(1)

    elif args.command == "products":
        if args.product_command == "list":
            asyncio.run(list_products())
        elif args.product_command == "delete":
            if not asyncio.run(delete_product(args.id)):
                sys.exit(1)

    elif args.command == "stats":
        asyncio.run(show_stats())

    elif args.command == "api":
        asyncio.run(api_request(args.url, API_ENDPOINTS[args.resource]))


if __name__ == "__main__":
    main()
