from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from apicatalogo.models import Category, Product
from apicatalogo.schemas import CategoryIn, ProductIn
from apicatalogo.services import catalog
from apicatalogo.services.catalog import EntityNotFoundError


def _product_in(category_id: int, name: str = "Suco") -> ProductIn:
    return ProductIn(
        name=name,
        description="Suco de laranja",
        price=Decimal("4.20"),
        image_url="suco.jpg",
        stock=12,
        category_id=category_id,
    )


@pytest.mark.asyncio
async def test_insert_and_get_category(session_factory: Any) -> None:
    async with session_factory() as db:
        category = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        assert category.id is not None

    async with session_factory() as db:
        fetched = await catalog.get_category(db, category.id)
        assert fetched is not None
        assert (fetched.name, fetched.image_url) == ("Bebidas", "b.jpg")
        assert await catalog.get_category(db, category.id + 100) is None


@pytest.mark.asyncio
async def test_reads_are_untracked_unless_requested(session_factory: Any) -> None:
    async with session_factory() as db:
        db.add(Category(name="Bebidas", image_url="b.jpg"))
        await db.commit()

    async with session_factory() as db:
        categories = await catalog.get_all_categories(db)
        assert len(categories) == 1
        assert categories[0] not in db

        untracked = await catalog.get_category(db, categories[0].id)
        assert untracked is not None
        assert untracked not in db

        tracked = await catalog.get_category(db, categories[0].id, track=True)
        assert tracked in db


@pytest.mark.asyncio
async def test_update_missing_rows_raise(session_factory: Any) -> None:
    async with session_factory() as db:
        with pytest.raises(EntityNotFoundError) as excinfo:
            await catalog.update_category(
                db, 7, CategoryIn(id=7, name="Nada", image_url="n.jpg")
            )
        assert excinfo.value.entity_id == 7
        assert excinfo.value.model is Category

        with pytest.raises(EntityNotFoundError):
            await catalog.update_product(db, 3, _product_in(1))


@pytest.mark.asyncio
async def test_insert_product_requires_existing_category(session_factory: Any) -> None:
    async with session_factory() as db:
        with pytest.raises(IntegrityError):
            await catalog.insert_product(db, _product_in(404))


@pytest.mark.asyncio
async def test_foreign_keys_are_enforced(session_factory: Any) -> None:
    async with session_factory() as db:
        result = await db.execute(text("PRAGMA foreign_keys"))
        assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_delete_category_cascades(session_factory: Any) -> None:
    async with session_factory() as db:
        keep = await catalog.insert_category(
            db, CategoryIn(name="Lanches", image_url="l.jpg")
        )
        drop = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        await catalog.insert_product(db, _product_in(drop.id, "Suco"))
        await catalog.insert_product(db, _product_in(drop.id, "Chá"))
        kept = await catalog.insert_product(db, _product_in(keep.id, "Misto"))

    async with session_factory() as db:
        category = await catalog.get_category(db, drop.id, track=True)
        await catalog.delete_category(db, category)

    async with session_factory() as db:
        result = await db.execute(select(Product.id))
        assert result.scalars().all() == [kept.id]
        assert await catalog.get_category(db, drop.id) is None


@pytest.mark.asyncio
async def test_categories_with_products_orders_by_id(session_factory: Any) -> None:
    async with session_factory() as db:
        category = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        inserted = [
            await catalog.insert_product(db, _product_in(category.id, f"P{i}"))
            for i in range(4)
        ]

    async with session_factory() as db:
        rows = await catalog.get_categories_with_products(db, limit=3)

    assert len(rows) == 1
    loaded_category, products = rows[0]
    assert loaded_category.id == category.id
    assert [product.id for product in products] == [p.id for p in inserted[:3]]


@pytest.mark.asyncio
async def test_update_product_keeps_registration_date(session_factory: Any) -> None:
    async with session_factory() as db:
        category = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        product = await catalog.insert_product(db, _product_in(category.id))
        registered_at = product.registered_at

    async with session_factory() as db:
        data = _product_in(category.id, "Suco de uva")
        updated = await catalog.update_product(db, product.id, data)
        assert updated.name == "Suco de uva"
        assert updated.registered_at == registered_at


@pytest.mark.asyncio
async def test_count_rows(session_factory: Any) -> None:
    async with session_factory() as db:
        category = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        await catalog.insert_product(db, _product_in(category.id))
        counts = await catalog.count_rows(db, [Category, Product])

    assert counts == {"categorias": 1, "produtos": 1}


@pytest.mark.asyncio
async def test_update_product_ignores_category_change(session_factory: Any) -> None:
    async with session_factory() as db:
        first = await catalog.insert_category(
            db, CategoryIn(name="Bebidas", image_url="b.jpg")
        )
        second = await catalog.insert_category(
            db, CategoryIn(name="Lanches", image_url="l.jpg")
        )
        product = await catalog.insert_product(db, _product_in(first.id))

    async with session_factory() as db:
        await catalog.update_product(db, product.id, _product_in(second.id, "Chá"))

    async with session_factory() as db:
        stored = await db.get(Product, product.id)
        assert stored.name == "Chá"
        assert stored.category_id == first.id


def test_product_in_folds_offsets_into_utc() -> None:
    data = ProductIn.model_validate(
        {
            "nome": "Suco",
            "descricao": "Suco",
            "imagemUrl": "s.jpg",
            "estoque": 1,
            "categoriaId": 1,
            "dataCadastro": "2024-01-01T01:30:00-02:00",
        }
    )
    assert data.registered_at == datetime(2024, 1, 1, 3, 30)
    assert data.registered_at.tzinfo is None
