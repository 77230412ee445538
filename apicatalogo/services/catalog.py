"""Persistence helpers for categories and products.

Every function takes the request's :class:`AsyncSession`. Store errors are
not caught here; the session scope rolls back and the error propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from apicatalogo.models import Base, Category, Product
from apicatalogo.models.product import utcnow
from apicatalogo.schemas import CategoryIn, ProductIn

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityNotFoundError(LookupError):
    """Raised when a write targets a row that does not exist."""

    def __init__(self, model: type[Base], entity_id: int) -> None:
        super().__init__(f"{model.__name__} {entity_id} does not exist")
        self.model = model
        self.entity_id = entity_id


def _untracked(db: AsyncSession, entities: Iterable[ModelT]) -> list[ModelT]:
    """Detach read results so the session does not watch them for changes."""
    detached = []
    for entity in entities:
        db.expunge(entity)
        detached.append(entity)
    return detached


async def _get_all(db: AsyncSession, model: type[ModelT]) -> list[ModelT]:
    result = await db.execute(select(model).order_by(model.id))
    rows = _untracked(db, result.scalars().all())
    logger.debug("Loaded %d %s rows", len(rows), model.__tablename__)
    return rows


async def _get_by_id(
    db: AsyncSession, model: type[ModelT], entity_id: int, *, track: bool
) -> ModelT | None:
    entity = await db.get(model, entity_id)
    if entity is not None and not track:
        db.expunge(entity)
    return entity


async def _insert(db: AsyncSession, entity: ModelT) -> ModelT:
    db.add(entity)
    await db.commit()
    await db.refresh(entity)
    logger.info("Created %s %s", type(entity).__name__.lower(), entity.id)
    return entity


async def _delete(db: AsyncSession, entity: Base) -> None:
    entity_id = entity.id
    await db.delete(entity)
    await db.commit()
    logger.info("Deleted %s %s", type(entity).__name__.lower(), entity_id)


# Categories


async def get_all_categories(db: AsyncSession) -> list[Category]:
    """Return every category ordered by id."""
    return await _get_all(db, Category)


async def get_category(
    db: AsyncSession, category_id: int, *, track: bool = False
) -> Category | None:
    """Return the category with ``category_id`` or ``None``."""
    return await _get_by_id(db, Category, category_id, track=track)


async def get_categories_with_products(
    db: AsyncSession, limit: int = 5
) -> list[tuple[Category, list[Product]]]:
    """Return every category with at most ``limit`` of its products.

    Products are ranked per category by ascending id and fetched in the
    same statement as their categories.
    """
    ranked = select(
        Product,
        func.row_number()
        .over(partition_by=Product.category_id, order_by=Product.id)
        .label("position"),
    ).subquery()
    ranked_product = aliased(Product, ranked)

    stmt = (
        select(Category, ranked_product)
        .outerjoin(
            ranked_product,
            and_(
                ranked_product.category_id == Category.id,
                ranked.c.position <= limit,
            ),
        )
        .order_by(Category.id, ranked_product.id)
    )
    result = await db.execute(stmt)

    grouped: dict[int, tuple[Category, list[Product]]] = {}
    for category, product in result.all():
        _, products = grouped.setdefault(category.id, (category, []))
        if product is not None:
            products.append(product)

    db.expunge_all()
    return list(grouped.values())


async def insert_category(db: AsyncSession, data: CategoryIn) -> Category:
    """Persist a new category and return it with its generated id."""
    category = Category(name=data.name, image_url=data.image_url)
    return await _insert(db, category)


async def update_category(
    db: AsyncSession, category_id: int, data: CategoryIn
) -> Category:
    """Replace the mutable fields of an existing category."""
    category = await db.get(Category, category_id)
    if category is None:
        raise EntityNotFoundError(Category, category_id)

    category.name = data.name
    category.image_url = data.image_url
    await db.commit()
    logger.info("Updated category %s", category_id)
    return category


async def delete_category(db: AsyncSession, category: Category) -> None:
    """Delete a category; its products go with it through the FK cascade."""
    await _delete(db, category)


# Products


async def get_all_products(db: AsyncSession) -> list[Product]:
    """Return every product ordered by id."""
    return await _get_all(db, Product)


async def get_product(
    db: AsyncSession, product_id: int, *, track: bool = False
) -> Product | None:
    """Return the product with ``product_id`` or ``None``."""
    return await _get_by_id(db, Product, product_id, track=track)


def _apply_product_fields(product: Product, data: ProductIn) -> None:
    product.name = data.name
    product.description = data.description
    product.price = data.price
    product.image_url = data.image_url
    product.stock = data.stock
    if data.registered_at is not None:
        product.registered_at = data.registered_at


async def insert_product(db: AsyncSession, data: ProductIn) -> Product:
    """Persist a new product and return it with its generated id."""
    product = Product(category_id=data.category_id, registered_at=utcnow())
    _apply_product_fields(product, data)
    return await _insert(db, product)


async def update_product(
    db: AsyncSession, product_id: int, data: ProductIn
) -> Product:
    """Replace the mutable fields of an existing product.

    The owning category is fixed at creation; ``data.category_id`` is ignored.
    """
    product = await db.get(Product, product_id)
    if product is None:
        raise EntityNotFoundError(Product, product_id)

    _apply_product_fields(product, data)
    await db.commit()
    logger.info("Updated product %s", product_id)
    return product


async def delete_product(db: AsyncSession, product: Product) -> None:
    """Delete a single product."""
    await _delete(db, product)


async def count_rows(
    db: AsyncSession, models: Sequence[type[Base]]
) -> dict[str, int]:
    """Return the number of rows per table for ``models``."""
    counts: dict[str, int] = {}
    for model in models:
        result = await db.execute(select(func.count()).select_from(model))
        counts[model.__tablename__] = result.scalar_one()
    return counts
