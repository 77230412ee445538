"""Request and response bodies for the catalog API.

Keys on the wire are camelCase Portuguese (``categoriaId``, ``nome``...).
Incoming bodies also accept the English attribute names as aliases.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def _field(portuguese: str, *english: str, **kwargs: object):
    return Field(
        validation_alias=AliasChoices(portuguese, *english),
        serialization_alias=portuguese,
        **kwargs,
    )


class _Schema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CategoryIn(_Schema):
    id: int | None = _field("categoriaId", "id", default=None)
    name: str = _field("nome", "name", max_length=80)
    image_url: str = _field("imagemUrl", "imageUrl", max_length=300)


class CategoryOut(_Schema):
    id: int = _field("categoriaId", "id")
    name: str = _field("nome", "name")
    image_url: str = _field("imagemUrl", "imageUrl")


class ProductIn(_Schema):
    id: int | None = _field("produtoId", "id", default=None)
    name: str = _field("nome", "name", max_length=80)
    description: str = _field("descricao", "description", max_length=300)
    price: Money = _field(
        "preco", "price", default=Decimal("0.00"), max_digits=10, decimal_places=2
    )
    image_url: str = _field("imagemUrl", "imageUrl", max_length=300)
    stock: float = _field("estoque", "stock")
    registered_at: datetime | None = _field(
        "dataCadastro", "registeredAt", default=None
    )
    category_id: int = _field("categoriaId", "categoryId")

    @field_validator("registered_at")
    @classmethod
    def registered_at_as_naive_utc(cls, value: datetime | None) -> datetime | None:
        # DataCadastro has no time zone; offsets are folded into UTC
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(UTC).replace(tzinfo=None)


class ProductOut(_Schema):
    id: int = _field("produtoId", "id")
    name: str = _field("nome", "name")
    description: str = _field("descricao", "description")
    price: Money = _field("preco", "price")
    image_url: str = _field("imagemUrl", "imageUrl")
    stock: float = _field("estoque", "stock")
    registered_at: datetime = _field("dataCadastro", "registeredAt")
    category_id: int = _field("categoriaId", "categoryId")


class CategoryWithProducts(CategoryOut):
    """A category together with a bounded slice of its products."""

    products: list[ProductOut] = _field("produtos", "products", default_factory=list)
