"""Category model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from apicatalogo.models.base import Base


class Category(Base):
    """Top-level grouping of products.

    Products are not mapped as a collection here; they are looked up by
    ``Product.category_id`` when a caller needs them.
    """

    __tablename__ = "categorias"

    id: Mapped[int] = mapped_column("CategoriaId", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("Nome", String(80), nullable=False)
    image_url: Mapped[str] = mapped_column("ImageUrl", String(300), nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"
