"""Product model."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from apicatalogo.models.base import Base


def utcnow() -> datetime:
    """Current UTC time without tzinfo, as stored in ``DataCadastro``."""
    return datetime.now(UTC).replace(tzinfo=None)


class Product(Base):
    """A catalog item owned by exactly one category."""

    __tablename__ = "produtos"

    id: Mapped[int] = mapped_column("ProdutoId", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("Nome", String(80), nullable=False)
    description: Mapped[str] = mapped_column("Descricao", String(300), nullable=False)
    image_url: Mapped[str] = mapped_column("ImagemUrl", String(300), nullable=False)
    stock: Mapped[float] = mapped_column("Estoque", Float, nullable=False)
    registered_at: Mapped[datetime] = mapped_column(
        "DataCadastro",
        DateTime,
        nullable=False,
        default=utcnow,
    )
    category_id: Mapped[int] = mapped_column(
        "CategoriaId",
        Integer,
        ForeignKey("categorias.CategoriaId", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    price: Mapped[Decimal] = mapped_column(
        "Preco",
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        server_default=text("0.00"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name!r})>"
