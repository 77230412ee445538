"""Create categorias and produtos tables.

Revision ID: 20250201_01
Revises:
Create Date: 2025-02-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20250201_01"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "categorias",
        sa.Column("CategoriaId", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Nome", sa.String(length=80), nullable=False),
        sa.Column("ImageUrl", sa.String(length=300), nullable=False),
    )

    op.create_table(
        "produtos",
        sa.Column("ProdutoId", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Nome", sa.String(length=80), nullable=False),
        sa.Column("Descricao", sa.String(length=300), nullable=False),
        sa.Column("ImagemUrl", sa.String(length=300), nullable=False),
        sa.Column("Estoque", sa.Float(), nullable=False),
        sa.Column("DataCadastro", sa.DateTime(), nullable=False),
        sa.Column("CategoriaId", sa.Integer(), nullable=False),
        sa.Column(
            "Preco",
            sa.Numeric(precision=10, scale=2),
            nullable=False,
            server_default=sa.text("0.00"),
        ),
        sa.ForeignKeyConstraint(
            ["CategoriaId"],
            ["categorias.CategoriaId"],
            name=op.f("fk_produtos_CategoriaId_categorias"),
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_produtos_CategoriaId"), "produtos", ["CategoriaId"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_produtos_CategoriaId"), table_name="produtos")
    op.drop_table("produtos")
    op.drop_table("categorias")
