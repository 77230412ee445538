"""Product routes."""

from typing import Annotated

from fastapi import (
    APIRouter,
    Body,
    Depends,
    HTTPException,
    Path,
    Request,
    Response,
    status,
)
from sqlalchemy.ext.asyncio import AsyncSession

from apicatalogo.database import get_db
from apicatalogo.schemas import ProductIn, ProductOut
from apicatalogo.services import catalog
from apicatalogo.services.catalog import EntityNotFoundError

router = APIRouter(prefix="/Produtos", tags=["produtos"])

ProductId = Annotated[int, Path(ge=1)]


def _not_found(product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Produto com id={product_id} não encontrado",
    )


def _bad_request() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="Dados inválidos"
    )


@router.get("", response_model=list[ProductOut])
async def list_products(db: AsyncSession = Depends(get_db)) -> list[ProductOut]:
    """List every product."""
    products = await catalog.get_all_products(db)
    return [ProductOut.model_validate(product) for product in products]


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: ProductId, db: AsyncSession = Depends(get_db)
) -> ProductOut:
    """Fetch a single product."""
    product = await catalog.get_product(db, product_id)
    if product is None:
        raise _not_found(product_id)
    return ProductOut.model_validate(product)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    response: Response,
    payload: Annotated[ProductIn | None, Body()] = None,
    db: AsyncSession = Depends(get_db),
) -> ProductOut:
    """Create a product.

    An unknown ``categoriaId`` is rejected by the database's foreign key and
    surfaces as a server error.
    """
    if payload is None:
        raise _bad_request()

    product = await catalog.insert_product(db, payload)
    response.headers["Location"] = str(
        request.url_for("get_product", product_id=product.id)
    )
    return ProductOut.model_validate(product)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: ProductId,
    payload: Annotated[ProductIn | None, Body()] = None,
    db: AsyncSession = Depends(get_db),
) -> ProductOut:
    """Replace a product's mutable fields."""
    if payload is None or payload.id != product_id:
        raise _bad_request()

    try:
        product = await catalog.update_product(db, product_id, payload)
    except EntityNotFoundError as exc:
        raise _not_found(product_id) from exc
    return ProductOut.model_validate(product)


@router.delete("/{product_id}", response_model=ProductOut)
async def delete_product(
    product_id: ProductId, db: AsyncSession = Depends(get_db)
) -> ProductOut:
    """Delete a product."""
    product = await catalog.get_product(db, product_id, track=True)
    if product is None:
        raise _not_found(product_id)

    deleted = ProductOut.model_validate(product)
    await catalog.delete_product(db, product)
    return deleted
