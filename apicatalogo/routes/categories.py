"""Category routes."""

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

from apicatalogo.config import config
from apicatalogo.database import get_db
from apicatalogo.schemas import (
    CategoryIn,
    CategoryOut,
    CategoryWithProducts,
    ProductOut,
)
from apicatalogo.services import catalog
from apicatalogo.services.catalog import EntityNotFoundError

router = APIRouter(prefix="/Categorias", tags=["categorias"])

CategoryId = Annotated[int, Path(ge=1)]


def _not_found(category_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Categoria com id={category_id} não encontrada",
    )


@router.get("", response_model=list[CategoryOut])
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryOut]:
    """List every category."""
    categories = await catalog.get_all_categories(db)
    return [CategoryOut.model_validate(category) for category in categories]


@router.get("/produtos", response_model=list[CategoryWithProducts])
async def list_categories_with_products(
    db: AsyncSession = Depends(get_db),
) -> list[CategoryWithProducts]:
    """List every category with the first few of its products."""
    rows = await catalog.get_categories_with_products(
        db, limit=config.PRODUCTS_PER_CATEGORY
    )
    return [
        CategoryWithProducts(
            id=category.id,
            name=category.name,
            image_url=category.image_url,
            products=[ProductOut.model_validate(product) for product in products],
        )
        for category, products in rows
    ]


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(
    category_id: CategoryId, db: AsyncSession = Depends(get_db)
) -> CategoryOut:
    """Fetch a single category."""
    category = await catalog.get_category(db, category_id)
    if category is None:
        raise _not_found(category_id)
    return CategoryOut.model_validate(category)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    response: Response,
    payload: Annotated[CategoryIn | None, Body()] = None,
    db: AsyncSession = Depends(get_db),
) -> CategoryOut:
    """Create a category and point ``Location`` at it."""
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Dados inválidos"
        )

    category = await catalog.insert_category(db, payload)
    response.headers["Location"] = str(
        request.url_for("get_category", category_id=category.id)
    )
    return CategoryOut.model_validate(category)


@router.put("/{category_id}", response_model=CategoryOut)
async def update_category(
    category_id: CategoryId,
    payload: Annotated[CategoryIn | None, Body()] = None,
    db: AsyncSession = Depends(get_db),
) -> CategoryOut:
    """Replace a category's name and image."""
    if payload is None or payload.id != category_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Dados inválidos"
        )

    try:
        category = await catalog.update_category(db, category_id, payload)
    except EntityNotFoundError as exc:
        raise _not_found(category_id) from exc
    return CategoryOut.model_validate(category)


@router.delete("/{category_id}", response_model=CategoryOut)
async def delete_category(
    category_id: CategoryId, db: AsyncSession = Depends(get_db)
) -> CategoryOut:
    """Delete a category together with its products."""
    category = await catalog.get_category(db, category_id, track=True)
    if category is None:
        raise _not_found(category_id)

    deleted = CategoryOut.model_validate(category)
    await catalog.delete_category(db, category)
    return deleted
