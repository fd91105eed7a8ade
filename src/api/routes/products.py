"""Product API Routes"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_user
from src.api.error import raise_for_error
from src.app.use_cases.auth import AuthUserDTO
from src.app.use_cases.catalog import (
    CreateProduct,
    CreateProductCommandDTO,
    DeleteProduct,
    GetPopularProducts,
    GetProduct,
    ListProducts,
    ProductDTO,
    SearchProducts,
    UpdateProduct,
    UpdateProductCommandDTO,
)
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductDTO])
async def list_products(
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await ListProducts(SqlAlchemyProductRepository(session)).execute(current_user.user_id)
    return result.value


@router.post("", response_model=ProductDTO, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: CreateProductCommandDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Add a product.

    **Returns:**
    - 201: Product created
    - 400: Rate is not a percentage
    - 409: A product with this name already exists
    """
    use_case = CreateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(current_user.user_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/search", response_model=List[ProductDTO])
async def search_products(
    q: str = Query("", max_length=255),
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await SearchProducts(SqlAlchemyProductRepository(session)).execute(current_user.user_id, q)
    return result.value


@router.get("/popular", response_model=List[ProductDTO])
async def popular_products(
    limit: int = Query(10, ge=1, le=100),
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Products ordered by how often they appear on the caller's invoices."""
    result = await GetPopularProducts(SqlAlchemyProductRepository(session)).execute(
        current_user.user_id, limit=limit
    )
    return result.value


@router.get("/{product_id}", response_model=ProductDTO)
async def get_product(
    product_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetProduct(SqlAlchemyProductRepository(session)).execute(current_user.user_id, product_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{product_id}", response_model=ProductDTO)
async def update_product(
    product_id: str,
    request: UpdateProductCommandDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = UpdateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(current_user.user_id, product_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = DeleteProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(current_user.user_id, product_id)
    if result.is_err():
        raise_for_error(result.error)
