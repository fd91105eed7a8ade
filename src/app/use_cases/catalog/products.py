"""Product use cases

Owner-scoped catalogue used to pre-fill invoice line items.
"""

import logging
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.invoicing.pricing import parse_rate
from src.domain.product import Product
from .dtos import CreateProductCommandDTO, ProductDTO, UpdateProductCommandDTO

logger = logging.getLogger(__name__)


def to_product_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        description=product.description,
        unit_price=product.unit_price,
        hs_code=product.hs_code,
        rate=product.rate,
        uom=product.uom,
        created_at=product.created_at,
    )


def _not_found(product_id: str) -> Error:
    return Error(code="PRODUCT_NOT_FOUND", message=f"Product {product_id} not found")


def _duplicate(name: str) -> Error:
    return Error(code="PRODUCT_ALREADY_EXISTS", message=f"A product named '{name}' already exists")


def _invalid_rate(rate: str) -> Error:
    return Error(
        code="VALIDATION_FAILED",
        message="Rate must be a percentage, e.g. '18%'",
        details={"errors": [{"field": "rate", "message": f"Invalid rate '{rate}'"}]},
    )


class CreateProduct:
    """
    Use Case: Add a product

    Product names are unique per user (case-insensitive) and the rate must
    be a percentage so that line items built from the product validate.
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, user_id: str, command: CreateProductCommandDTO) -> Result[ProductDTO]:
        name = command.name.strip()
        if parse_rate(command.rate) is None:
            return Return.err(_invalid_rate(command.rate))

        try:
            if await self.product_repo.exists_with_name(user_id, name):
                return Return.err(_duplicate(name))

            product = Product(
                user_id=user_id,
                name=name,
                description=command.description or "",
                unit_price=command.unit_price,
                hs_code=command.hs_code.strip(),
                rate=command.rate.strip(),
                uom=command.uom.strip(),
            )
            created = await self.product_repo.create(product)
            await self.uow.commit()
            return Return.ok(to_product_dto(created))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create product for user {user_id}: {e}")
            return Return.err(
                Error(code="PRODUCT_CREATE_FAILED", message="Failed to create product", reason=str(e))
            )


class ListProducts:

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, user_id: str) -> Result[List[ProductDTO]]:
        products = await self.product_repo.list_by_user(user_id)
        return Return.ok([to_product_dto(product) for product in products])


class SearchProducts:
    """Case-insensitive search on name or description; an empty term lists everything"""

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, user_id: str, term: str) -> Result[List[ProductDTO]]:
        term = (term or "").strip()
        if not term:
            products = await self.product_repo.list_by_user(user_id)
        else:
            products = await self.product_repo.search(user_id, term)
        return Return.ok([to_product_dto(product) for product in products])


class GetPopularProducts:
    """Products most often used on the user's invoices"""

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, user_id: str, limit: int = 10) -> Result[List[ProductDTO]]:
        products = await self.product_repo.get_popular(user_id, limit=min(max(limit, 1), 100))
        return Return.ok([to_product_dto(product) for product in products])


class GetProduct:

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, user_id: str, product_id: str) -> Result[ProductDTO]:
        product = await self.product_repo.get_by_id(product_id, user_id)
        if not product:
            return Return.err(_not_found(product_id))
        return Return.ok(to_product_dto(product))


class UpdateProduct:

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(
        self, user_id: str, product_id: str, command: UpdateProductCommandDTO
    ) -> Result[ProductDTO]:
        changes = command.model_dump(exclude_unset=True)
        if "rate" in changes and parse_rate(changes["rate"] or "") is None:
            return Return.err(_invalid_rate(changes["rate"]))

        try:
            product = await self.product_repo.get_by_id(product_id, user_id)
            if not product:
                return Return.err(_not_found(product_id))

            new_name = changes.get("name")
            if new_name and await self.product_repo.exists_with_name(
                user_id, new_name.strip(), exclude_id=product_id
            ):
                return Return.err(_duplicate(new_name.strip()))

            for field, value in changes.items():
                setattr(product, field, value.strip() if isinstance(value, str) else value)
            product.updated_at = datetime.utcnow()

            updated = await self.product_repo.update(product)
            await self.uow.commit()
            return Return.ok(to_product_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update product {product_id}: {e}")
            return Return.err(
                Error(code="PRODUCT_UPDATE_FAILED", message="Failed to update product", reason=str(e))
            )


class DeleteProduct:

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, user_id: str, product_id: str) -> Result[bool]:
        try:
            if not await self.product_repo.delete(product_id, user_id):
                return Return.err(_not_found(product_id))
            await self.uow.commit()
            return Return.ok(True)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete product {product_id}: {e}")
            return Return.err(
                Error(code="PRODUCT_DELETE_FAILED", message="Failed to delete product", reason=str(e))
            )
