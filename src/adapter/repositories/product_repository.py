"""SQLAlchemy implementation of ProductRepository"""

from typing import List, Optional
from sqlalchemy import or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLineItem
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: str, user_id: str) -> Optional[Product]:
        statement = (
            select(Product)
            .where(Product.id == product_id)
            .where(Product.user_id == user_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: str) -> List[Product]:
        statement = select(Product).where(Product.user_id == user_id).order_by(Product.name)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def search(self, user_id: str, term: str) -> List[Product]:
        pattern = f"%{term.lower()}%"
        statement = (
            select(Product)
            .where(Product.user_id == user_id)
            .where(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(func.coalesce(Product.description, "")).like(pattern),
                )
            )
            .order_by(Product.name)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_popular(self, user_id: str, limit: int = 10) -> List[Product]:
        """
        Products ordered by usage count on the user's invoice lines

        Unused products are included after used ones, by name.
        """
        usage = (
            select(
                InvoiceLineItem.description.label("description"),
                func.count(InvoiceLineItem.id).label("usage_count"),
            )
            .join(Invoice, Invoice.id == InvoiceLineItem.invoice_id)
            .where(Invoice.user_id == user_id)
            .group_by(InvoiceLineItem.description)
            .subquery()
        )
        statement = (
            select(Product)
            .outerjoin(usage, usage.c.description == Product.name)
            .where(Product.user_id == user_id)
            .order_by(func.coalesce(usage.c.usage_count, 0).desc(), Product.name)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def exists_with_name(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
        statement = (
            select(func.count())
            .select_from(Product)
            .where(Product.user_id == user_id)
            .where(func.lower(Product.name) == name.lower())
        )
        if exclude_id:
            statement = statement.where(Product.id != exclude_id)
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    async def update(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        return product

    async def delete(self, product_id: str, user_id: str) -> bool:
        product = await self.get_by_id(product_id, user_id)
        if not product:
            return False
        await self.session.delete(product)
        await self.session.flush()
        return True
