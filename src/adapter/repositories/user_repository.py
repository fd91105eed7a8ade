"""SQLAlchemy implementation of UserRepository"""

from typing import List, Optional
from sqlalchemy import delete
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_repository import UserRepository
from src.domain.customer import Customer
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLineItem
from src.domain.product import Product
from src.domain.session import Session
from src.domain.user import User, UserRole


class SqlAlchemyUserRepository(UserRepository):
    """
    SQLAlchemy implementation of UserRepository

    Reads use populate_existing: the statistics repository updates counters
    with bulk UPDATEs that bypass the identity map.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        statement = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        statement = (
            select(User)
            .where(func.lower(User.email) == email.lower())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[User]:
        statement = (
            select(User)
            .order_by(User.registration_date.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_role(self, role: UserRole) -> int:
        statement = select(func.count()).select_from(User).where(User.role == role)
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def update(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def delete(self, user_id: str) -> bool:
        """
        Delete the user with sessions, invoices, line items, customers and products

        Children are removed explicitly so the result does not depend on the
        database enforcing ON DELETE CASCADE.
        """
        user = await self.get_by_id(user_id)
        if not user:
            return False

        invoice_ids = select(Invoice.id).where(Invoice.user_id == user_id)
        await self.session.execute(
            delete(InvoiceLineItem).where(InvoiceLineItem.invoice_id.in_(invoice_ids))
        )
        await self.session.execute(delete(Invoice).where(Invoice.user_id == user_id))
        await self.session.execute(delete(Session).where(Session.user_id == user_id))
        await self.session.execute(delete(Customer).where(Customer.user_id == user_id))
        await self.session.execute(delete(Product).where(Product.user_id == user_id))

        await self.session.delete(user)
        await self.session.flush()
        return True
