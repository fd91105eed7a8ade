"""SQLAlchemy implementation of CustomerRepository"""

from typing import List, Optional
from sqlalchemy import or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer


class SqlAlchemyCustomerRepository(CustomerRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, customer: Customer) -> Customer:
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def get_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        statement = (
            select(Customer)
            .where(Customer.id == customer_id)
            .where(Customer.user_id == user_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: str) -> List[Customer]:
        statement = select(Customer).where(Customer.user_id == user_id).order_by(Customer.name)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def search(self, user_id: str, term: str) -> List[Customer]:
        pattern = f"%{term.lower()}%"
        statement = (
            select(Customer)
            .where(Customer.user_id == user_id)
            .where(
                or_(
                    func.lower(Customer.name).like(pattern),
                    func.lower(func.coalesce(Customer.email, "")).like(pattern),
                )
            )
            .order_by(Customer.name)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def exists(self, user_id: str, email: Optional[str] = None, ntn: Optional[str] = None) -> bool:
        conditions = []
        if email:
            conditions.append(func.lower(Customer.email) == email.lower())
        if ntn:
            conditions.append(Customer.ntn == ntn)
        if not conditions:
            return False

        statement = (
            select(func.count())
            .select_from(Customer)
            .where(Customer.user_id == user_id)
            .where(or_(*conditions))
        )
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    async def update(self, customer: Customer) -> Customer:
        self.session.add(customer)
        await self.session.flush()
        return customer

    async def delete(self, customer_id: str, user_id: str) -> bool:
        customer = await self.get_by_id(customer_id, user_id)
        if not customer:
            return False
        await self.session.delete(customer)
        await self.session.flush()
        return True
