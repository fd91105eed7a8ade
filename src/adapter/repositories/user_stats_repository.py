"""SQLAlchemy implementation of UserStatsRepository

Counters live on the users row. Deltas are applied by the database in a
single UPDATE so concurrent writers never overwrite each other.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_stats_repository import UserStats, UserStatsRepository
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.user import User

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


class SqlAlchemyUserStatsRepository(UserStatsRepository):
    """
    SQLAlchemy implementation of UserStatsRepository

    Features:
    - Atomic increments via UPDATE ... SET x = x + :delta
    - Recompute as one UPDATE fed by scalar subqueries over invoices
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def apply_delta(
        self,
        user_id: str,
        invoice_count_delta: int = 0,
        paid_delta: Decimal = Decimal("0"),
        pending_delta: Decimal = Decimal("0"),
    ) -> None:
        """
        Add deltas to the user's counters

        Raises:
            LookupError: If the user does not exist
        """
        statement = (
            update(User)
            .where(User.id == user_id)
            .values(
                invoice_count=User.invoice_count + invoice_count_delta,
                paid_amount=User.paid_amount + paid_delta,
                pending_amount=User.pending_amount + pending_delta,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            raise LookupError(f"User {user_id} not found")

    async def get(self, user_id: str) -> Optional[UserStats]:
        statement = select(
            User.id, User.invoice_count, User.paid_amount, User.pending_amount
        ).where(User.id == user_id)
        row = (await self.session.execute(statement)).one_or_none()
        if row is None:
            return None
        return UserStats(
            user_id=row[0],
            invoice_count=row[1],
            paid_amount=_money(row[2]),
            pending_amount=_money(row[3]),
        )

    def _derived_counters(self, user_id: str):
        """Scalar subqueries for (count, paid sum, pending + overdue sum)"""
        count_query = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.user_id == user_id)
            .scalar_subquery()
        )
        paid_query = (
            select(func.coalesce(func.sum(Invoice.amount), 0))
            .where(Invoice.user_id == user_id)
            .where(Invoice.status == InvoiceStatus.PAID)
            .scalar_subquery()
        )
        pending_query = (
            select(func.coalesce(func.sum(Invoice.amount), 0))
            .where(Invoice.user_id == user_id)
            .where(Invoice.status.in_([InvoiceStatus.PENDING, InvoiceStatus.OVERDUE]))
            .scalar_subquery()
        )
        return count_query, paid_query, pending_query

    async def calculate(self, user_id: str) -> UserStats:
        count_query, paid_query, pending_query = self._derived_counters(user_id)
        row = (await self.session.execute(select(count_query, paid_query, pending_query))).one()
        return UserStats(
            user_id=user_id,
            invoice_count=int(row[0]),
            paid_amount=_money(row[1]),
            pending_amount=_money(row[2]),
        )

    async def recompute(self, user_id: str) -> UserStats:
        """
        Overwrite the stored counters with values derived from invoices

        Raises:
            LookupError: If the user does not exist
        """
        count_query, paid_query, pending_query = self._derived_counters(user_id)
        statement = (
            update(User)
            .where(User.id == user_id)
            .values(
                invoice_count=count_query,
                paid_amount=paid_query,
                pending_amount=pending_query,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            raise LookupError(f"User {user_id} not found")
        return await self.get(user_id)

    async def list_user_ids(self) -> List[str]:
        result = await self.session.execute(select(User.id).order_by(User.registration_date))
        return list(result.scalars().all())
