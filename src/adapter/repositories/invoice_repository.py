"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List, Tuple
from datetime import datetime
from decimal import Decimal
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceFilters, InvoiceRepository
from src.domain.invoice import Invoice, InvoiceStatus


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Line items are written and removed through the Invoice.line_items
    relationship, so one flush covers the whole aggregate.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice with its line items

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()
        return invoice

    async def get_by_id(self, invoice_id: str, user_id: Optional[str] = None) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice number
            user_id: Optional owner restriction

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)
        if user_id is not None:
            statement = statement.where(Invoice.user_id == user_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    def _apply_filters(self, statement, filters: InvoiceFilters):
        if filters.user_id is not None:
            statement = statement.where(Invoice.user_id == filters.user_id)
        if filters.status is not None:
            statement = statement.where(Invoice.status == filters.status)
        if filters.from_date is not None:
            statement = statement.where(Invoice.issue_date >= filters.from_date)
        if filters.to_date is not None:
            statement = statement.where(Invoice.issue_date <= filters.to_date)
        if filters.customer_name:
            statement = statement.where(
                func.lower(Invoice.customer_name) == filters.customer_name.strip().lower()
            )
        return statement

    async def list(
        self,
        filters: InvoiceFilters,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Invoice], int]:
        """
        Retrieve a page of invoices ordered by created_at DESC, id DESC

        Returns:
            Tuple of (invoices, total count matching the filters)
        """
        count_statement = self._apply_filters(select(func.count()).select_from(Invoice), filters)
        total = (await self.session.execute(count_statement)).scalar_one()

        statement = self._apply_filters(select(Invoice), filters)
        statement = statement.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset((page - 1) * limit)

        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def update_status(
        self, invoice_id: str, status: InvoiceStatus, user_id: Optional[str] = None
    ) -> Optional[Invoice]:
        invoice = await self.get_by_id(invoice_id, user_id=user_id)
        if not invoice:
            return None

        invoice.status = status
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        return invoice

    async def delete(self, invoice_id: str, user_id: Optional[str] = None) -> bool:
        invoice = await self.get_by_id(invoice_id, user_id=user_id)
        if not invoice:
            return False

        await self.session.delete(invoice)
        await self.session.flush()
        return True

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Invoice))
        return result.scalar_one()

    async def total_paid_amount(self) -> Decimal:
        statement = (
            select(func.coalesce(func.sum(Invoice.amount), 0))
            .where(Invoice.status == InvoiceStatus.PAID)
        )
        result = await self.session.execute(statement)
        return Decimal(str(result.scalar_one()))

    async def list_recent(self, user_id: str, limit: int = 5) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.user_id == user_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
