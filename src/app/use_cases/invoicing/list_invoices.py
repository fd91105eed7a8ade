"""
List Invoices Use Case

Retrieves a user's invoices with filters and page-based pagination.
"""
from datetime import date
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceFilters, InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceDTO, PaginatedInvoicesDTO
from .mappers import to_invoice_dto

MAX_PAGE_SIZE = 100


class ListInvoices:
    """
    Use case: View invoice history

    Invoices are ordered by created_at DESC (most recent first).
    has_more is true while offset + limit < total.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        status: Optional[InvoiceStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        customer_name: Optional[str] = None,
    ) -> Result[PaginatedInvoicesDTO]:
        """
        List invoices for a user.

        Args:
            user_id: Owner
            page: 1-based page number
            limit: Page size (1..100)
            status: Optional status filter
            from_date: Optional inclusive lower bound on issue date
            to_date: Optional inclusive upper bound on issue date
            customer_name: Optional buyer name, matched ignoring case

        Returns:
            Result[PaginatedInvoicesDTO]: One page of invoices
        """
        if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
            return Return.err(
                Error(
                    code="VALIDATION_FAILED",
                    message=f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}",
                )
            )
        if from_date and to_date and from_date > to_date:
            return Return.err(
                Error(code="VALIDATION_FAILED", message="from_date must not be after to_date")
            )

        filters = InvoiceFilters(
            user_id=user_id,
            status=status,
            from_date=from_date,
            to_date=to_date,
            customer_name=customer_name,
        )
        invoices, total = await self.invoice_repo.list(filters, page=page, limit=limit)

        offset = (page - 1) * limit
        return Return.ok(
            PaginatedInvoicesDTO(
                invoices=[to_invoice_dto(invoice) for invoice in invoices],
                total=total,
                page=page,
                limit=limit,
                has_more=offset + limit < total,
            )
        )


class ListRecentInvoices:
    """Latest invoices of a user for the dashboard"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, user_id: str, limit: int = 5) -> Result[List[InvoiceDTO]]:
        invoices = await self.invoice_repo.list_recent(user_id, limit=min(max(limit, 1), MAX_PAGE_SIZE))
        return Return.ok([to_invoice_dto(invoice) for invoice in invoices])
