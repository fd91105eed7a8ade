"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, List, Tuple
from src.domain.invoice import Invoice, InvoiceStatus


@dataclass
class InvoiceFilters:
    """Filters for invoice listings. user_id scopes results to one owner;
    customer_name matches the buyer name ignoring case."""
    user_id: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    customer_name: Optional[str] = None


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    An invoice and its line items are one aggregate: they are written,
    read and deleted together.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice with its line items

        Rows become visible when the surrounding unit of work commits.

        Args:
            invoice: Invoice entity with line_items populated

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str, user_id: Optional[str] = None) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice number
            user_id: When given, only an invoice owned by this user is returned

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        filters: InvoiceFilters,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Invoice], int]:
        """
        Retrieve a page of invoices, newest first

        Args:
            filters: Owner, status and issue date range filters
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (invoices on the page, total matching invoices)
        """
        pass

    @abstractmethod
    async def update_status(
        self, invoice_id: str, status: InvoiceStatus, user_id: Optional[str] = None
    ) -> Optional[Invoice]:
        """
        Change the status of an invoice

        Returns:
            Updated Invoice, None if no matching invoice exists
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str, user_id: Optional[str] = None) -> bool:
        """
        Delete an invoice together with its line items

        Returns:
            True if an invoice was deleted
        """
        pass

    @abstractmethod
    async def count_all(self) -> int:
        """Count invoices across all users"""
        pass

    @abstractmethod
    async def total_paid_amount(self) -> Decimal:
        """Sum of amounts of Paid invoices across all users"""
        pass

    @abstractmethod
    async def list_recent(self, user_id: str, limit: int = 5) -> List[Invoice]:
        """Most recently created invoices of a user"""
        pass
