"""In-memory invoice and statistics repositories

Process-local implementations used by tests and local tooling. They honour
the same contracts as the SQLAlchemy repositories, including rollback via
InMemoryUnitOfWork.
"""

import asyncio
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from src.app.repositories.invoice_repository import InvoiceFilters, InvoiceRepository
from src.app.repositories.user_stats_repository import UserStats, UserStatsRepository
from src.domain.invoice import Invoice, InvoiceStatus

CENT = Decimal("0.01")


class InMemoryStore:
    """Shared state of the in-memory repositories"""

    def __init__(self):
        self.invoices: Dict[str, Invoice] = {}
        self.stats: Dict[str, UserStats] = {}
        self.lock = asyncio.Lock()

    def add_user(self, user_id: str) -> None:
        self.stats.setdefault(
            user_id,
            UserStats(
                user_id=user_id,
                invoice_count=0,
                paid_amount=Decimal("0.00"),
                pending_amount=Decimal("0.00"),
            ),
        )

    def snapshot(self):
        statuses = {invoice_id: invoice.status for invoice_id, invoice in self.invoices.items()}
        return dict(self.invoices), statuses, dict(self.stats)

    def restore(self, snapshot) -> None:
        invoices, statuses, stats = snapshot
        self.invoices = dict(invoices)
        for invoice_id, status in statuses.items():
            self.invoices[invoice_id].status = status
        self.stats = dict(stats)


class InMemoryInvoiceRepository(InvoiceRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, invoice: Invoice) -> Invoice:
        if invoice.id in self.store.invoices:
            raise ValueError(f"Invoice {invoice.id} already exists")
        self.store.invoices[invoice.id] = invoice
        return invoice

    async def get_by_id(self, invoice_id: str, user_id: Optional[str] = None) -> Optional[Invoice]:
        invoice = self.store.invoices.get(invoice_id)
        if invoice is None or (user_id is not None and invoice.user_id != user_id):
            return None
        return invoice

    def _matching(self, filters: InvoiceFilters) -> List[Invoice]:
        matches = []
        for invoice in self.store.invoices.values():
            if filters.user_id is not None and invoice.user_id != filters.user_id:
                continue
            if filters.status is not None and invoice.status != filters.status:
                continue
            if filters.from_date is not None and invoice.issue_date < filters.from_date:
                continue
            if filters.to_date is not None and invoice.issue_date > filters.to_date:
                continue
            if filters.customer_name and invoice.customer_name.lower() != filters.customer_name.strip().lower():
                continue
            matches.append(invoice)
        matches.sort(key=lambda invoice: (invoice.created_at, invoice.id), reverse=True)
        return matches

    async def list(
        self,
        filters: InvoiceFilters,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Invoice], int]:
        matches = self._matching(filters)
        offset = (page - 1) * limit
        return matches[offset:offset + limit], len(matches)

    async def update_status(
        self, invoice_id: str, status: InvoiceStatus, user_id: Optional[str] = None
    ) -> Optional[Invoice]:
        invoice = await self.get_by_id(invoice_id, user_id=user_id)
        if invoice is None:
            return None
        invoice.status = status
        return invoice

    async def delete(self, invoice_id: str, user_id: Optional[str] = None) -> bool:
        if await self.get_by_id(invoice_id, user_id=user_id) is None:
            return False
        del self.store.invoices[invoice_id]
        return True

    async def count_all(self) -> int:
        return len(self.store.invoices)

    async def total_paid_amount(self) -> Decimal:
        return sum(
            (invoice.amount for invoice in self.store.invoices.values() if invoice.status == InvoiceStatus.PAID),
            Decimal("0.00"),
        )

    async def list_recent(self, user_id: str, limit: int = 5) -> List[Invoice]:
        return self._matching(InvoiceFilters(user_id=user_id))[:limit]


class InMemoryUserStatsRepository(UserStatsRepository):
    """Deltas are applied under the store lock, one user row at a time"""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def apply_delta(
        self,
        user_id: str,
        invoice_count_delta: int = 0,
        paid_delta: Decimal = Decimal("0"),
        pending_delta: Decimal = Decimal("0"),
    ) -> None:
        async with self.store.lock:
            current = self.store.stats.get(user_id)
            if current is None:
                raise LookupError(f"User {user_id} not found")
            self.store.stats[user_id] = replace(
                current,
                invoice_count=current.invoice_count + invoice_count_delta,
                paid_amount=(current.paid_amount + paid_delta).quantize(CENT),
                pending_amount=(current.pending_amount + pending_delta).quantize(CENT),
            )

    async def get(self, user_id: str) -> Optional[UserStats]:
        return self.store.stats.get(user_id)

    async def calculate(self, user_id: str) -> UserStats:
        invoices = [invoice for invoice in self.store.invoices.values() if invoice.user_id == user_id]
        paid = sum((i.amount for i in invoices if i.status == InvoiceStatus.PAID), Decimal("0"))
        pending = sum(
            (i.amount for i in invoices if i.status in (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)),
            Decimal("0"),
        )
        return UserStats(
            user_id=user_id,
            invoice_count=len(invoices),
            paid_amount=paid.quantize(CENT),
            pending_amount=pending.quantize(CENT),
        )

    async def recompute(self, user_id: str) -> UserStats:
        if user_id not in self.store.stats:
            raise LookupError(f"User {user_id} not found")
        stats = await self.calculate(user_id)
        async with self.store.lock:
            self.store.stats[user_id] = stats
        return stats

    async def list_user_ids(self) -> List[str]:
        return list(self.store.stats.keys())
