"""Unit tests for the in-memory repositories and unit of work"""

import asyncio
import pytest
from decimal import Decimal

from src.app.use_cases.invoicing.mappers import build_invoice
from src.domain.invoice import InvoiceStatus


@pytest.mark.asyncio
class TestInMemoryRepositories:

    async def test_rollback_discards_uncommitted_writes(
        self, store, memory_uow, invoice_repo, stats_repo, sample_draft
    ):
        await invoice_repo.create(build_invoice("FBR-0001", "user_123", sample_draft, InvoiceStatus.PAID))
        await stats_repo.apply_delta("user_123", invoice_count_delta=1, paid_delta=Decimal("11800"))

        await memory_uow.rollback()

        assert store.invoices == {}
        assert store.stats["user_123"].invoice_count == 0

    async def test_rollback_restores_status(self, store, memory_uow, invoice_repo, sample_draft):
        await invoice_repo.create(build_invoice("FBR-0001", "user_123", sample_draft, InvoiceStatus.PAID))
        await memory_uow.commit()
        await invoice_repo.update_status("FBR-0001", InvoiceStatus.OVERDUE)

        await memory_uow.rollback()

        assert store.invoices["FBR-0001"].status == InvoiceStatus.PAID

    async def test_duplicate_invoice_number(self, invoice_repo, sample_draft):
        await invoice_repo.create(build_invoice("FBR-0001", "user_123", sample_draft, InvoiceStatus.PAID))

        with pytest.raises(ValueError):
            await invoice_repo.create(build_invoice("FBR-0001", "user_123", sample_draft, InvoiceStatus.PAID))

    async def test_delta_for_unknown_user(self, stats_repo):
        with pytest.raises(LookupError):
            await stats_repo.apply_delta("ghost", invoice_count_delta=1)

    async def test_concurrent_deltas_are_not_lost(self, store, stats_repo):
        await asyncio.gather(*[
            stats_repo.apply_delta("user_123", invoice_count_delta=1, paid_delta=Decimal("10.00"))
            for _ in range(50)
        ])

        assert store.stats["user_123"].invoice_count == 50
        assert store.stats["user_123"].paid_amount == Decimal("500.00")
