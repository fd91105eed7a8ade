"""Unit tests for UpdateInvoiceStatus and DeleteInvoice use cases

Statistics must always equal what a recompute from the invoices gives.
"""

import pytest
import pytest_asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.invoicing.delete_invoice import DeleteInvoice
from src.app.use_cases.invoicing.dtos import RecordAcceptedInvoiceCommandDTO, UpdateInvoiceStatusCommandDTO
from src.app.use_cases.invoicing.record_accepted_invoice import RecordAcceptedInvoice
from src.app.use_cases.invoicing.update_invoice_status import UpdateInvoiceStatus
from src.domain.invoice import InvoiceStatus


@pytest_asyncio.fixture
async def recorded_invoice(memory_uow, invoice_repo, stats_repo, sample_draft):
    result = await RecordAcceptedInvoice(memory_uow, invoice_repo, stats_repo).execute(
        RecordAcceptedInvoiceCommandDTO(user_id="user_123", invoice_id="FBR-0001", draft=sample_draft)
    )
    return result.value


@pytest.fixture
def update_use_case(memory_uow, invoice_repo, stats_repo):
    return UpdateInvoiceStatus(memory_uow, invoice_repo, stats_repo)


@pytest.fixture
def delete_use_case(memory_uow, invoice_repo, stats_repo):
    return DeleteInvoice(memory_uow, invoice_repo, stats_repo)


def command(status, user_id="user_123"):
    return UpdateInvoiceStatusCommandDTO(user_id=user_id, invoice_id="FBR-0001", status=status)


@pytest.mark.asyncio
class TestUpdateInvoiceStatus:

    async def test_paid_to_pending_moves_amount(self, recorded_invoice, update_use_case, store, stats_repo):
        result = await update_use_case.execute(command(InvoiceStatus.PENDING))

        assert result.value.status == "Pending"
        stats = store.stats["user_123"]
        assert stats.invoice_count == 1
        assert stats.paid_amount == Decimal("0.00")
        assert stats.pending_amount == Decimal("11800.00")
        assert stats == await stats_repo.calculate("user_123")

    async def test_pending_to_overdue_keeps_counters(self, recorded_invoice, update_use_case, store):
        await update_use_case.execute(command(InvoiceStatus.PENDING))

        await update_use_case.execute(command(InvoiceStatus.OVERDUE))

        assert store.invoices["FBR-0001"].status == InvoiceStatus.OVERDUE
        assert store.stats["user_123"].pending_amount == Decimal("11800.00")
        assert store.stats["user_123"].paid_amount == Decimal("0.00")

    async def test_same_status_is_noop(self, recorded_invoice, update_use_case, memory_uow):
        commits = memory_uow.commits

        result = await update_use_case.execute(command(InvoiceStatus.PAID))

        assert result.value.status == "Paid"
        assert memory_uow.commits == commits

    async def test_other_user_cannot_update(self, recorded_invoice, update_use_case, store):
        result = await update_use_case.execute(command(InvoiceStatus.PENDING, user_id="user_456"))

        assert result.error.code == "INVOICE_NOT_FOUND"
        assert store.invoices["FBR-0001"].status == InvoiceStatus.PAID

    async def test_failed_counter_update_restores_status(
        self, recorded_invoice, update_use_case, stats_repo, store
    ):
        stats_repo.apply_delta = AsyncMock(side_effect=RuntimeError("deadlock"))

        result = await update_use_case.execute(command(InvoiceStatus.PENDING))

        assert result.error.code == "STATUS_UPDATE_FAILED"
        assert store.invoices["FBR-0001"].status == InvoiceStatus.PAID


@pytest.mark.asyncio
class TestDeleteInvoice:

    async def test_delete_removes_invoice_and_counters(self, recorded_invoice, delete_use_case, store):
        result = await delete_use_case.execute("user_123", "FBR-0001")

        assert result.value is True
        assert store.invoices == {}
        stats = store.stats["user_123"]
        assert stats.invoice_count == 0
        assert stats.paid_amount == Decimal("0.00")
        assert stats.pending_amount == Decimal("0.00")

    async def test_delete_pending_invoice(self, recorded_invoice, update_use_case, delete_use_case, store):
        await update_use_case.execute(command(InvoiceStatus.PENDING))

        await delete_use_case.execute("user_123", "FBR-0001")

        assert store.stats["user_123"].pending_amount == Decimal("0.00")

    async def test_delete_missing_invoice(self, delete_use_case):
        result = await delete_use_case.execute("user_123", "FBR-404")

        assert result.error.code == "INVOICE_NOT_FOUND"

    async def test_other_user_cannot_delete(self, recorded_invoice, delete_use_case, store):
        result = await delete_use_case.execute("user_456", "FBR-0001")

        assert result.error.code == "INVOICE_NOT_FOUND"
        assert "FBR-0001" in store.invoices
