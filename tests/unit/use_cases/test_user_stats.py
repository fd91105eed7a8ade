"""Unit tests for RecomputeUserStats and ReconcileUserStats use cases

Tests cover:
- Recompute equals the incrementally maintained counters
- Recompute repairs drift
- Reconciliation report-only and repair modes
"""

import pytest
import pytest_asyncio
from dataclasses import replace
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.repositories.user_stats_repository import UserStats
from src.app.use_cases.invoicing.dtos import RecordAcceptedInvoiceCommandDTO
from src.app.use_cases.invoicing.record_accepted_invoice import RecordAcceptedInvoice
from src.app.use_cases.invoicing.recompute_user_stats import RecomputeUserStats
from src.app.use_cases.invoicing.reconcile_user_stats import ReconcileUserStats


@pytest_asyncio.fixture
async def two_invoices(memory_uow, invoice_repo, stats_repo, sample_draft):
    use_case = RecordAcceptedInvoice(memory_uow, invoice_repo, stats_repo)
    for invoice_id in ("FBR-0001", "FBR-0002"):
        await use_case.execute(
            RecordAcceptedInvoiceCommandDTO(user_id="user_123", invoice_id=invoice_id, draft=sample_draft)
        )


def drift(store, user_id="user_123"):
    store.stats[user_id] = replace(store.stats[user_id], invoice_count=7, paid_amount=Decimal("1.00"))


@pytest.mark.asyncio
class TestRecomputeUserStats:

    async def test_recompute_matches_incremental_counters(self, two_invoices, memory_uow, stats_repo, store):
        before = store.stats["user_123"]

        result = await RecomputeUserStats(memory_uow, stats_repo).execute("user_123")

        assert result.value.invoice_count == before.invoice_count == 2
        assert result.value.paid_amount == before.paid_amount == Decimal("23600.00")
        assert result.value.pending_amount == Decimal("0.00")

    async def test_recompute_repairs_drift(self, two_invoices, memory_uow, stats_repo, store):
        drift(store)

        await RecomputeUserStats(memory_uow, stats_repo).execute("user_123")

        assert store.stats["user_123"].invoice_count == 2
        assert store.stats["user_123"].paid_amount == Decimal("23600.00")

    async def test_unknown_user(self, memory_uow, stats_repo):
        result = await RecomputeUserStats(memory_uow, stats_repo).execute("ghost")

        assert result.error.code == "USER_NOT_FOUND"

    async def test_failure_rolls_back(self, mock_uow):
        stats_repo = MagicMock()
        stats_repo.get = AsyncMock(return_value=UserStats("user_123", 0, Decimal("0"), Decimal("0")))
        stats_repo.recompute = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await RecomputeUserStats(mock_uow, stats_repo).execute("user_123")

        assert result.error.code == "STATS_RECOMPUTE_FAILED"
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestReconcileUserStats:

    async def test_consistent_users(self, two_invoices, memory_uow, stats_repo, store):
        store.add_user("user_456")

        result = await ReconcileUserStats(memory_uow, stats_repo).execute()

        assert result.value.total_users_checked == 2
        assert result.value.discrepancies_found == 0

    async def test_report_only_leaves_counters(self, two_invoices, memory_uow, stats_repo, store):
        drift(store)

        result = await ReconcileUserStats(memory_uow, stats_repo).execute(repair=False)

        assert result.value.discrepancies_found == 1
        discrepancy = result.value.discrepancies[0]
        assert discrepancy.stored.invoice_count == 7
        assert discrepancy.calculated.invoice_count == 2
        assert discrepancy.repaired is False
        assert store.stats["user_123"].invoice_count == 7

    async def test_repair(self, two_invoices, memory_uow, stats_repo, store):
        drift(store)
        commits = memory_uow.commits

        result = await ReconcileUserStats(memory_uow, stats_repo).execute(repair=True)

        assert result.value.discrepancies[0].repaired is True
        assert store.stats["user_123"].invoice_count == 2
        assert memory_uow.commits == commits + 1

    async def test_repository_failure(self, mock_uow):
        stats_repo = MagicMock()
        stats_repo.list_user_ids = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await ReconcileUserStats(mock_uow, stats_repo).execute(repair=True)

        assert result.error.code == "RECONCILIATION_FAILED"
        mock_uow.rollback.assert_awaited_once()
