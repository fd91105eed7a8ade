"""Unit tests for SubmitInvoice use case

Tests cover:
- Accepted submission recorded as Paid with statistics updated
- Business rejection by the gateway
- Unreachable gateway and HTTP client errors
- Local validation failures never reaching the gateway
- Accepted responses without an invoice number
- Persistence failure after acceptance
- Distinct invoices accepted under the same number
"""

import re
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from src.adapter.services.tax_gateway import MockTaxGateway
from src.app.services.tax_gateway import (
    GatewayHttpError,
    GatewayItemStatus,
    GatewayResponse,
    GatewayUnreachableError,
    GatewayValidationResponse,
)
from src.app.use_cases.invoicing.dtos import SubmitInvoiceCommandDTO
from src.app.use_cases.invoicing.submit_invoice import SubmitInvoice, generate_fallback_invoice_id


def accepted_response(invoice_number="7000007DI1747119701593"):
    return GatewayResponse(
        invoice_number=invoice_number,
        dated="2024-05-01 10:15:00",
        validation_response=GatewayValidationResponse(
            status_code="00",
            status="Valid",
            invoice_statuses=[
                GatewayItemStatus(item_sno="1", status_code="00", status="Valid"),
            ],
        ),
    )


def rejected_response(error="Invalid NTN"):
    return GatewayResponse(
        validation_response=GatewayValidationResponse(
            status_code="01",
            status="Invalid",
            error=error,
        ),
    )


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.is_mock = False
    gateway.post_invoice = AsyncMock(return_value=accepted_response())
    return gateway


@pytest.fixture
def mock_alert_service():
    service = MagicMock()
    service.send_persistence_failure_alert = AsyncMock(return_value=True)
    return service


@pytest.fixture
def submit_use_case(memory_uow, invoice_repo, stats_repo, mock_gateway, mock_alert_service):
    return SubmitInvoice(
        uow=memory_uow,
        invoice_repo=invoice_repo,
        stats_repo=stats_repo,
        tax_gateway=mock_gateway,
        alert_service=mock_alert_service,
    )


@pytest.fixture
def sample_command(sample_draft):
    return SubmitInvoiceCommandDTO(user_id="user_123", draft=sample_draft)


@pytest.mark.asyncio
class TestSubmitInvoiceAccepted:

    async def test_accepted_invoice_is_recorded_as_paid(
        self, submit_use_case, sample_command, store, memory_uow
    ):
        """
        Given: A valid draft of 2 x 5000 at 18%
        When: The gateway accepts it with statusCode "00"
        Then: Invoice stored as Paid for 11800.00 and counters incremented
        """
        result = await submit_use_case.execute(sample_command)

        assert result.is_ok()
        assert result.value.invoice_id == "7000007DI1747119701593"
        assert result.value.status == "Paid"
        assert result.value.amount == Decimal("11800.00")
        assert result.value.is_mock is False
        assert result.value.gateway_response["validationResponse"]["statusCode"] == "00"

        stored = store.invoices["7000007DI1747119701593"]
        assert stored.user_id == "user_123"
        assert len(stored.line_items) == 1

        stats = store.stats["user_123"]
        assert stats.invoice_count == 1
        assert stats.paid_amount == Decimal("11800.00")
        assert stats.pending_amount == Decimal("0.00")
        assert memory_uow.commits == 1

    async def test_payload_sent_with_computed_totals(self, submit_use_case, sample_command, mock_gateway):
        await submit_use_case.execute(sample_command)

        payload = mock_gateway.post_invoice.call_args[0][0]
        assert payload.items[0].total_values == 11800.0
        assert payload.seller_ntn_cnic == "1234567-8"

    async def test_missing_invoice_number_uses_fallback(
        self, submit_use_case, sample_command, mock_gateway, store
    ):
        mock_gateway.post_invoice = AsyncMock(return_value=accepted_response(invoice_number=None))

        result = await submit_use_case.execute(sample_command)

        assert result.is_ok()
        assert result.value.invoice_id.startswith("FBR-LOCAL-")
        assert result.value.invoice_id in store.invoices

    async def test_mock_gateway_flag_is_reported(self, submit_use_case, sample_command, mock_gateway, store):
        mock_gateway.is_mock = True

        result = await submit_use_case.execute(sample_command)

        assert result.value.is_mock is True
        assert store.invoices[result.value.invoice_id].is_mock is True


@pytest.mark.asyncio
class TestSubmitInvoiceRejected:

    async def test_gateway_rejection_writes_nothing(self, submit_use_case, sample_command, mock_gateway, store):
        """
        Given: The gateway answers statusCode "01" with error "Invalid NTN"
        When: submit is called
        Then: GATEWAY_REJECTED with the gateway message, no invoice, counters unchanged
        """
        mock_gateway.post_invoice = AsyncMock(return_value=rejected_response())

        result = await submit_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "GATEWAY_REJECTED"
        assert result.error.message == "Invalid NTN"
        assert result.error.details["gateway_response"]["validationResponse"]["statusCode"] == "01"
        assert store.invoices == {}
        assert store.stats["user_123"].invoice_count == 0
        assert store.stats["user_123"].paid_amount == Decimal("0.00")

    async def test_item_level_rejection(self, submit_use_case, sample_command, mock_gateway, store):
        response = accepted_response()
        response.validation_response.invoice_statuses[0].status_code = "01"
        response.validation_response.invoice_statuses[0].error = "Invalid HS Code"
        mock_gateway.post_invoice = AsyncMock(return_value=response)

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "GATEWAY_REJECTED"
        assert result.error.message == "Item 1: Invalid HS Code"
        assert store.invoices == {}

    async def test_http_client_error(self, submit_use_case, sample_command, mock_gateway):
        mock_gateway.post_invoice = AsyncMock(side_effect=GatewayHttpError(401, "Unauthorized"))

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "GATEWAY_REJECTED"
        assert result.error.details == {"http_status": 401}

    async def test_unreachable_gateway(self, submit_use_case, sample_command, mock_gateway, store, memory_uow):
        mock_gateway.post_invoice = AsyncMock(side_effect=GatewayUnreachableError("timed out"))

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "GATEWAY_UNREACHABLE"
        assert store.invoices == {}
        assert memory_uow.commits == 0


@pytest.mark.asyncio
class TestSubmitInvoiceValidation:

    async def test_no_line_items_never_calls_gateway(self, submit_use_case, sample_command, mock_gateway):
        sample_command.draft.line_items = []

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "VALIDATION_FAILED"
        assert {"field": "line_items", "message": "At least one line item is required"} in (
            result.error.details["errors"]
        )
        mock_gateway.post_invoice.assert_not_called()

    async def test_missing_registered_buyer_ntn(self, submit_use_case, sample_command, mock_gateway):
        sample_command.draft.buyer.ntn = ""

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "VALIDATION_FAILED"
        mock_gateway.post_invoice.assert_not_called()


@pytest.mark.asyncio
class TestSubmitInvoicePersistenceFailure:

    async def test_persistence_failure_alerts_operators(
        self, submit_use_case, sample_command, stats_repo, store, mock_alert_service
    ):
        """
        Given: The gateway accepted the invoice
        When: The statistics update fails
        Then: Nothing stays written, PERSISTENCE_FAILED is returned and an alert carries the record
        """
        stats_repo.apply_delta = AsyncMock(side_effect=RuntimeError("database is locked"))

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "PERSISTENCE_FAILED"
        assert result.error.details == {"invoice_id": "7000007DI1747119701593"}
        assert store.invoices == {}

        mock_alert_service.send_persistence_failure_alert.assert_called_once()
        alert = mock_alert_service.send_persistence_failure_alert.call_args[0][0]
        assert alert.invoice_id == "7000007DI1747119701593"
        assert alert.amount == Decimal("11800.00")
        assert alert.record["user_id"] == "user_123"
        assert alert.record["draft"]["buyer"]["ntn"] == "7654321"


@pytest.mark.asyncio
class TestSubmitInvoiceNumbering:

    async def test_mock_gateway_keeps_invoices_of_the_same_millisecond(
        self, memory_uow, invoice_repo, stats_repo, sample_draft, store
    ):
        """
        Given: The mock gateway accepts two different drafts in the same millisecond
        When: Both are submitted for the same user
        Then: Each gets its own number and both are stored and counted
        """
        use_case = SubmitInvoice(memory_uow, invoice_repo, stats_repo, MockTaxGateway())
        larger_draft = sample_draft.model_copy(deep=True)
        larger_draft.line_items[0].quantity = Decimal("7")

        with patch("src.adapter.services.tax_gateway.time.time", return_value=1700000000.0):
            first = await use_case.execute(SubmitInvoiceCommandDTO(user_id="user_123", draft=sample_draft))
            second = await use_case.execute(SubmitInvoiceCommandDTO(user_id="user_123", draft=larger_draft))

        assert first.is_ok() and second.is_ok()
        assert first.value.invoice_id != second.value.invoice_id
        assert first.value.amount == Decimal("11800.00")
        assert second.value.amount == Decimal("41300.00")
        assert len(store.invoices) == 2
        assert store.stats["user_123"].invoice_count == 2
        assert store.stats["user_123"].paid_amount == Decimal("53100.00")

    async def test_reused_number_for_another_draft_fails(
        self, submit_use_case, sample_command, store
    ):
        await submit_use_case.execute(sample_command)
        sample_command.draft.line_items[0].quantity = Decimal("7")

        result = await submit_use_case.execute(sample_command)

        assert result.error.code == "PERSISTENCE_FAILED"
        assert len(store.invoices) == 1
        assert store.stats["user_123"].invoice_count == 1
        assert store.stats["user_123"].paid_amount == Decimal("11800.00")

    @patch("src.app.use_cases.invoicing.submit_invoice.build_gateway_payload")
    async def test_stored_total_mismatch_is_an_error(
        self, mock_build_payload, submit_use_case, sample_command
    ):
        mock_build_payload.return_value = (MagicMock(), Decimal("99.00"))

        result = await submit_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "PERSISTENCE_FAILED"
        assert result.error.details == {"invoice_id": "7000007DI1747119701593"}

class TestFallbackInvoiceId:

    def test_format(self):
        invoice_id = generate_fallback_invoice_id()

        assert re.fullmatch(r"FBR-LOCAL-\d{14}-[0-9A-F]{8}", invoice_id)

    def test_unique(self):
        assert generate_fallback_invoice_id() != generate_fallback_invoice_id()
