"""SubmitInvoice Use Case

Validates a draft, submits it to the tax gateway and records the accepted
invoice.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.alert_service import AlertService
from src.app.services.tax_gateway import (
    GatewayHttpError,
    GatewayUnreachableError,
    TaxGateway,
)
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.user_stats_repository import UserStatsRepository
from .dtos import (
    RecordAcceptedInvoiceCommandDTO,
    SubmissionResultDTO,
    SubmitInvoiceCommandDTO,
)
from .gateway_payload import build_gateway_payload
from .record_accepted_invoice import RecordAcceptedInvoice
from .validate_invoice import ValidateInvoice

logger = logging.getLogger(__name__)


def generate_fallback_invoice_id() -> str:
    """Local invoice number for accepted responses that carry none"""
    timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    return f"FBR-LOCAL-{timestamp}-{uuid.uuid4().hex[:8].upper()}"


class SubmitInvoice:
    """
    Use Case: Submit an invoice to the tax gateway

    Business Rules:
    1. Invalid drafts never reach the gateway (VALIDATION_FAILED)
    2. A response is accepted only when statusCode is "00" at invoice level
       and on every item; otherwise nothing is written (GATEWAY_REJECTED)
    3. Transport failures, timeouts and server errors write nothing and are
       safe to retry (GATEWAY_UNREACHABLE)
    4. An accepted invoice is stored with status Paid and the owner's
       statistics are updated in the same transaction
    5. Failure to record an accepted invoice is PERSISTENCE_FAILED and must
       not be retried by the client, as the gateway already numbered it

    Flow:
    1. Validate the draft locally
    2. Build the gateway payload
    3. Post to the gateway
    4. Check acceptance
    5. Record the invoice under the gateway invoice number
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        stats_repo: UserStatsRepository,
        tax_gateway: TaxGateway,
        alert_service: Optional[AlertService] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.stats_repo = stats_repo
        self.tax_gateway = tax_gateway
        self.alert_service = alert_service
        self.validator = ValidateInvoice()

    async def execute(self, command: SubmitInvoiceCommandDTO) -> Result[SubmissionResultDTO]:
        draft = command.draft

        # Step 1: Local validation
        validation = self.validator.execute(draft)
        if not validation.is_valid:
            logger.info(
                f"Rejected invoice draft for user {command.user_id}: "
                f"{len(validation.errors)} validation errors"
            )
            return Return.err(
                Error(
                    code="VALIDATION_FAILED",
                    message="Invoice validation failed",
                    details={"errors": [error.model_dump() for error in validation.errors]},
                )
            )

        # Step 2: Gateway payload
        payload, grand_total = build_gateway_payload(draft)

        # Step 3: Submit
        try:
            response = await self.tax_gateway.post_invoice(payload)
        except GatewayUnreachableError as e:
            logger.error(f"Tax gateway unreachable for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="GATEWAY_UNREACHABLE",
                    message="The tax gateway could not be reached. No invoice was recorded; "
                            "please try again.",
                    reason=str(e),
                )
            )
        except GatewayHttpError as e:
            logger.warning(f"Tax gateway returned HTTP {e.status_code} for user {command.user_id}")
            return Return.err(
                Error(
                    code="GATEWAY_REJECTED",
                    message=f"Tax gateway rejected the request (HTTP {e.status_code})",
                    reason=e.body,
                    details={"http_status": e.status_code},
                )
            )

        # Step 4: Acceptance
        if not response.is_accepted():
            message = response.error_message()
            logger.warning(f"Tax gateway rejected invoice for user {command.user_id}: {message}")
            return Return.err(
                Error(
                    code="GATEWAY_REJECTED",
                    message=message,
                    details={"gateway_response": response.model_dump(by_alias=True)},
                )
            )

        invoice_id = response.invoice_number
        if not invoice_id:
            invoice_id = generate_fallback_invoice_id()
            logger.warning(f"Gateway accepted invoice without a number, using {invoice_id}")

        # Step 5: Record
        record_result = await RecordAcceptedInvoice(
            uow=self.uow,
            invoice_repo=self.invoice_repo,
            stats_repo=self.stats_repo,
            alert_service=self.alert_service,
        ).execute(
            RecordAcceptedInvoiceCommandDTO(
                user_id=command.user_id,
                invoice_id=invoice_id,
                draft=draft,
                gateway_dated=response.dated,
                is_mock=self.tax_gateway.is_mock,
            )
        )
        if record_result.is_err():
            return Return.err(record_result.error)

        invoice = record_result.value
        if invoice.amount != grand_total:
            logger.critical(
                f"Stored amount {invoice.amount} differs from submitted total {grand_total} "
                f"for invoice {invoice.id}"
            )
            return Return.err(
                Error(
                    code="PERSISTENCE_FAILED",
                    message=f"Invoice {invoice.id} was accepted by the tax gateway but the stored "
                            f"record does not match the submitted total",
                    reason=f"stored={invoice.amount} submitted={grand_total}",
                    details={"invoice_id": invoice.id},
                )
            )

        return Return.ok(
            SubmissionResultDTO(
                invoice_id=invoice.id,
                status=invoice.status,
                amount=invoice.amount,
                is_mock=self.tax_gateway.is_mock,
                gateway_response=response.model_dump(by_alias=True),
            )
        )
