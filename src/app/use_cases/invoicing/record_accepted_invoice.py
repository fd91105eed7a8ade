"""RecordAcceptedInvoice Use Case

Durably records an invoice the tax gateway has accepted, together with the
owner's statistics delta, in one transaction.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.alert_service import AlertService, PersistenceFailureAlert
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.user_stats_repository import UserStatsRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceDTO, RecordAcceptedInvoiceCommandDTO
from .mappers import build_invoice, same_invoice_content, stats_bucket_deltas, to_invoice_dto

logger = logging.getLogger(__name__)


class InvoiceNumberConflict(Exception):
    """The gateway invoice number is already recorded for another user or invoice"""


class RecordAcceptedInvoice:
    """
    Use Case: Record a gateway-accepted invoice

    Business Rules:
    1. Idempotent by invoice number: an invoice already recorded for the same
       owner with the same amount and line items is returned unchanged and
       statistics are not touched again. A different invoice under that
       number is a conflict.
    2. Invoice header, line items and statistics delta are committed together
    3. Status is Paid; statistics get invoice_count += 1, paid_amount += amount
    4. Any failure rolls back, is logged as CRITICAL and raised to operators
       through the alert service with a replayable record

    Flow:
    1. Build the invoice entity from the draft
    2. Look up the invoice number and compare contents
    3. Insert invoice and line items
    4. Apply the statistics delta
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        stats_repo: UserStatsRepository,
        alert_service: Optional[AlertService] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.stats_repo = stats_repo
        self.alert_service = alert_service

    async def execute(self, command: RecordAcceptedInvoiceCommandDTO) -> Result[InvoiceDTO]:
        try:
            # Step 1: Build entity
            invoice = build_invoice(
                invoice_id=command.invoice_id,
                user_id=command.user_id,
                draft=command.draft,
                status=InvoiceStatus.PAID,
                gateway_dated=command.gateway_dated,
                is_mock=command.is_mock,
            )

            # Step 2: Replays of an already recorded invoice are no-ops
            existing = await self.invoice_repo.get_by_id(command.invoice_id)
            if existing:
                if existing.user_id != command.user_id:
                    raise InvoiceNumberConflict(
                        f"Invoice {command.invoice_id} is already recorded for another user"
                    )
                if not same_invoice_content(existing, invoice):
                    raise InvoiceNumberConflict(
                        f"Invoice {command.invoice_id} is already recorded with different contents"
                    )
                logger.info(f"Invoice {command.invoice_id} already recorded, skipping write")
                return Return.ok(to_invoice_dto(existing))

            # Step 3: Header and line items
            created_invoice = await self.invoice_repo.create(invoice)

            # Step 4: Statistics delta in the same transaction
            paid_delta, pending_delta = stats_bucket_deltas(created_invoice.status, created_invoice.amount)
            await self.stats_repo.apply_delta(
                command.user_id,
                invoice_count_delta=1,
                paid_delta=paid_delta,
                pending_delta=pending_delta,
            )

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Recorded invoice {created_invoice.id} for user {command.user_id} "
                f"(amount={created_invoice.amount})"
            )
            return Return.ok(to_invoice_dto(created_invoice))

        except Exception as e:
            await self.uow.rollback()
            logger.critical(
                f"Invoice {command.invoice_id} was accepted by the tax gateway but could not be "
                f"recorded for user {command.user_id}: {e}"
            )
            await self._alert(command, str(e))
            return Return.err(
                Error(
                    code="PERSISTENCE_FAILED",
                    message=f"Invoice {command.invoice_id} was accepted by the tax gateway but could "
                            f"not be saved. Operators have been notified; do not resubmit it.",
                    reason=str(e),
                    details={"invoice_id": command.invoice_id},
                )
            )

    async def _alert(self, command: RecordAcceptedInvoiceCommandDTO, reason: str) -> None:
        if self.alert_service is None:
            return
        invoice = build_invoice(
            invoice_id=command.invoice_id,
            user_id=command.user_id,
            draft=command.draft,
            status=InvoiceStatus.PAID,
        )
        alert = PersistenceFailureAlert(
            invoice_id=command.invoice_id,
            user_id=command.user_id,
            amount=invoice.amount,
            reason=reason,
            record=command.model_dump(mode="json"),
        )
        try:
            await self.alert_service.send_persistence_failure_alert(alert)
        except Exception as e:
            logger.error(f"Failed to send persistence failure alert for {command.invoice_id}: {e}")
