"""UpdateInvoiceStatus Use Case

Moves an invoice between Paid, Pending and Overdue and keeps the owner's
statistics in step.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.user_stats_repository import UserStatsRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceDTO, UpdateInvoiceStatusCommandDTO
from .mappers import stats_bucket_deltas, to_invoice_dto

logger = logging.getLogger(__name__)


class UpdateInvoiceStatus:
    """
    Use Case: Change invoice status

    Business Rules:
    1. Only the owner can change the status
    2. Moving between Paid and Pending/Overdue moves the amount between the
       paid and pending counters; Pending <-> Overdue changes no counter
    3. Status change and counter update commit together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        stats_repo: UserStatsRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.stats_repo = stats_repo

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[InvoiceDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, user_id=command.user_id)
            if not invoice:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice {command.invoice_id} not found",
                    )
                )

            previous_status = InvoiceStatus(invoice.status)
            if previous_status == command.status:
                return Return.ok(to_invoice_dto(invoice))

            old_paid, old_pending = stats_bucket_deltas(previous_status, invoice.amount)
            new_paid, new_pending = stats_bucket_deltas(command.status, invoice.amount)

            updated = await self.invoice_repo.update_status(
                command.invoice_id, command.status, user_id=command.user_id
            )
            await self.stats_repo.apply_delta(
                command.user_id,
                paid_delta=new_paid - old_paid,
                pending_delta=new_pending - old_pending,
            )
            await self.uow.commit()

            logger.info(
                f"Invoice {command.invoice_id} moved from {previous_status.value} "
                f"to {command.status.value}"
            )
            return Return.ok(to_invoice_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update status of invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="STATUS_UPDATE_FAILED",
                    message="Failed to update invoice status",
                    reason=str(e),
                )
            )
