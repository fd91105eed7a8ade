"""DeleteInvoice Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.user_stats_repository import UserStatsRepository
from src.domain.invoice import InvoiceStatus
from .mappers import stats_bucket_deltas

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice

    Removes the invoice and its line items and takes it out of the owner's
    counters (-1 invoice, -amount from the bucket of its status) in the same
    transaction.
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

    async def execute(self, user_id: str, invoice_id: str) -> Result[bool]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, user_id=user_id)
            if not invoice:
                return Return.err(
                    Error(code="INVOICE_NOT_FOUND", message=f"Invoice {invoice_id} not found")
                )

            paid, pending = stats_bucket_deltas(InvoiceStatus(invoice.status), invoice.amount)

            await self.invoice_repo.delete(invoice_id, user_id=user_id)
            await self.stats_repo.apply_delta(
                user_id,
                invoice_count_delta=-1,
                paid_delta=-paid,
                pending_delta=-pending,
            )
            await self.uow.commit()

            logger.info(f"Deleted invoice {invoice_id} of user {user_id}")
            return Return.ok(True)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="INVOICE_DELETE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
