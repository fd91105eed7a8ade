"""Get Invoice Use Case"""
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import InvoiceDTO
from .mappers import to_invoice_dto


class GetInvoice:
    """Retrieve one invoice with its line items, scoped to its owner"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, user_id: str, invoice_id: str) -> Result[InvoiceDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id, user_id=user_id)
        if not invoice:
            return Return.err(
                Error(
                    code="INVOICE_NOT_FOUND",
                    message=f"Invoice {invoice_id} not found",
                )
            )
        return Return.ok(to_invoice_dto(invoice))
