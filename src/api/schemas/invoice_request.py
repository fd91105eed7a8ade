"""Request schemas for Invoice API"""

from pydantic import BaseModel, Field
from src.domain.invoice import InvoiceStatus


class UpdateInvoiceStatusRequestSchema(BaseModel):
    """
    Request schema for changing an invoice status

    Used for PATCH /invoices/{invoice_id}/status endpoint.
    """

    status: InvoiceStatus = Field(..., description="Pending, Paid or Overdue")

    class Config:
        json_schema_extra = {"example": {"status": "Overdue"}}


class ReconcileStatsRequestSchema(BaseModel):
    repair: bool = Field(default=False, description="Overwrite mismatching counters")
