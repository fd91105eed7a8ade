"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator
from src.domain.invoice import BuyerRegistrationType, InvoiceStatus, InvoiceType


class InvoicePartyDTO(BaseModel):
    """Seller or buyer as entered on the invoice"""

    name: str = Field(default="", description="Business name")
    address: str = Field(default="", description="Postal address")
    email: Optional[str] = Field(default=None, description="Optional contact email")
    ntn: str = Field(default="", description="NTN or CNIC")
    province: str = Field(default="", description="Province")


class LineItemDTO(BaseModel):
    """Line item of an invoice draft"""

    description: str = Field(default="")
    quantity: Decimal = Field(default=Decimal("0"))
    unit_price: Decimal = Field(default=Decimal("0"), description="Price per unit excluding sales tax")
    hs_code: str = Field(default="", description="HS classification code")
    rate: str = Field(default="", description="Sales tax rate, e.g. '18%'")
    uom: str = Field(default="", description="Unit of measure")
    sale_type: str = Field(default="", description="Sale type classification")


class InvoiceDraftDTO(BaseModel):
    """
    Invoice composed by the user, not yet submitted

    Fields are deliberately unconstrained: ValidateInvoice reports problems
    as field-level errors.
    """

    seller: InvoicePartyDTO
    buyer: InvoicePartyDTO
    buyer_registration_type: BuyerRegistrationType = Field(default=BuyerRegistrationType.REGISTERED)
    invoice_type: InvoiceType = Field(default=InvoiceType.SALE_INVOICE)
    issue_date: date = Field(default_factory=date.today)
    due_date: Optional[date] = Field(default=None, description="Defaults to issue_date + 30 days")
    notes: Optional[str] = Field(default=None)
    invoice_ref_no: Optional[str] = Field(default=None, description="Referenced invoice for debit notes")
    scenario_id: Optional[str] = Field(default=None, description="Sandbox scenario identifier")
    line_items: List[LineItemDTO] = Field(default_factory=list)

    @model_validator(mode="after")
    def default_due_date(self):
        if self.due_date is None:
            self.due_date = self.issue_date + timedelta(days=30)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "seller": {
                    "name": "Pak Textile Solutions",
                    "address": "123 Textile Ave, Faisalabad",
                    "email": "billing@paktextile.com",
                    "ntn": "1234567-8",
                    "province": "Punjab"
                },
                "buyer": {
                    "name": "Lahore Garments",
                    "address": "45 Mall Road, Lahore",
                    "ntn": "7654321",
                    "province": "Punjab"
                },
                "buyer_registration_type": "Registered",
                "issue_date": "2024-05-01",
                "line_items": [
                    {
                        "description": "Cotton fabric",
                        "quantity": "2",
                        "unit_price": "5000",
                        "hs_code": "5208.1100",
                        "rate": "18%",
                        "uom": "pcs",
                        "sale_type": "Goods at standard rate (default)"
                    }
                ]
            }
        }


class FieldErrorDTO(BaseModel):
    field: str = Field(..., description="Dotted path of the offending field, e.g. buyer.ntn")
    message: str = Field(..., description="Human-readable problem")


class ValidationResultDTO(BaseModel):
    is_valid: bool
    errors: List[FieldErrorDTO] = Field(default_factory=list)


class SubmitInvoiceCommandDTO(BaseModel):
    """Command DTO for submitting a draft to the gateway"""

    user_id: str = Field(..., description="Authenticated owner")
    draft: InvoiceDraftDTO


class RecordAcceptedInvoiceCommandDTO(BaseModel):
    """
    Command DTO for recording an invoice the gateway already accepted

    invoice_id is the gateway invoice number and the idempotency key of
    the write.
    """

    user_id: str
    invoice_id: str
    draft: InvoiceDraftDTO
    gateway_dated: Optional[str] = None
    is_mock: bool = False


class InvoiceLineItemDTO(BaseModel):
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    sales_tax: Decimal
    hs_code: str
    rate: str
    uom: str
    sale_type: str


class InvoiceDTO(BaseModel):
    """Response DTO for a recorded invoice"""

    id: str
    user_id: str
    customer_name: str
    invoice_type: str
    issue_date: date
    due_date: date
    status: str
    amount: Decimal
    notes: Optional[str] = None
    seller: InvoicePartyDTO
    buyer: InvoicePartyDTO
    buyer_registration_type: str
    gateway_dated: Optional[str] = None
    is_mock: bool = False
    line_items: List[InvoiceLineItemDTO] = Field(default_factory=list)
    created_at: datetime


class SubmissionResultDTO(BaseModel):
    """Response DTO for a successful submission"""

    invoice_id: str = Field(..., description="Gateway invoice number (or local fallback)")
    status: str
    amount: Decimal = Field(..., description="Grand total including sales tax")
    is_mock: bool = Field(default=False, description="Accepted by the mock gateway")
    gateway_response: Dict[str, Any] = Field(..., description="Full gateway response body")


class GatewayValidationDTO(BaseModel):
    """Response DTO for a dry-run validation against the gateway"""

    is_valid: bool
    is_mock: bool = False
    gateway_response: Dict[str, Any]


class PaginatedInvoicesDTO(BaseModel):
    invoices: List[InvoiceDTO]
    total: int
    page: int
    limit: int
    has_more: bool


class UpdateInvoiceStatusCommandDTO(BaseModel):
    user_id: str
    invoice_id: str
    status: InvoiceStatus


class UserStatsDTO(BaseModel):
    user_id: str
    invoice_count: int
    paid_amount: Decimal
    pending_amount: Decimal


class StatsDiscrepancyDTO(BaseModel):
    """Stored counters that differ from the counters derived from invoices"""

    user_id: str
    stored: UserStatsDTO
    calculated: UserStatsDTO
    repaired: bool = False


class StatsReconciliationResultDTO(BaseModel):
    total_users_checked: int
    discrepancies_found: int
    discrepancies: List[StatsDiscrepancyDTO] = Field(default_factory=list)
    reconciliation_time: datetime
    execution_time_ms: int
