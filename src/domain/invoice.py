"""Invoice Domain Entity

Tax invoice accepted by the digital-invoicing gateway, with embedded
seller and buyer details.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlmodel import Field, Column, Index, Relationship
from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel

if TYPE_CHECKING:
    from src.domain.invoice_line import InvoiceLineItem


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


class InvoiceType(str, Enum):
    """Document types accepted by the gateway"""
    SALE_INVOICE = "Sale Invoice"
    DEBIT_NOTE = "Debit Note"


class BuyerRegistrationType(str, Enum):
    """Sales tax registration of the buyer"""
    REGISTERED = "Registered"
    UNREGISTERED = "Unregistered"


class Invoice(BaseModel, table=True):
    """
    Invoice - Gateway-accepted tax invoice owned by one user

    Domain Rules:
    - id is the gateway invoice number (or a local fallback number)
    - Created with status=Paid on gateway acceptance
    - amount = sum(line.total + line.sales_tax)
    - Line items are removed together with the invoice
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_user_id', 'user_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_created_at', 'created_at'),
    )

    id: str = Field(
        sa_column=Column(String(100), primary_key=True),
        description="Invoice number assigned by the gateway"
    )

    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        description="Owning user"
    )

    customer_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Buyer name, kept for listings"
    )

    invoice_type: InvoiceType = Field(
        default=InvoiceType.SALE_INVOICE,
        description="Sale Invoice or Debit Note"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Invoice date sent to the gateway"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Invoice status (Pending, Paid, Overdue)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Grand total including sales tax"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1000), nullable=True),
    )

    seller_name: str = Field(sa_column=Column(String(255), nullable=False))
    seller_address: str = Field(sa_column=Column(String(500), nullable=False))
    seller_email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    seller_ntn: str = Field(sa_column=Column(String(20), nullable=False))
    seller_province: str = Field(sa_column=Column(String(100), nullable=False))

    buyer_name: str = Field(sa_column=Column(String(255), nullable=False))
    buyer_address: str = Field(sa_column=Column(String(500), nullable=False))
    buyer_email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    buyer_ntn: str = Field(default="", sa_column=Column(String(20), nullable=False, default=""))
    buyer_province: str = Field(sa_column=Column(String(100), nullable=False))
    buyer_registration_type: BuyerRegistrationType = Field(
        default=BuyerRegistrationType.REGISTERED,
    )

    gateway_dated: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Timestamp returned by the gateway on acceptance"
    )

    is_mock: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Accepted by the mock gateway (no credentials configured)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    line_items: List["InvoiceLineItem"] = Relationship(
        back_populates="invoice",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "InvoiceLineItem.position",
            "lazy": "selectin",
        },
    )
