"""Invoice Line Item Domain Entity

Tracks individual line items within an invoice.
"""

from decimal import Decimal
from typing import Optional, TYPE_CHECKING
from sqlmodel import Field, Column, Index, Relationship
from sqlalchemy import ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, BigIntegerPK

if TYPE_CHECKING:
    from src.domain.invoice import Invoice


class InvoiceLineItem(BaseModel, table=True):
    """
    Invoice Line Item - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - total = quantity * unit_price (rounded to the cent)
    - sales_tax = total * rate / 100 (rounded to the cent)
    - position keeps the order the items were entered in
    """

    __tablename__ = "invoice_line_items"
    __table_args__ = (
        Index('ix_invoice_line_items_invoice_id', 'invoice_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    invoice_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )

    description: str = Field(sa_column=Column(String(500), nullable=False))

    quantity: Decimal = Field(
        sa_column=Column(Numeric(18, 4), nullable=False),
        description="Quantity (must be > 0)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price per unit excluding sales tax"
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="quantity * unit_price"
    )

    sales_tax: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Sales tax charged on this line"
    )

    hs_code: str = Field(sa_column=Column(String(50), nullable=False))
    rate: str = Field(sa_column=Column(String(20), nullable=False))
    uom: str = Field(sa_column=Column(String(50), nullable=False))
    sale_type: str = Field(sa_column=Column(String(255), nullable=False))

    invoice: Optional["Invoice"] = Relationship(back_populates="line_items")
