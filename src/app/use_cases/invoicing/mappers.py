"""Conversions between invoice drafts, entities and response DTOs"""

from decimal import Decimal
from typing import Optional, Tuple
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLineItem
from .dtos import (
    InvoiceDraftDTO,
    InvoiceDTO,
    InvoiceLineItemDTO,
    InvoicePartyDTO,
    UserStatsDTO,
)
from .pricing import line_sales_tax, line_value, to_cents, to_quantity
from src.app.repositories.user_stats_repository import UserStats


def build_invoice(
    invoice_id: str,
    user_id: str,
    draft: InvoiceDraftDTO,
    status: InvoiceStatus,
    gateway_dated: Optional[str] = None,
    is_mock: bool = False,
) -> Invoice:
    """Invoice entity with line items; amount is the sum of line totals plus tax"""
    line_items = []
    for position, line in enumerate(draft.line_items):
        total = line_value(line.quantity, line.unit_price)
        line_items.append(
            InvoiceLineItem(
                position=position,
                description=line.description,
                quantity=to_quantity(line.quantity),
                unit_price=to_cents(line.unit_price),
                total=total,
                sales_tax=line_sales_tax(total, line.rate),
                hs_code=line.hs_code,
                rate=line.rate,
                uom=line.uom,
                sale_type=line.sale_type,
            )
        )

    amount = sum((item.total + item.sales_tax for item in line_items), Decimal("0.00"))

    return Invoice(
        id=invoice_id,
        user_id=user_id,
        customer_name=draft.buyer.name,
        invoice_type=draft.invoice_type,
        issue_date=draft.issue_date,
        due_date=draft.due_date,
        status=status,
        amount=amount,
        notes=draft.notes,
        seller_name=draft.seller.name,
        seller_address=draft.seller.address,
        seller_email=draft.seller.email,
        seller_ntn=draft.seller.ntn,
        seller_province=draft.seller.province,
        buyer_name=draft.buyer.name,
        buyer_address=draft.buyer.address,
        buyer_email=draft.buyer.email,
        buyer_ntn=draft.buyer.ntn or "",
        buyer_province=draft.buyer.province,
        buyer_registration_type=draft.buyer_registration_type,
        gateway_dated=gateway_dated,
        is_mock=is_mock,
        line_items=line_items,
    )


def _value(enum_or_str) -> str:
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str


def to_invoice_dto(invoice: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        id=invoice.id,
        user_id=invoice.user_id,
        customer_name=invoice.customer_name,
        invoice_type=_value(invoice.invoice_type),
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        status=_value(invoice.status),
        amount=invoice.amount,
        notes=invoice.notes,
        seller=InvoicePartyDTO(
            name=invoice.seller_name,
            address=invoice.seller_address,
            email=invoice.seller_email,
            ntn=invoice.seller_ntn,
            province=invoice.seller_province,
        ),
        buyer=InvoicePartyDTO(
            name=invoice.buyer_name,
            address=invoice.buyer_address,
            email=invoice.buyer_email,
            ntn=invoice.buyer_ntn,
            province=invoice.buyer_province,
        ),
        buyer_registration_type=_value(invoice.buyer_registration_type),
        gateway_dated=invoice.gateway_dated,
        is_mock=invoice.is_mock,
        line_items=[
            InvoiceLineItemDTO(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=item.total,
                sales_tax=item.sales_tax,
                hs_code=item.hs_code,
                rate=item.rate,
                uom=item.uom,
                sale_type=item.sale_type,
            )
            for item in invoice.line_items
        ],
        created_at=invoice.created_at,
    )


def to_stats_dto(stats: UserStats) -> UserStatsDTO:
    return UserStatsDTO(
        user_id=stats.user_id,
        invoice_count=stats.invoice_count,
        paid_amount=stats.paid_amount,
        pending_amount=stats.pending_amount,
    )


def stats_bucket_deltas(status: InvoiceStatus, amount: Decimal) -> Tuple[Decimal, Decimal]:
    """(paid_delta, pending_delta) contributed by an invoice in this status"""
    if status == InvoiceStatus.PAID:
        return amount, Decimal("0")
    return Decimal("0"), amount


def _line_signature(item: InvoiceLineItem) -> tuple:
    return (
        item.description,
        Decimal(item.quantity),
        Decimal(item.unit_price),
        Decimal(item.total),
        Decimal(item.sales_tax),
        item.hs_code,
        item.rate,
    )


def same_invoice_content(stored: Invoice, candidate: Invoice) -> bool:
    """True when both invoices carry the same amount and line items"""
    if Decimal(stored.amount) != Decimal(candidate.amount):
        return False
    stored_lines = sorted(stored.line_items, key=lambda item: item.position)
    candidate_lines = sorted(candidate.line_items, key=lambda item: item.position)
    return [_line_signature(item) for item in stored_lines] == [
        _line_signature(item) for item in candidate_lines
    ]
