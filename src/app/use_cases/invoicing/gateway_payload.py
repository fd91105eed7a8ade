"""Draft to gateway request transformation"""

from decimal import Decimal
from typing import Tuple
from src.app.services.tax_gateway import GatewayInvoiceItem, GatewayInvoicePayload
from .dtos import InvoiceDraftDTO
from .pricing import line_sales_tax, line_value, to_quantity


def build_gateway_payload(draft: InvoiceDraftDTO) -> Tuple[GatewayInvoicePayload, Decimal]:
    """
    Flatten a draft into the gateway request

    Per item: valueSalesExcludingST = quantity * unit price,
    salesTaxApplicable = value * rate / 100, totalValues = value + tax.

    Returns:
        Tuple of (payload, grand total = sum of totalValues)
    """
    items = []
    grand_total = Decimal("0.00")

    for line in draft.line_items:
        value = line_value(line.quantity, line.unit_price)
        tax = line_sales_tax(value, line.rate)
        grand_total += value + tax

        items.append(
            GatewayInvoiceItem(
                hs_code=line.hs_code,
                product_description=line.description,
                rate=line.rate,
                uom=line.uom,
                quantity=float(to_quantity(line.quantity)),
                value_sales_excluding_st=float(value),
                sales_tax_applicable=float(tax),
                total_values=float(value + tax),
                fixed_notified_value_or_retail_price=0,
                sales_tax_withheld_at_source=0,
                sale_type=line.sale_type,
            )
        )

    payload = GatewayInvoicePayload(
        invoice_type=draft.invoice_type.value,
        invoice_date=draft.issue_date.strftime("%Y-%m-%d"),
        seller_ntn_cnic=draft.seller.ntn,
        seller_business_name=draft.seller.name,
        seller_province=draft.seller.province,
        seller_address=draft.seller.address,
        buyer_ntn_cnic=draft.buyer.ntn or None,
        buyer_business_name=draft.buyer.name,
        buyer_province=draft.buyer.province,
        buyer_address=draft.buyer.address,
        buyer_registration_type=draft.buyer_registration_type.value,
        invoice_ref_no=draft.invoice_ref_no,
        scenario_id=draft.scenario_id,
        items=items,
    )

    return payload, grand_total
