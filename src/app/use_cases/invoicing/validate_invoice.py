"""ValidateInvoice Use Case

Local, side-effect free validation of an invoice draft.
"""

from decimal import Decimal
from typing import List
from src.domain.invoice import BuyerRegistrationType
from .dtos import FieldErrorDTO, InvoiceDraftDTO, InvoicePartyDTO, ValidationResultDTO
from .pricing import parse_rate, to_quantity

NTN_MIN_LENGTH = 7
NTN_MAX_LENGTH = 13


class ValidateInvoice:
    """
    Use Case: Validate an invoice draft before it reaches the gateway

    Business Rules:
    1. At least one line item
    2. Seller name, address, province required; seller NTN/CNIC 7-13 characters
    3. Buyer name, address, province required
    4. Registered buyers need an NTN/CNIC of 7-13 characters; unregistered
       buyers may leave it empty
    5. Every line item needs a description, quantity > 0, unit price >= 0,
       HS code, percentage rate, unit of measure and sale type
       (quantity is judged at its stored precision of four decimals)

    The result only depends on the draft, so repeated calls agree.
    """

    def execute(self, draft: InvoiceDraftDTO) -> ValidationResultDTO:
        errors: List[FieldErrorDTO] = []

        self._check_party(draft.seller, "seller", errors)
        self._check_ntn(draft.seller.ntn, "seller.ntn", required=True, errors=errors)

        self._check_party(draft.buyer, "buyer", errors)
        registered = draft.buyer_registration_type == BuyerRegistrationType.REGISTERED
        if registered and not draft.buyer.ntn.strip():
            errors.append(FieldErrorDTO(
                field="buyer.ntn",
                message="NTN/CNIC is required for registered buyers",
            ))
        else:
            self._check_ntn(draft.buyer.ntn, "buyer.ntn", required=registered, errors=errors)

        if not draft.line_items:
            errors.append(FieldErrorDTO(
                field="line_items",
                message="At least one line item is required",
            ))

        for index, item in enumerate(draft.line_items):
            prefix = f"line_items.{index}"
            if not item.description.strip():
                errors.append(FieldErrorDTO(field=f"{prefix}.description", message="Description is required"))
            if to_quantity(item.quantity) <= Decimal("0"):
                errors.append(FieldErrorDTO(field=f"{prefix}.quantity", message="Quantity must be positive"))
            if item.unit_price < Decimal("0"):
                errors.append(FieldErrorDTO(field=f"{prefix}.unit_price", message="Price must be non-negative"))
            if not item.hs_code.strip():
                errors.append(FieldErrorDTO(field=f"{prefix}.hs_code", message="HS Code is required"))
            if not item.rate.strip():
                errors.append(FieldErrorDTO(field=f"{prefix}.rate", message="Rate is required"))
            elif parse_rate(item.rate) is None:
                errors.append(FieldErrorDTO(
                    field=f"{prefix}.rate",
                    message="Rate must be a percentage, e.g. '18%'",
                ))
            if not item.uom.strip():
                errors.append(FieldErrorDTO(field=f"{prefix}.uom", message="UoM is required"))
            if not item.sale_type.strip():
                errors.append(FieldErrorDTO(field=f"{prefix}.sale_type", message="Sale Type is required"))

        return ValidationResultDTO(is_valid=not errors, errors=errors)

    def _check_party(self, party: InvoicePartyDTO, prefix: str, errors: List[FieldErrorDTO]) -> None:
        if not party.name.strip():
            errors.append(FieldErrorDTO(field=f"{prefix}.name", message="Name is required"))
        if not party.address.strip():
            errors.append(FieldErrorDTO(field=f"{prefix}.address", message="Address is required"))
        if not party.province.strip():
            errors.append(FieldErrorDTO(field=f"{prefix}.province", message="Province is required"))

    def _check_ntn(self, ntn: str, field: str, required: bool, errors: List[FieldErrorDTO]) -> None:
        value = (ntn or "").strip()
        if not value and not required:
            return
        if len(value) < NTN_MIN_LENGTH:
            errors.append(FieldErrorDTO(
                field=field,
                message=f"NTN/CNIC must be at least {NTN_MIN_LENGTH} characters",
            ))
        elif len(value) > NTN_MAX_LENGTH:
            errors.append(FieldErrorDTO(
                field=field,
                message=f"NTN/CNIC cannot exceed {NTN_MAX_LENGTH} characters",
            ))
