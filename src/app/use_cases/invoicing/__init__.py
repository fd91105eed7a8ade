"""Invoicing domain use cases"""
from .validate_invoice import ValidateInvoice
from .validate_with_gateway import ValidateInvoiceWithGateway
from .submit_invoice import SubmitInvoice, generate_fallback_invoice_id
from .record_accepted_invoice import RecordAcceptedInvoice
from .list_invoices import ListInvoices, ListRecentInvoices
from .get_invoice import GetInvoice
from .update_invoice_status import UpdateInvoiceStatus
from .delete_invoice import DeleteInvoice
from .recompute_user_stats import RecomputeUserStats
from .reconcile_user_stats import ReconcileUserStats
from .gateway_payload import build_gateway_payload
from .dtos import (
    InvoicePartyDTO,
    LineItemDTO,
    InvoiceDraftDTO,
    FieldErrorDTO,
    ValidationResultDTO,
    SubmitInvoiceCommandDTO,
    RecordAcceptedInvoiceCommandDTO,
    InvoiceLineItemDTO,
    InvoiceDTO,
    SubmissionResultDTO,
    GatewayValidationDTO,
    PaginatedInvoicesDTO,
    UpdateInvoiceStatusCommandDTO,
    UserStatsDTO,
    StatsDiscrepancyDTO,
    StatsReconciliationResultDTO,
)

__all__ = [
    "ValidateInvoice",
    "ValidateInvoiceWithGateway",
    "SubmitInvoice",
    "generate_fallback_invoice_id",
    "RecordAcceptedInvoice",
    "ListInvoices",
    "ListRecentInvoices",
    "GetInvoice",
    "UpdateInvoiceStatus",
    "DeleteInvoice",
    "RecomputeUserStats",
    "ReconcileUserStats",
    "build_gateway_payload",
    "InvoicePartyDTO",
    "LineItemDTO",
    "InvoiceDraftDTO",
    "FieldErrorDTO",
    "ValidationResultDTO",
    "SubmitInvoiceCommandDTO",
    "RecordAcceptedInvoiceCommandDTO",
    "InvoiceLineItemDTO",
    "InvoiceDTO",
    "SubmissionResultDTO",
    "GatewayValidationDTO",
    "PaginatedInvoicesDTO",
    "UpdateInvoiceStatusCommandDTO",
    "UserStatsDTO",
    "StatsDiscrepancyDTO",
    "StatsReconciliationResultDTO",
]
