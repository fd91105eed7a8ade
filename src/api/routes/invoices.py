"""Invoice API Routes

FastAPI routes for validating, submitting and managing invoices.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_user
from src.api.error import raise_for_error
from src.api.schemas.invoice_request import UpdateInvoiceStatusRequestSchema
from src.app.services.alert_service import AlertService
from src.app.services.tax_gateway import TaxGateway
from src.app.use_cases.auth import AuthUserDTO
from src.app.use_cases.invoicing import (
    DeleteInvoice,
    GetInvoice,
    GatewayValidationDTO,
    InvoiceDraftDTO,
    InvoiceDTO,
    ListInvoices,
    ListRecentInvoices,
    PaginatedInvoicesDTO,
    RecomputeUserStats,
    SubmissionResultDTO,
    SubmitInvoice,
    SubmitInvoiceCommandDTO,
    UpdateInvoiceStatus,
    UpdateInvoiceStatusCommandDTO,
    UserStatsDTO,
    ValidateInvoice,
    ValidateInvoiceWithGateway,
    ValidationResultDTO,
)
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.user_stats_repository import SqlAlchemyUserStatsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_alert_service, get_session, get_tax_gateway
from src.domain.invoice import InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("/validate", response_model=ValidationResultDTO, status_code=status.HTTP_200_OK)
async def validate_invoice(
    draft: InvoiceDraftDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
):
    """
    Validate a draft locally.

    Never calls the gateway. Invalid drafts return 200 with is_valid=false
    and one entry per offending field.
    """
    return ValidateInvoice().execute(draft)


@router.post("/validate/gateway", response_model=GatewayValidationDTO, status_code=status.HTTP_200_OK)
async def validate_invoice_with_gateway(
    draft: InvoiceDraftDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    tax_gateway: TaxGateway = Depends(get_tax_gateway),
):
    """
    Dry run against the gateway's validation endpoint. Nothing is recorded.

    **Returns:**
    - 200: Gateway verdict (is_valid, full gateway response)
    - 400: Local validation failed
    - 503: Gateway unreachable
    """
    result = await ValidateInvoiceWithGateway(tax_gateway).execute(draft)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "",
    response_model=SubmissionResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Local validation failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_FAILED",
                            "message": "Invoice validation failed",
                            "details": {"errors": [{"field": "buyer.ntn", "message": "NTN/CNIC is required for registered buyers"}]}
                        }
                    }
                }
            }
        },
        422: {
            "description": "Rejected by the tax gateway",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "GATEWAY_REJECTED", "message": "Invalid NTN"}}
                }
            }
        },
        500: {
            "description": "Accepted by the gateway but not recorded; do not resubmit",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "PERSISTENCE_FAILED", "message": "Invoice FBR-123 was accepted by the tax gateway but could not be saved."}}
                }
            }
        },
        503: {
            "description": "Tax gateway unreachable; safe to retry",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "GATEWAY_UNREACHABLE", "message": "The tax gateway could not be reached. No invoice was recorded; please try again."}}
                }
            }
        }
    }
)
async def submit_invoice(
    draft: InvoiceDraftDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    tax_gateway: TaxGateway = Depends(get_tax_gateway),
    alert_service: AlertService = Depends(get_alert_service),
):
    """
    Submit an invoice to the tax gateway and record it.

    **Returns:**
    - 201: Accepted and recorded with status Paid
    - 400: Local validation failed (gateway not called)
    - 422: Rejected by the gateway (nothing recorded)
    - 500: Accepted but not recorded (operators alerted)
    - 503: Gateway unreachable (nothing recorded)
    """
    use_case = SubmitInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        stats_repo=SqlAlchemyUserStatsRepository(session),
        tax_gateway=tax_gateway,
        alert_service=alert_service,
    )
    result = await use_case.execute(SubmitInvoiceCommandDTO(user_id=current_user.user_id, draft=draft))
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("", response_model=PaginatedInvoicesDTO, status_code=status.HTTP_200_OK)
async def list_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    customer: Optional[str] = Query(None, description="Buyer name, matched ignoring case"),
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """List the caller's invoices, newest first."""
    result = await ListInvoices(SqlAlchemyInvoiceRepository(session)).execute(
        user_id=current_user.user_id,
        page=page,
        limit=limit,
        status=invoice_status,
        from_date=from_date,
        to_date=to_date,
        customer_name=customer,
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/recent", response_model=List[InvoiceDTO], status_code=status.HTTP_200_OK)
async def list_recent_invoices(
    limit: int = Query(5, ge=1, le=100),
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await ListRecentInvoices(SqlAlchemyInvoiceRepository(session)).execute(
        current_user.user_id, limit=limit
    )
    return result.value


@router.post("/stats/recompute", response_model=UserStatsDTO, status_code=status.HTTP_200_OK)
async def recompute_stats(
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Rebuild the caller's invoice counters from their invoices."""
    use_case = RecomputeUserStats(SqlAlchemyUnitOfWork(session), SqlAlchemyUserStatsRepository(session))
    result = await use_case.execute(current_user.user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{invoice_id}", response_model=InvoiceDTO, status_code=status.HTTP_200_OK)
async def get_invoice(
    invoice_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetInvoice(SqlAlchemyInvoiceRepository(session)).execute(
        current_user.user_id, invoice_id
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{invoice_id}/status", response_model=InvoiceDTO, status_code=status.HTTP_200_OK)
async def update_invoice_status(
    invoice_id: str,
    request: UpdateInvoiceStatusRequestSchema,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Move an invoice between Pending, Paid and Overdue; counters follow."""
    use_case = UpdateInvoiceStatus(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyUserStatsRepository(session),
    )
    result = await use_case.execute(
        UpdateInvoiceStatusCommandDTO(
            user_id=current_user.user_id,
            invoice_id=invoice_id,
            status=request.status,
        )
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = DeleteInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyUserStatsRepository(session),
    )
    result = await use_case.execute(current_user.user_id, invoice_id)
    if result.is_err():
        raise_for_error(result.error)
