"""Admin API Routes

Account management, platform statistics and recovery operations.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import require_admin
from src.api.error import raise_for_error
from src.api.schemas.auth_request import CreateUserRequestSchema
from src.api.schemas.invoice_request import ReconcileStatsRequestSchema
from src.app.services.security import PasswordHasher
from src.app.use_cases.admin import (
    DeleteUser,
    GetPlatformStats,
    ListUsers,
    PlatformStatsDTO,
    UserListDTO,
)
from src.app.use_cases.auth import (
    AuthUserDTO,
    PurgeExpiredSessions,
    RegisterUser,
    RegisterUserCommandDTO,
)
from src.app.use_cases.invoicing import (
    InvoiceDTO,
    RecordAcceptedInvoice,
    RecordAcceptedInvoiceCommandDTO,
    ReconcileUserStats,
    StatsReconciliationResultDTO,
)
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.session_repository import SqlAlchemySessionRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.user_stats_repository import SqlAlchemyUserStatsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_password_hasher, get_session
from src.domain.user import UserRole

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=UserListDTO)
async def list_users(
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """All accounts with their invoice counters, newest registration first."""
    result = await ListUsers(SqlAlchemyUserRepository(session)).execute()
    return result.value


@router.post("/users", response_model=AuthUserDTO, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequestSchema,
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    use_case = RegisterUser(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session), password_hasher)
    result = await use_case.execute(
        RegisterUserCommandDTO(
            name=request.name,
            email=request.email,
            password=request.password,
            role=UserRole(request.role),
        )
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """Delete an account and everything it owns. Admins cannot delete themselves."""
    use_case = DeleteUser(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session))
    result = await use_case.execute(admin.user_id, user_id)
    if result.is_err():
        raise_for_error(result.error)


@router.get("/stats", response_model=PlatformStatsDTO)
async def platform_stats(
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetPlatformStats(SqlAlchemyUserRepository(session), SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute()
    return result.value


@router.post("/stats/reconcile", response_model=StatsReconciliationResultDTO)
async def reconcile_stats(
    request: ReconcileStatsRequestSchema,
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """
    Compare every user's counters with their invoices.

    With repair=true, mismatching counters are recomputed.
    """
    use_case = ReconcileUserStats(SqlAlchemyUnitOfWork(session), SqlAlchemyUserStatsRepository(session))
    result = await use_case.execute(repair=request.repair)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/invoices/recover", response_model=InvoiceDTO, status_code=status.HTTP_201_CREATED)
async def recover_invoice(
    record: RecordAcceptedInvoiceCommandDTO,
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """
    Replay an invoice the gateway accepted but that was not recorded.

    The body is the `record` of a persistence failure alert. Replaying an
    invoice that is already recorded changes nothing.
    """
    use_case = RecordAcceptedInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        stats_repo=SqlAlchemyUserStatsRepository(session),
    )
    result = await use_case.execute(record)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sessions/purge", status_code=status.HTTP_200_OK)
async def purge_sessions(
    admin: AuthUserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    use_case = PurgeExpiredSessions(SqlAlchemyUnitOfWork(session), SqlAlchemySessionRepository(session))
    result = await use_case.execute()
    if result.is_err():
        raise_for_error(result.error)
    return {"removed": result.value}
