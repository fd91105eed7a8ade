"""GetPlatformStats Use Case"""
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.user_repository import UserRepository
from src.domain.user import UserRole
from .dtos import PlatformStatsDTO


class GetPlatformStats:
    """
    Use Case: Platform statistics

    Users are counted by role 'user' only; revenue is read from the
    invoices table, not from the denormalized counters.
    """

    def __init__(self, user_repo: UserRepository, invoice_repo: InvoiceRepository):
        self.user_repo = user_repo
        self.invoice_repo = invoice_repo

    async def execute(self) -> Result[PlatformStatsDTO]:
        return Return.ok(
            PlatformStatsDTO(
                total_users=await self.user_repo.count_by_role(UserRole.USER),
                total_invoices=await self.invoice_repo.count_all(),
                total_revenue=await self.invoice_repo.total_paid_amount(),
            )
        )
