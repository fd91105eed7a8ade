"""RecomputeUserStats Use Case

Rebuilds a user's stored counters from their invoices.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_stats_repository import UserStatsRepository
from .dtos import UserStatsDTO
from .mappers import to_stats_dto

logger = logging.getLogger(__name__)


class RecomputeUserStats:
    """
    Use Case: Recompute statistics

    The counters end up equal to what the incremental path would have
    produced had it never failed: count of invoices, sum of Paid amounts,
    sum of Pending and Overdue amounts.
    """

    def __init__(self, uow: UnitOfWork, stats_repo: UserStatsRepository):
        self.uow = uow
        self.stats_repo = stats_repo

    async def execute(self, user_id: str) -> Result[UserStatsDTO]:
        try:
            if await self.stats_repo.get(user_id) is None:
                return Return.err(Error(code="USER_NOT_FOUND", message=f"User {user_id} not found"))

            stats = await self.stats_repo.recompute(user_id)
            await self.uow.commit()

            logger.info(
                f"Recomputed stats for user {user_id}: count={stats.invoice_count}, "
                f"paid={stats.paid_amount}, pending={stats.pending_amount}"
            )
            return Return.ok(to_stats_dto(stats))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to recompute stats for user {user_id}: {e}")
            return Return.err(
                Error(
                    code="STATS_RECOMPUTE_FAILED",
                    message="Failed to recompute user statistics",
                    reason=str(e),
                )
            )
