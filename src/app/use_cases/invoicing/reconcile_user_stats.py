"""ReconcileUserStats Use Case

Compares every user's stored invoice counters with the counters derived from
the invoices table.
"""

import logging
import time
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_stats_repository import UserStatsRepository
from .dtos import StatsDiscrepancyDTO, StatsReconciliationResultDTO
from .mappers import to_stats_dto

logger = logging.getLogger(__name__)


class ReconcileUserStats:
    """
    Use Case: Reconcile user statistics against invoices

    Business Rules:
    1. Checks every user carrying counters
    2. A discrepancy is any difference in count, paid or pending amount
    3. With repair=False nothing is modified
    4. With repair=True mismatching users are recomputed and committed

    Flow:
    1. Get all user ids
    2. For each user:
       a. Read stored counters
       b. Calculate counters from invoices
       c. If mismatch, record discrepancy (and recompute when repairing)
    3. Return reconciliation result with all discrepancies
    """

    def __init__(self, uow: UnitOfWork, stats_repo: UserStatsRepository):
        self.uow = uow
        self.stats_repo = stats_repo

    async def execute(self, repair: bool = False) -> Result[StatsReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting user statistics reconciliation")

            # Step 1: Users
            user_ids = await self.stats_repo.list_user_ids()
            logger.info(f"Found {len(user_ids)} users to reconcile")

            # Step 2: Compare
            discrepancies: list[StatsDiscrepancyDTO] = []

            for user_id in user_ids:
                stored = await self.stats_repo.get(user_id)
                if stored is None:
                    continue
                calculated = await self.stats_repo.calculate(user_id)

                if stored == calculated:
                    continue

                logger.warning(
                    f"Stats discrepancy for user {user_id}: "
                    f"stored=({stored.invoice_count}, {stored.paid_amount}, {stored.pending_amount}) "
                    f"calculated=({calculated.invoice_count}, {calculated.paid_amount}, "
                    f"{calculated.pending_amount})"
                )

                if repair:
                    await self.stats_repo.recompute(user_id)

                discrepancies.append(
                    StatsDiscrepancyDTO(
                        user_id=user_id,
                        stored=to_stats_dto(stored),
                        calculated=to_stats_dto(calculated),
                        repaired=repair,
                    )
                )

            if repair and discrepancies:
                await self.uow.commit()

            # Step 3: Build response
            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(user_ids)} users in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(user_ids)} users consistent "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                StatsReconciliationResultDTO(
                    total_users_checked=len(user_ids),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            if repair:
                await self.uow.rollback()
            logger.error(f"User statistics reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile user statistics",
                    reason=str(e),
                )
            )
