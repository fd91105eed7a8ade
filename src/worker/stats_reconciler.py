"""User Statistics Reconciliation Background Worker

Periodically compares every user's invoice counters with the invoices
table and repairs drift. Also purges expired login sessions.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.session_repository import SqlAlchemySessionRepository
from src.adapter.repositories.user_stats_repository import SqlAlchemyUserStatsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.auth import PurgeExpiredSessions
from src.app.use_cases.invoicing import ReconcileUserStats, StatsReconciliationResultDTO

logger = logging.getLogger(__name__)


class StatsReconcilerWorker:
    """
    Background worker for user statistics reconciliation

    Features:
    - Compares stored counters against counters derived from invoices
    - Repairs discrepancies when repair is enabled
    - Can run once or continuously
    - Configurable interval (default: daily)

    Usage:
        # Run once
        worker = StatsReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = StatsReconcilerWorker()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        repair: Optional[bool] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            repair: Recompute mismatching users (defaults to
                    ApplicationConfig.STATS_RECONCILIATION_REPAIR)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.repair = ApplicationConfig.STATS_RECONCILIATION_REPAIR if repair is None else repair

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info(f"StatsReconcilerWorker initialized (repair={self.repair})")

    async def run_once(self) -> StatsReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            StatsReconciliationResultDTO with reconciliation results
        """
        if not ApplicationConfig.STATS_RECONCILIATION_ENABLED:
            logger.info("Stats reconciliation is disabled, skipping")
            return StatsReconciliationResultDTO(
                total_users_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileUserStats(
                uow=SqlAlchemyUnitOfWork(session),
                stats_repo=SqlAlchemyUserStatsRepository(session),
            )

            result = await use_case.execute(repair=self.repair)

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} user statistics discrepancies found!"
                )
                for d in response.discrepancies:
                    logger.error(
                        f"  - User {d.user_id}: "
                        f"stored=({d.stored.invoice_count}, {d.stored.paid_amount}, {d.stored.pending_amount}) "
                        f"calculated=({d.calculated.invoice_count}, {d.calculated.paid_amount}, "
                        f"{d.calculated.pending_amount}) repaired={d.repaired}"
                    )

            return response

    async def purge_sessions(self) -> int:
        async with self.async_session_factory() as session:
            result = await PurgeExpiredSessions(
                SqlAlchemyUnitOfWork(session), SqlAlchemySessionRepository(session)
            ).execute()
            if result.is_err():
                logger.error(f"Session purge failed: {result.error.message}")
                return 0
            return result.value

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between reconciliation runs (default: 24 hours)
        """
        logger.info(
            f"Starting continuous stats reconciliation with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                removed = await self.purge_sessions()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_users_checked} users, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms; purged {removed} sessions"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("StatsReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.stats_reconciler --once

        # Run continuously (default: STATS_RECONCILIATION_INTERVAL_SECONDS)
        python -m src.worker.stats_reconciler

        # Run continuously with custom interval (in seconds)
        python -m src.worker.stats_reconciler --interval 3600

        # Report only, do not repair
        python -m src.worker.stats_reconciler --once --no-repair
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, ApplicationConfig.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="User Statistics Reconciliation Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.STATS_RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    parser.add_argument(
        "--no-repair", action="store_true", help="Report discrepancies without repairing them"
    )
    args = parser.parse_args()

    worker = StatsReconcilerWorker(repair=False if args.no_repair else None)

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Total users checked: {result.total_users_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            if result.discrepancies:
                print("\nDiscrepancies:")
                for d in result.discrepancies:
                    print(
                        f"  - User {d.user_id}: "
                        f"stored={d.stored.invoice_count}/{d.stored.paid_amount}/{d.stored.pending_amount}, "
                        f"calculated={d.calculated.invoice_count}/{d.calculated.paid_amount}/"
                        f"{d.calculated.pending_amount}, repaired={d.repaired}"
                    )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
