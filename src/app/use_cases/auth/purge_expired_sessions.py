"""PurgeExpiredSessions Use Case"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class PurgeExpiredSessions:
    """Housekeeping: delete sessions that have expired"""

    def __init__(self, uow: UnitOfWork, session_repo: SessionRepository):
        self.uow = uow
        self.session_repo = session_repo

    async def execute(self) -> Result[int]:
        try:
            removed = await self.session_repo.delete_expired(datetime.utcnow())
            await self.uow.commit()
            if removed:
                logger.info(f"Purged {removed} expired sessions")
            return Return.ok(removed)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to purge expired sessions: {e}")
            return Return.err(
                Error(code="SESSION_PURGE_FAILED", message="Failed to purge sessions", reason=str(e))
            )
