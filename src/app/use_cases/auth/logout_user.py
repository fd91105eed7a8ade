"""LogoutUser Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class LogoutUser:
    """Invalidate a session by deleting it. Unknown tokens are not an error."""

    def __init__(self, uow: UnitOfWork, session_repo: SessionRepository):
        self.uow = uow
        self.session_repo = session_repo

    async def execute(self, token: str) -> Result[bool]:
        try:
            deleted = await self.session_repo.delete_by_token(token)
            await self.uow.commit()
            return Return.ok(deleted)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Logout error: {e}")
            return Return.err(Error(code="LOGOUT_FAILED", message="Failed to log out", reason=str(e)))
