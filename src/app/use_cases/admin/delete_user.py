"""DeleteUser Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class DeleteUser:
    """
    Use Case: Delete an account

    Business Rules:
    1. Admins cannot delete their own account
    2. Invoices, line items, customers, products and sessions of the user
       are deleted with it
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, acting_user_id: str, user_id: str) -> Result[bool]:
        if acting_user_id == user_id:
            return Return.err(
                Error(code="FORBIDDEN", message="Administrators cannot delete their own account")
            )

        try:
            deleted = await self.user_repo.delete(user_id)
            if not deleted:
                return Return.err(Error(code="USER_NOT_FOUND", message=f"User {user_id} not found"))

            await self.uow.commit()
            logger.info(f"User {user_id} deleted by {acting_user_id}")
            return Return.ok(True)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            return Return.err(
                Error(code="USER_DELETE_FAILED", message="Failed to delete user", reason=str(e))
            )
