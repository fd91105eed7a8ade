"""User profile use cases"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.security import PasswordHasher
from src.app.repositories.user_repository import UserRepository
from src.app.use_cases.auth.dtos import UserProfileDTO
from src.app.use_cases.auth.mappers import to_profile_dto
from .dtos import UpdateProfileCommandDTO

logger = logging.getLogger(__name__)


class GetUserProfile:

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self, user_id: str) -> Result[UserProfileDTO]:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            return Return.err(Error(code="USER_NOT_FOUND", message=f"User {user_id} not found"))
        return Return.ok(to_profile_dto(user))


class UpdateUserProfile:
    """
    Use Case: Update own profile

    Name, email and password can be changed. A new email must not belong
    to another account. Counters are never touched here.
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository, password_hasher: PasswordHasher):
        self.uow = uow
        self.user_repo = user_repo
        self.password_hasher = password_hasher

    async def execute(self, user_id: str, command: UpdateProfileCommandDTO) -> Result[UserProfileDTO]:
        try:
            user = await self.user_repo.get_by_id(user_id)
            if not user:
                return Return.err(Error(code="USER_NOT_FOUND", message=f"User {user_id} not found"))

            if command.email is not None:
                email = command.email.strip().lower()
                owner = await self.user_repo.get_by_email(email)
                if owner and owner.id != user_id:
                    return Return.err(
                        Error(code="USER_ALREADY_EXISTS", message="User with this email already exists")
                    )
                user.email = email

            if command.name is not None:
                user.name = command.name.strip()

            if command.password is not None:
                user.password_hash = self.password_hasher.hash(command.password)

            user.updated_at = datetime.utcnow()
            updated = await self.user_repo.update(user)
            await self.uow.commit()

            return Return.ok(to_profile_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update profile of user {user_id}: {e}")
            return Return.err(
                Error(code="PROFILE_UPDATE_FAILED", message="Failed to update profile", reason=str(e))
            )
