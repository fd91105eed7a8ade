"""RegisterUser Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.security import PasswordHasher
from src.app.repositories.user_repository import UserRepository
from src.domain.user import User
from .dtos import AuthUserDTO, RegisterUserCommandDTO
from .mappers import to_auth_user

logger = logging.getLogger(__name__)


class RegisterUser:
    """
    Use Case: Register an account

    Business Rules:
    1. Email is unique (case-insensitive)
    2. Only the password hash is stored
    3. Counters start at zero
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository, password_hasher: PasswordHasher):
        self.uow = uow
        self.user_repo = user_repo
        self.password_hasher = password_hasher

    async def execute(self, command: RegisterUserCommandDTO) -> Result[AuthUserDTO]:
        email = command.email.strip().lower()
        try:
            if await self.user_repo.get_by_email(email):
                return Return.err(
                    Error(
                        code="USER_ALREADY_EXISTS",
                        message="User with this email already exists",
                    )
                )

            user = User(
                name=command.name.strip(),
                email=email,
                password_hash=self.password_hasher.hash(command.password),
                role=command.role,
            )
            created = await self.user_repo.create(user)
            await self.uow.commit()

            logger.info(f"Registered user {created.id} with role {command.role.value}")
            return Return.ok(to_auth_user(created))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Registration failed for {email}: {e}")
            return Return.err(
                Error(
                    code="REGISTRATION_FAILED",
                    message="An error occurred during registration",
                    reason=str(e),
                )
            )
