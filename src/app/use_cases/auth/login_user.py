"""LoginUser Use Case"""

import logging
import uuid
from datetime import datetime, timedelta
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.security import PasswordHasher, TokenService
from src.app.repositories.session_repository import SessionRepository
from src.app.repositories.user_repository import UserRepository
from src.domain.session import Session
from .dtos import LoginCommandDTO, LoginResultDTO
from .mappers import to_auth_user

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class LoginUser:
    """
    Use Case: Log in with email and password

    Business Rules:
    1. Unknown email and wrong password give the same error
    2. A successful login updates last_login and persists a session that
       expires after session_ttl
    3. The token carries user id, email, role and a unique jti
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        session_ttl: timedelta = timedelta(days=7),
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.session_ttl = session_ttl

    async def execute(self, command: LoginCommandDTO) -> Result[LoginResultDTO]:
        email = command.email.strip().lower()
        try:
            user = await self.user_repo.get_by_email(email)
            if not user or not self.password_hasher.verify(command.password, user.password_hash):
                logger.info(f"Failed login attempt for {email}")
                return Return.err(Error(code="UNAUTHORIZED", message=INVALID_CREDENTIALS))

            now = datetime.utcnow()
            expires_at = now + self.session_ttl
            auth_user = to_auth_user(user)

            token = self.token_service.issue(
                {
                    "sub": user.id,
                    "email": user.email,
                    "role": auth_user.role.value,
                    "jti": uuid.uuid4().hex,
                },
                expires_at=expires_at,
            )

            user.last_login = now
            user.updated_at = now
            await self.user_repo.update(user)
            await self.session_repo.create(
                Session(user_id=user.id, token=token, expires_at=expires_at)
            )
            await self.uow.commit()

            logger.info(f"User {user.id} logged in")
            return Return.ok(LoginResultDTO(user=auth_user, token=token, expires_at=expires_at))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Login failed for {email}: {e}")
            return Return.err(
                Error(
                    code="LOGIN_FAILED",
                    message="An error occurred during login",
                    reason=str(e),
                )
            )
