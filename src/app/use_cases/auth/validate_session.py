"""ValidateSession Use Case"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.security import TokenService
from src.app.repositories.session_repository import SessionRepository
from src.app.repositories.user_repository import UserRepository
from .dtos import AuthUserDTO
from .mappers import to_auth_user


class ValidateSession:
    """
    Use Case: Resolve a bearer token to the authenticated user

    A token is valid when its signature verifies, its session row exists
    and has not expired, and the user still exists.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        token_service: TokenService,
    ):
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.token_service = token_service

    async def execute(self, token: str) -> Result[AuthUserDTO]:
        unauthorized = Error(code="UNAUTHORIZED", message="Not authenticated")

        if not token or self.token_service.decode(token) is None:
            return Return.err(unauthorized)

        session = await self.session_repo.get_active(token, datetime.utcnow())
        if not session:
            return Return.err(unauthorized)

        user = await self.user_repo.get_by_id(session.user_id)
        if not user:
            return Return.err(unauthorized)

        return Return.ok(to_auth_user(user))
