"""Authentication dependencies for routes"""

from typing import Optional
from fastapi import Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.session_repository import SqlAlchemySessionRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.api.error import ClientError
from src.app.services.security import TokenService
from src.app.use_cases.auth import AuthUserDTO, ValidateSession
from src.depends import get_session, get_token_service
from src.domain.user import UserRole


def extract_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the auth cookie"""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(ApplicationConfig.AUTH_COOKIE_NAME)


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
    token_service: TokenService = Depends(get_token_service),
) -> AuthUserDTO:
    use_case = ValidateSession(
        SqlAlchemyUserRepository(session),
        SqlAlchemySessionRepository(session),
        token_service,
    )
    result = await use_case.execute(extract_token(request))
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)
    return result.value


async def require_admin(current_user: AuthUserDTO = Depends(get_current_user)) -> AuthUserDTO:
    if current_user.role != UserRole.ADMIN:
        raise ClientError(
            Error(code="FORBIDDEN", message="Administrator access required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return current_user
