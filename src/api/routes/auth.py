"""Auth API Routes

Registration, login and session management.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import extract_token, get_current_user
from src.api.error import raise_for_error
from src.api.schemas.auth_request import (
    LoginRequestSchema,
    RegisterRequestSchema,
    UpdateProfileRequestSchema,
)
from src.app.services.security import PasswordHasher, TokenService
from src.app.use_cases.admin import GetUserProfile, UpdateProfileCommandDTO, UpdateUserProfile
from src.app.use_cases.auth import (
    AuthUserDTO,
    LoginCommandDTO,
    LoginResultDTO,
    LoginUser,
    LogoutUser,
    RegisterUser,
    RegisterUserCommandDTO,
    UserProfileDTO,
)
from src.adapter.repositories.session_repository import SqlAlchemySessionRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_password_hasher, get_session, get_token_service, session_ttl

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthUserDTO, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequestSchema,
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Register a new account with role 'user'.

    **Returns:**
    - 201: Account created
    - 409: Email already registered
    """
    use_case = RegisterUser(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session), password_hasher)
    result = await use_case.execute(
        RegisterUserCommandDTO(name=request.name, email=request.email, password=request.password)
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/login", response_model=LoginResultDTO, status_code=status.HTTP_200_OK)
async def login(
    request: LoginRequestSchema,
    response: Response,
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Log in and open a session.

    The token is returned in the body and set as an HTTP-only cookie.
    """
    use_case = LoginUser(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        session_repo=SqlAlchemySessionRepository(session),
        password_hasher=password_hasher,
        token_service=token_service,
        session_ttl=session_ttl,
    )
    result = await use_case.execute(LoginCommandDTO(email=request.email, password=request.password))
    if result.is_err():
        raise_for_error(result.error)

    response.set_cookie(
        key=ApplicationConfig.AUTH_COOKIE_NAME,
        value=result.value.token,
        httponly=True,
        samesite="lax",
        max_age=int(session_ttl.total_seconds()),
    )
    return result.value


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    """Delete the caller's session. Succeeds without a session too."""
    token = extract_token(request)
    if token:
        result = await LogoutUser(SqlAlchemyUnitOfWork(session), SqlAlchemySessionRepository(session)).execute(token)
        if result.is_err():
            raise_for_error(result.error)
    response.delete_cookie(ApplicationConfig.AUTH_COOKIE_NAME)


@router.get("/me", response_model=UserProfileDTO, status_code=status.HTTP_200_OK)
async def me(
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Profile of the caller including invoice counters."""
    result = await GetUserProfile(SqlAlchemyUserRepository(session)).execute(current_user.user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/me", response_model=UserProfileDTO, status_code=status.HTTP_200_OK)
async def update_me(
    request: UpdateProfileRequestSchema,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    use_case = UpdateUserProfile(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session), password_hasher)
    result = await use_case.execute(
        current_user.user_id,
        UpdateProfileCommandDTO(**request.model_dump(exclude_unset=True)),
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value
