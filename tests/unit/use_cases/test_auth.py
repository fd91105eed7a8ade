"""Unit tests for authentication use cases

Tests cover:
- Registration with hashed password and duplicate email
- Login success, wrong password and unknown email
- Session validation and logout
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.security import JoseTokenService, PasslibPasswordHasher
from src.app.use_cases.auth import (
    LoginCommandDTO,
    LoginUser,
    LogoutUser,
    PurgeExpiredSessions,
    RegisterUser,
    RegisterUserCommandDTO,
    ValidateSession,
)
from src.domain.session import Session
from src.domain.user import User, UserRole


@pytest.fixture
def hasher():
    return PasslibPasswordHasher()


@pytest.fixture
def token_service():
    return JoseTokenService(secret="test-secret")


@pytest.fixture
def mock_user_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda user: user)
    repo.update = AsyncMock(side_effect=lambda user: user)
    return repo


@pytest.fixture
def mock_session_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda session: session)
    return repo


@pytest.fixture
def existing_user(hasher):
    return User(
        id="user_123",
        name="Ayesha Khan",
        email="ayesha@example.com",
        password_hash=hasher.hash("secret123"),
        role=UserRole.USER,
    )


@pytest.mark.asyncio
class TestRegisterUser:

    async def test_register_hashes_password(self, mock_uow, mock_user_repo, hasher):
        mock_user_repo.get_by_email = AsyncMock(return_value=None)
        use_case = RegisterUser(mock_uow, mock_user_repo, hasher)

        result = await use_case.execute(
            RegisterUserCommandDTO(name="Ayesha Khan", email=" Ayesha@Example.com ", password="secret123")
        )

        assert result.is_ok()
        assert result.value.email == "ayesha@example.com"
        assert result.value.role == UserRole.USER
        created = mock_user_repo.create.call_args[0][0]
        assert created.password_hash != "secret123"
        assert hasher.verify("secret123", created.password_hash)
        mock_uow.commit.assert_awaited_once()

    async def test_duplicate_email(self, mock_uow, mock_user_repo, hasher, existing_user):
        mock_user_repo.get_by_email = AsyncMock(return_value=existing_user)

        result = await RegisterUser(mock_uow, mock_user_repo, hasher).execute(
            RegisterUserCommandDTO(name="Other", email="ayesha@example.com", password="secret123")
        )

        assert result.error.code == "USER_ALREADY_EXISTS"
        mock_user_repo.create.assert_not_called()

    async def test_repository_failure_rolls_back(self, mock_uow, mock_user_repo, hasher):
        mock_user_repo.get_by_email = AsyncMock(return_value=None)
        mock_user_repo.create = AsyncMock(side_effect=RuntimeError("unique violation"))

        result = await RegisterUser(mock_uow, mock_user_repo, hasher).execute(
            RegisterUserCommandDTO(name="Ayesha", email="a@example.com", password="secret123")
        )

        assert result.error.code == "REGISTRATION_FAILED"
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestLoginUser:

    @pytest.fixture
    def login_use_case(self, mock_uow, mock_user_repo, mock_session_repo, hasher, token_service):
        return LoginUser(
            mock_uow, mock_user_repo, mock_session_repo, hasher, token_service, session_ttl=timedelta(hours=1)
        )

    async def test_login_issues_token_and_session(
        self, login_use_case, mock_user_repo, mock_session_repo, token_service, existing_user
    ):
        mock_user_repo.get_by_email = AsyncMock(return_value=existing_user)

        result = await login_use_case.execute(LoginCommandDTO(email="AYESHA@example.com", password="secret123"))

        assert result.is_ok()
        claims = token_service.decode(result.value.token)
        assert claims["sub"] == "user_123"
        assert claims["email"] == "ayesha@example.com"
        assert claims["role"] == "user"
        assert claims["jti"]
        assert existing_user.last_login is not None

        session = mock_session_repo.create.call_args[0][0]
        assert session.token == result.value.token
        assert session.expires_at == result.value.expires_at

    async def test_two_logins_get_distinct_tokens(self, login_use_case, mock_user_repo, existing_user):
        mock_user_repo.get_by_email = AsyncMock(return_value=existing_user)
        command = LoginCommandDTO(email="ayesha@example.com", password="secret123")

        first = await login_use_case.execute(command)
        second = await login_use_case.execute(command)

        assert first.value.token != second.value.token

    async def test_wrong_password(self, login_use_case, mock_user_repo, mock_session_repo, existing_user):
        mock_user_repo.get_by_email = AsyncMock(return_value=existing_user)

        result = await login_use_case.execute(LoginCommandDTO(email="ayesha@example.com", password="nope"))

        assert result.error.code == "UNAUTHORIZED"
        assert result.error.message == "Invalid email or password"
        mock_session_repo.create.assert_not_called()

    async def test_unknown_email_same_error(self, login_use_case, mock_user_repo):
        mock_user_repo.get_by_email = AsyncMock(return_value=None)

        result = await login_use_case.execute(LoginCommandDTO(email="who@example.com", password="secret123"))

        assert result.error.code == "UNAUTHORIZED"
        assert result.error.message == "Invalid email or password"


@pytest.mark.asyncio
class TestValidateSession:

    @pytest.fixture
    def token(self, token_service):
        return token_service.issue(
            {"sub": "user_123", "email": "ayesha@example.com", "role": "user", "jti": "abc"},
            expires_at=datetime.utcnow() + timedelta(hours=1),
        )

    async def test_active_session(self, mock_user_repo, mock_session_repo, token_service, token, existing_user):
        mock_session_repo.get_active = AsyncMock(
            return_value=Session(user_id="user_123", token=token, expires_at=datetime.utcnow() + timedelta(hours=1))
        )
        mock_user_repo.get_by_id = AsyncMock(return_value=existing_user)

        result = await ValidateSession(mock_user_repo, mock_session_repo, token_service).execute(token)

        assert result.value.user_id == "user_123"

    async def test_logged_out_session(self, mock_user_repo, mock_session_repo, token_service, token):
        mock_session_repo.get_active = AsyncMock(return_value=None)

        result = await ValidateSession(mock_user_repo, mock_session_repo, token_service).execute(token)

        assert result.error.code == "UNAUTHORIZED"

    async def test_tampered_token(self, mock_user_repo, mock_session_repo, token_service, token):
        mock_session_repo.get_active = AsyncMock()

        tampered = token.rsplit(".", 1)[0] + ".c2lnbmF0dXJlLXRhbXBlcmVk"

        result = await ValidateSession(mock_user_repo, mock_session_repo, token_service).execute(tampered)

        assert result.error.code == "UNAUTHORIZED"
        mock_session_repo.get_active.assert_not_called()

    async def test_expired_token(self, mock_user_repo, mock_session_repo, token_service):
        expired = token_service.issue({"sub": "user_123"}, expires_at=datetime.utcnow() - timedelta(minutes=1))

        result = await ValidateSession(mock_user_repo, mock_session_repo, token_service).execute(expired)

        assert result.error.code == "UNAUTHORIZED"


@pytest.mark.asyncio
class TestSessionHousekeeping:

    async def test_logout_deletes_session(self, mock_uow, mock_session_repo):
        mock_session_repo.delete_by_token = AsyncMock(return_value=True)

        result = await LogoutUser(mock_uow, mock_session_repo).execute("token")

        assert result.value is True
        mock_session_repo.delete_by_token.assert_awaited_once_with("token")
        mock_uow.commit.assert_awaited_once()

    async def test_purge_expired(self, mock_uow, mock_session_repo):
        mock_session_repo.delete_expired = AsyncMock(return_value=3)

        result = await PurgeExpiredSessions(mock_uow, mock_session_repo).execute()

        assert result.value == 3
