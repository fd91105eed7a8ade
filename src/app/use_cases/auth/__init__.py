"""Authentication use cases"""
from .register_user import RegisterUser
from .login_user import LoginUser
from .logout_user import LogoutUser
from .validate_session import ValidateSession
from .purge_expired_sessions import PurgeExpiredSessions
from .dtos import (
    RegisterUserCommandDTO,
    LoginCommandDTO,
    AuthUserDTO,
    LoginResultDTO,
    UserProfileDTO,
)

__all__ = [
    "RegisterUser",
    "LoginUser",
    "LogoutUser",
    "ValidateSession",
    "PurgeExpiredSessions",
    "RegisterUserCommandDTO",
    "LoginCommandDTO",
    "AuthUserDTO",
    "LoginResultDTO",
    "UserProfileDTO",
]
