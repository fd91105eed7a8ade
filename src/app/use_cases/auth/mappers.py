from src.domain.user import User, UserRole
from .dtos import AuthUserDTO, UserProfileDTO


def to_auth_user(user: User) -> AuthUserDTO:
    return AuthUserDTO(user_id=user.id, email=user.email, role=UserRole(user.role))


def to_profile_dto(user: User) -> UserProfileDTO:
    return UserProfileDTO(
        id=user.id,
        name=user.name,
        email=user.email,
        role=UserRole(user.role),
        registration_date=user.registration_date,
        last_login=user.last_login,
        invoice_count=user.invoice_count,
        paid_amount=user.paid_amount,
        pending_amount=user.pending_amount,
    )
