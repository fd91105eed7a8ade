"""Data Transfer Objects for Auth Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.user import UserRole


class RegisterUserCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, description="At least 6 characters")
    role: UserRole = Field(default=UserRole.USER)


class LoginCommandDTO(BaseModel):
    email: str
    password: str


class AuthUserDTO(BaseModel):
    """Identity attached to an authenticated request"""

    user_id: str
    email: str
    role: UserRole


class LoginResultDTO(BaseModel):
    user: AuthUserDTO
    token: str
    expires_at: datetime


class UserProfileDTO(BaseModel):
    """User account with its invoice counters"""

    id: str
    name: str
    email: str
    role: UserRole
    registration_date: datetime
    last_login: Optional[datetime] = None
    invoice_count: int
    paid_amount: Decimal
    pending_amount: Decimal
