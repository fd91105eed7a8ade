"""Data Transfer Objects for Administration Use Cases"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.auth.dtos import UserProfileDTO


class UserListDTO(BaseModel):
    users: List[UserProfileDTO]
    total: int


class PlatformStatsDTO(BaseModel):
    """Platform-wide totals for the admin dashboard"""

    total_users: int = Field(..., description="Accounts with role 'user'")
    total_invoices: int
    total_revenue: Decimal = Field(..., description="Sum of Paid invoice amounts")


class UpdateProfileCommandDTO(BaseModel):
    """Partial profile update; unset fields are left unchanged"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    password: Optional[str] = Field(default=None, min_length=6)
