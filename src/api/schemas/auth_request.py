"""Request schemas for Auth API"""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class RegisterRequestSchema(BaseModel):
    """
    Request schema for registering an account

    Used for POST /auth/register endpoint.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, description="At least 6 characters")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ayesha Khan",
                "email": "ayesha@paktextile.com",
                "password": "s3cret-pass"
            }
        }


class LoginRequestSchema(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequestSchema(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)


class CreateUserRequestSchema(RegisterRequestSchema):
    """Admin-created account, optionally with the admin role"""

    role: str = Field(default="user", pattern="^(admin|user)$")
