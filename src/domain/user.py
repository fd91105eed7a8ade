"""User Domain Entity

Account owning invoices, customers and products. Carries denormalized
invoice statistics that mirror the invoices table.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Integer, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class UserRole(str, Enum):
    """Account roles"""
    ADMIN = "admin"
    USER = "user"


class User(BaseModel, table=True):
    """
    User - Business owner or platform administrator

    Domain Rules:
    - email is unique
    - invoice_count, paid_amount and pending_amount are derived data:
      invoice_count = number of the user's invoices
      paid_amount = sum of amounts of Paid invoices
      pending_amount = sum of amounts of Pending and Overdue invoices
    - Counters change only through UserStatsRepository
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="User identifier (UUID)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Login email (unique)"
    )

    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Password hash"
    )

    role: UserRole = Field(
        default=UserRole.USER,
        description="Account role (admin, user)"
    )

    registration_date: datetime = Field(
        default_factory=datetime.utcnow,
        description="Registration timestamp"
    )

    last_login: Optional[datetime] = Field(
        default=None,
        description="Last successful login"
    )

    invoice_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Number of invoices owned by the user"
    )

    paid_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Sum of Paid invoice amounts"
    )

    pending_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Sum of Pending and Overdue invoice amounts"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
