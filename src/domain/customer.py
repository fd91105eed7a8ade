"""Customer Domain Entity

Owner-scoped buyer record used to pre-fill invoice buyers.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, generate_uuid
from src.domain.invoice import BuyerRegistrationType


class Customer(BaseModel, table=True):
    __tablename__ = "customers"
    __table_args__ = (
        Index('ix_customers_user_id', 'user_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )

    name: str = Field(sa_column=Column(String(255), nullable=False))
    email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    address: str = Field(sa_column=Column(String(500), nullable=False))
    ntn: str = Field(sa_column=Column(String(20), nullable=False))
    province: str = Field(sa_column=Column(String(100), nullable=False))
    registration_type: BuyerRegistrationType = Field(default=BuyerRegistrationType.REGISTERED)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
