"""Product Domain Entity

Owner-scoped catalogue entry used to pre-fill invoice line items.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Product(BaseModel, table=True):
    __tablename__ = "products"
    __table_args__ = (
        Index('ix_products_user_id', 'user_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )

    name: str = Field(sa_column=Column(String(255), nullable=False))
    description: Optional[str] = Field(default="", sa_column=Column(String(500), nullable=True))

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Default unit price excluding sales tax"
    )

    hs_code: str = Field(sa_column=Column(String(50), nullable=False))
    rate: str = Field(sa_column=Column(String(20), nullable=False))
    uom: str = Field(sa_column=Column(String(50), nullable=False))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
