"""Session Domain Entity

Server-side record of an issued bearer token. A token is only valid while
its session row exists and has not expired.
"""

from datetime import datetime
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, BigIntegerPK


class Session(BaseModel, table=True):
    __tablename__ = "sessions"
    __table_args__ = (
        Index('ix_sessions_user_id', 'user_id'),
    )

    id: int = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )

    token: str = Field(
        sa_column=Column(String(1024), nullable=False, unique=True),
    )

    expires_at: datetime

    created_at: datetime = Field(default_factory=datetime.utcnow)
