"""SQLAlchemy implementation of SessionRepository"""

from datetime import datetime
from typing import Optional
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.session_repository import SessionRepository
from src.domain.session import Session


class SqlAlchemySessionRepository(SessionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session: Session) -> Session:
        self.session.add(session)
        await self.session.flush()
        await self.session.refresh(session)
        return session

    async def get_active(self, token: str, now: datetime) -> Optional[Session]:
        statement = (
            select(Session)
            .where(Session.token == token)
            .where(Session.expires_at > now)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def delete_by_token(self, token: str) -> bool:
        result = await self.session.execute(delete(Session).where(Session.token == token))
        return result.rowcount > 0

    async def delete_expired(self, now: datetime) -> int:
        result = await self.session.execute(delete(Session).where(Session.expires_at <= now))
        return result.rowcount
