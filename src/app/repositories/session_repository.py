"""Session Repository Interface

Defines the contract for persisted login sessions.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.session import Session


class SessionRepository(ABC):

    @abstractmethod
    async def create(self, session: Session) -> Session:
        pass

    @abstractmethod
    async def get_active(self, token: str, now: datetime) -> Optional[Session]:
        """
        Retrieve a session by token

        Returns:
            Session if it exists and expires after `now`, None otherwise
        """
        pass

    @abstractmethod
    async def delete_by_token(self, token: str) -> bool:
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """
        Remove sessions that expired at or before `now`

        Returns:
            Number of removed sessions
        """
        pass
