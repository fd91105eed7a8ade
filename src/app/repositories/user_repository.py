"""User Repository Interface

Defines the contract for user account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.user import User, UserRole


class UserRepository(ABC):

    @abstractmethod
    async def create(self, user: User) -> User:
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        """All users, most recently registered first"""
        pass

    @abstractmethod
    async def count_by_role(self, role: UserRole) -> int:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete the user and everything the user owns"""
        pass
