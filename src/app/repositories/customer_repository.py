"""Customer Repository Interface

Defines the contract for owner-scoped customer persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Repository interface for Customer persistence

    Every operation is scoped to the owning user.
    """

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        pass

    @abstractmethod
    async def get_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Customer]:
        """Customers of the user ordered by name"""
        pass

    @abstractmethod
    async def search(self, user_id: str, term: str) -> List[Customer]:
        """Case-insensitive match on name or email, ordered by name"""
        pass

    @abstractmethod
    async def exists(self, user_id: str, email: Optional[str] = None, ntn: Optional[str] = None) -> bool:
        """Check whether the user already has a customer with this email and/or NTN"""
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        pass

    @abstractmethod
    async def delete(self, customer_id: str, user_id: str) -> bool:
        pass
