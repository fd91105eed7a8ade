"""Product Repository Interface

Defines the contract for owner-scoped product persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.product import Product


class ProductRepository(ABC):
    """
    Repository interface for Product persistence

    Every operation is scoped to the owning user.
    """

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str, user_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Product]:
        """Products of the user ordered by name"""
        pass

    @abstractmethod
    async def search(self, user_id: str, term: str) -> List[Product]:
        """Case-insensitive match on name or description, ordered by name"""
        pass

    @abstractmethod
    async def get_popular(self, user_id: str, limit: int = 10) -> List[Product]:
        """
        Products ordered by how often they appear on the user's invoices

        A product is matched to line items by name = line item description.
        """
        pass

    @abstractmethod
    async def exists_with_name(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def delete(self, product_id: str, user_id: str) -> bool:
        pass
