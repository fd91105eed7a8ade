"""Security Service Interfaces

Password hashing and session token signing used by the auth use cases.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        pass


class TokenService(ABC):

    @abstractmethod
    def issue(self, claims: Dict[str, Any], expires_at: datetime) -> str:
        """Sign claims into an opaque bearer token"""
        pass

    @abstractmethod
    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify a token

        Returns:
            Claims if signature and expiry are valid, None otherwise
        """
        pass
