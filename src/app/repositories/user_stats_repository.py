"""User Statistics Repository Interface

Maintains the per-user invoice counters stored on the users table.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class UserStats:
    """Snapshot of a user's invoice counters"""
    user_id: str
    invoice_count: int
    paid_amount: Decimal
    pending_amount: Decimal


class UserStatsRepository(ABC):
    """
    Repository interface for per-user invoice statistics

    apply_delta is the incremental path used by write operations.
    calculate/recompute derive the counters from the invoices themselves and
    are the authoritative repair path when the incremental path drifted.
    """

    @abstractmethod
    async def apply_delta(
        self,
        user_id: str,
        invoice_count_delta: int = 0,
        paid_delta: Decimal = Decimal("0"),
        pending_delta: Decimal = Decimal("0"),
    ) -> None:
        """
        Add deltas to the three counters

        Implementations must apply the deltas in the store itself
        (UPDATE ... SET x = x + delta) so concurrent updates do not get lost.
        """
        pass

    @abstractmethod
    async def get(self, user_id: str) -> Optional[UserStats]:
        """Current stored counters, None if the user does not exist"""
        pass

    @abstractmethod
    async def calculate(self, user_id: str) -> UserStats:
        """Counters derived from the user's invoices. Read only."""
        pass

    @abstractmethod
    async def recompute(self, user_id: str) -> UserStats:
        """Overwrite the stored counters with calculate() and return them"""
        pass

    @abstractmethod
    async def list_user_ids(self) -> List[str]:
        """IDs of every user carrying counters"""
        pass
