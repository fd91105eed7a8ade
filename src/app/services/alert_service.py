"""Alert Service Interface

Defines the contract for operator alerts about invoices the gateway
accepted but that could not be recorded locally.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from pydantic import BaseModel, Field


class PersistenceFailureAlert(BaseModel):
    """
    Alert payload for a PERSISTENCE_FAILED submission

    `record` holds the accepted invoice exactly as it has to be replayed
    through the recovery endpoint.
    """

    invoice_id: str = Field(..., description="Invoice number issued by the gateway")
    user_id: str = Field(..., description="Owner of the invoice")
    amount: Decimal = Field(..., description="Invoice grand total")
    reason: str = Field(..., description="Persistence error")
    record: Dict[str, Any] = Field(..., description="Replayable accepted-invoice record")
    occurred_at: datetime = Field(default_factory=datetime.utcnow)


class AlertService(ABC):
    """
    Abstract alert service

    Implementations can send alerts via:
    - Logging
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_persistence_failure_alert(self, alert: PersistenceFailureAlert) -> bool:
        """
        Send alert for an accepted invoice that was not recorded

        Args:
            alert: PersistenceFailureAlert to send

        Returns:
            True if alert sent successfully, False otherwise
        """
        pass
