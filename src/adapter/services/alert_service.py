"""Alert Service Implementations

Provides concrete implementations for raising operator alerts.
"""

import logging
from typing import Optional
import httpx
from src.app.services.alert_service import AlertService, PersistenceFailureAlert

logger = logging.getLogger(__name__)


class LoggingAlertService(AlertService):
    """
    Alert service that logs alerts

    Useful for development and testing, or as a fallback.
    """

    async def send_persistence_failure_alert(self, alert: PersistenceFailureAlert) -> bool:
        """
        Log persistence failure alert

        Args:
            alert: PersistenceFailureAlert to log

        Returns:
            Always True (logging never fails)
        """
        logger.critical(
            f"[PERSISTENCE ALERT] Invoice: {alert.invoice_id}, "
            f"User: {alert.user_id}, "
            f"Amount: {alert.amount}, "
            f"Reason: {alert.reason}, "
            f"Record: {alert.model_dump_json(include={'record'})}"
        )
        return True


class WebhookAlertService(AlertService):
    """
    Alert service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook alert service

        Args:
            webhook_url: URL to POST alerts to
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def send_persistence_failure_alert(self, alert: PersistenceFailureAlert) -> bool:
        """
        Send persistence failure alert via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {"type": "invoice_persistence_failed", **alert.model_dump(mode="json")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook alert sent for invoice {alert.invoice_id} to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook alert for invoice {alert.invoice_id}: {e}")
            return False


class CompositeAlertService(AlertService):
    """
    Alert service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[AlertService]):
        self.services = services

    async def send_persistence_failure_alert(self, alert: PersistenceFailureAlert) -> bool:
        """
        Send alert to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_persistence_failure_alert(alert):
                    success = True
            except Exception as e:
                logger.error(f"Alert service {type(service).__name__} failed: {e}")
        return success


def create_alert_service(webhook_url: Optional[str] = None) -> AlertService:
    """
    Factory function to create appropriate alert service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured AlertService
    """
    services: list[AlertService] = [LoggingAlertService()]

    if webhook_url:
        services.append(WebhookAlertService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeAlertService(services)
