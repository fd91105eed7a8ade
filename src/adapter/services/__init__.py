from .unit_of_work import SqlAlchemyUnitOfWork, InMemoryUnitOfWork
from .alert_service import (
    LoggingAlertService,
    WebhookAlertService,
    CompositeAlertService,
    create_alert_service,
)
from .tax_gateway import (
    GatewaySettings,
    FbrTaxGatewayClient,
    MockTaxGateway,
    create_tax_gateway,
)
from .security import PasslibPasswordHasher, JoseTokenService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryUnitOfWork",
    "LoggingAlertService",
    "WebhookAlertService",
    "CompositeAlertService",
    "create_alert_service",
    "GatewaySettings",
    "FbrTaxGatewayClient",
    "MockTaxGateway",
    "create_tax_gateway",
    "PasslibPasswordHasher",
    "JoseTokenService",
]
