from .unit_of_work import UnitOfWork
from .tax_gateway import TaxGateway
from .alert_service import AlertService, PersistenceFailureAlert
from .security import PasswordHasher, TokenService

__all__ = [
    "UnitOfWork",
    "TaxGateway",
    "AlertService",
    "PersistenceFailureAlert",
    "PasswordHasher",
    "TokenService",
]
