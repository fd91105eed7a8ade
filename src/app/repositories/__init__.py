from .invoice_repository import InvoiceRepository, InvoiceFilters
from .user_stats_repository import UserStatsRepository, UserStats
from .user_repository import UserRepository
from .session_repository import SessionRepository
from .customer_repository import CustomerRepository
from .product_repository import ProductRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceFilters",
    "UserStatsRepository",
    "UserStats",
    "UserRepository",
    "SessionRepository",
    "CustomerRepository",
    "ProductRepository",
]
