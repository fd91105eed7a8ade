from .invoice_repository import SqlAlchemyInvoiceRepository
from .user_stats_repository import SqlAlchemyUserStatsRepository
from .user_repository import SqlAlchemyUserRepository
from .session_repository import SqlAlchemySessionRepository
from .customer_repository import SqlAlchemyCustomerRepository
from .product_repository import SqlAlchemyProductRepository
from .in_memory import InMemoryStore, InMemoryInvoiceRepository, InMemoryUserStatsRepository

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyUserStatsRepository",
    "SqlAlchemyUserRepository",
    "SqlAlchemySessionRepository",
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyProductRepository",
    "InMemoryStore",
    "InMemoryInvoiceRepository",
    "InMemoryUserStatsRepository",
]
