from .base import BaseModel, generate_uuid
from .user import User, UserRole
from .session import Session
from .invoice import Invoice, InvoiceStatus, InvoiceType, BuyerRegistrationType
from .invoice_line import InvoiceLineItem
from .customer import Customer
from .product import Product

__all__ = [
    "BaseModel",
    "generate_uuid",
    "User",
    "UserRole",
    "Session",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "BuyerRegistrationType",
    "InvoiceLineItem",
    "Customer",
    "Product",
]
