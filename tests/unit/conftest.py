import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.adapter.repositories.in_memory import (
    InMemoryInvoiceRepository,
    InMemoryStore,
    InMemoryUserStatsRepository,
)
from src.adapter.services.unit_of_work import InMemoryUnitOfWork
from src.app.use_cases.invoicing.dtos import InvoiceDraftDTO, InvoicePartyDTO, LineItemDTO
from src.domain.invoice import BuyerRegistrationType


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def store():
    """In-memory store with one registered user"""
    store = InMemoryStore()
    store.add_user("user_123")
    return store


@pytest.fixture
def memory_uow(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def invoice_repo(store):
    return InMemoryInvoiceRepository(store)


@pytest.fixture
def stats_repo(store):
    return InMemoryUserStatsRepository(store)


@pytest.fixture
def sample_draft():
    """One line item: 2 x 5000 at 18% -> 11800.00"""
    return InvoiceDraftDTO(
        seller=InvoicePartyDTO(
            name="Pak Textile Solutions",
            address="123 Textile Ave, Faisalabad",
            email="billing@paktextile.com",
            ntn="1234567-8",
            province="Punjab",
        ),
        buyer=InvoicePartyDTO(
            name="Lahore Garments",
            address="45 Mall Road, Lahore",
            ntn="7654321",
            province="Punjab",
        ),
        buyer_registration_type=BuyerRegistrationType.REGISTERED,
        issue_date=date(2024, 5, 1),
        line_items=[
            LineItemDTO(
                description="Cotton fabric",
                quantity=Decimal("2"),
                unit_price=Decimal("5000"),
                hs_code="5208.1100",
                rate="18%",
                uom="pcs",
                sale_type="Goods at standard rate (default)",
            )
        ],
    )
