"""Unit tests for customer and product use cases"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.catalog.customers import CreateCustomer, SearchCustomers, UpdateCustomer
from src.app.use_cases.catalog.dtos import (
    CreateCustomerCommandDTO,
    CreateProductCommandDTO,
    UpdateCustomerCommandDTO,
)
from src.app.use_cases.catalog.products import CreateProduct, GetProduct
from src.domain.customer import Customer


@pytest.fixture
def mock_customer_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda customer: customer)
    repo.update = AsyncMock(side_effect=lambda customer: customer)
    return repo


@pytest.fixture
def mock_product_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda product: product)
    return repo


@pytest.fixture
def customer_command():
    return CreateCustomerCommandDTO(
        name="Lahore Garments",
        address="45 Mall Road, Lahore",
        ntn="7654321",
        province="Punjab",
    )


@pytest.fixture
def product_command():
    return CreateProductCommandDTO(
        name="Cotton fabric",
        unit_price=Decimal("5000"),
        hs_code="5208.1100",
        rate="18%",
        uom="pcs",
    )


@pytest.mark.asyncio
class TestCustomers:

    async def test_create_customer(self, mock_uow, mock_customer_repo, customer_command):
        mock_customer_repo.exists = AsyncMock(return_value=False)

        result = await CreateCustomer(mock_uow, mock_customer_repo).execute("user_123", customer_command)

        assert result.value.name == "Lahore Garments"
        assert result.value.registration_type == "Registered"
        created = mock_customer_repo.create.call_args[0][0]
        assert created.user_id == "user_123"
        mock_uow.commit.assert_awaited_once()

    async def test_duplicate_ntn(self, mock_uow, mock_customer_repo, customer_command):
        mock_customer_repo.exists = AsyncMock(return_value=True)

        result = await CreateCustomer(mock_uow, mock_customer_repo).execute("user_123", customer_command)

        assert result.error.code == "CUSTOMER_ALREADY_EXISTS"
        mock_customer_repo.create.assert_not_called()

    async def test_update_only_sets_given_fields(self, mock_uow, mock_customer_repo):
        customer = Customer(
            id="cust_1", user_id="user_123", name="Old", address="Addr", ntn="7654321", province="Sindh"
        )
        mock_customer_repo.get_by_id = AsyncMock(return_value=customer)

        result = await UpdateCustomer(mock_uow, mock_customer_repo).execute(
            "user_123", "cust_1", UpdateCustomerCommandDTO(name=" New Name ")
        )

        assert result.value.name == "New Name"
        assert result.value.province == "Sindh"

    async def test_update_missing_customer(self, mock_uow, mock_customer_repo):
        mock_customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await UpdateCustomer(mock_uow, mock_customer_repo).execute(
            "user_123", "cust_404", UpdateCustomerCommandDTO(name="x")
        )

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_blank_search_lists_all(self, mock_customer_repo):
        mock_customer_repo.list_by_user = AsyncMock(return_value=[])
        mock_customer_repo.search = AsyncMock()

        await SearchCustomers(mock_customer_repo).execute("user_123", "  ")

        mock_customer_repo.list_by_user.assert_awaited_once_with("user_123")
        mock_customer_repo.search.assert_not_called()


@pytest.mark.asyncio
class TestProducts:

    async def test_create_product(self, mock_uow, mock_product_repo, product_command):
        mock_product_repo.exists_with_name = AsyncMock(return_value=False)

        result = await CreateProduct(mock_uow, mock_product_repo).execute("user_123", product_command)

        assert result.value.rate == "18%"
        assert result.value.unit_price == Decimal("5000")

    async def test_rate_must_be_percentage(self, mock_uow, mock_product_repo, product_command):
        product_command.rate = "standard"

        result = await CreateProduct(mock_uow, mock_product_repo).execute("user_123", product_command)

        assert result.error.code == "VALIDATION_FAILED"
        mock_product_repo.create.assert_not_called()

    async def test_duplicate_name(self, mock_uow, mock_product_repo, product_command):
        mock_product_repo.exists_with_name = AsyncMock(return_value=True)

        result = await CreateProduct(mock_uow, mock_product_repo).execute("user_123", product_command)

        assert result.error.code == "PRODUCT_ALREADY_EXISTS"

    async def test_get_missing_product(self, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetProduct(mock_product_repo).execute("user_123", "prod_404")

        assert result.error.code == "PRODUCT_NOT_FOUND"
