"""Customer use cases

Owner-scoped customer records used to pre-fill invoice buyers.
"""

import logging
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer
from .dtos import CreateCustomerCommandDTO, CustomerDTO, UpdateCustomerCommandDTO

logger = logging.getLogger(__name__)


def to_customer_dto(customer: Customer) -> CustomerDTO:
    return CustomerDTO(
        id=customer.id,
        name=customer.name,
        email=customer.email,
        address=customer.address,
        ntn=customer.ntn,
        province=customer.province,
        registration_type=customer.registration_type,
        created_at=customer.created_at,
    )


def _not_found(customer_id: str) -> Error:
    return Error(code="CUSTOMER_NOT_FOUND", message=f"Customer {customer_id} not found")


class CreateCustomer:
    """
    Use Case: Add a customer

    A user cannot have two customers with the same NTN/CNIC.
    """

    def __init__(self, uow: UnitOfWork, customer_repo: CustomerRepository):
        self.uow = uow
        self.customer_repo = customer_repo

    async def execute(self, user_id: str, command: CreateCustomerCommandDTO) -> Result[CustomerDTO]:
        ntn = command.ntn.strip()
        try:
            if await self.customer_repo.exists(user_id, ntn=ntn):
                return Return.err(
                    Error(
                        code="CUSTOMER_ALREADY_EXISTS",
                        message=f"A customer with NTN/CNIC {ntn} already exists",
                    )
                )

            customer = Customer(
                user_id=user_id,
                name=command.name.strip(),
                email=command.email or None,
                address=command.address.strip(),
                ntn=ntn,
                province=command.province.strip(),
                registration_type=command.registration_type,
            )
            created = await self.customer_repo.create(customer)
            await self.uow.commit()
            return Return.ok(to_customer_dto(created))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create customer for user {user_id}: {e}")
            return Return.err(
                Error(code="CUSTOMER_CREATE_FAILED", message="Failed to create customer", reason=str(e))
            )


class ListCustomers:

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, user_id: str) -> Result[List[CustomerDTO]]:
        customers = await self.customer_repo.list_by_user(user_id)
        return Return.ok([to_customer_dto(customer) for customer in customers])


class SearchCustomers:
    """Case-insensitive search on name or email; an empty term lists everything"""

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, user_id: str, term: str) -> Result[List[CustomerDTO]]:
        term = (term or "").strip()
        if not term:
            customers = await self.customer_repo.list_by_user(user_id)
        else:
            customers = await self.customer_repo.search(user_id, term)
        return Return.ok([to_customer_dto(customer) for customer in customers])


class GetCustomer:

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, user_id: str, customer_id: str) -> Result[CustomerDTO]:
        customer = await self.customer_repo.get_by_id(customer_id, user_id)
        if not customer:
            return Return.err(_not_found(customer_id))
        return Return.ok(to_customer_dto(customer))


class UpdateCustomer:

    def __init__(self, uow: UnitOfWork, customer_repo: CustomerRepository):
        self.uow = uow
        self.customer_repo = customer_repo

    async def execute(
        self, user_id: str, customer_id: str, command: UpdateCustomerCommandDTO
    ) -> Result[CustomerDTO]:
        try:
            customer = await self.customer_repo.get_by_id(customer_id, user_id)
            if not customer:
                return Return.err(_not_found(customer_id))

            changes = command.model_dump(exclude_unset=True)
            new_ntn = changes.get("ntn")
            if new_ntn and new_ntn.strip() != customer.ntn:
                if await self.customer_repo.exists(user_id, ntn=new_ntn.strip()):
                    return Return.err(
                        Error(
                            code="CUSTOMER_ALREADY_EXISTS",
                            message=f"A customer with NTN/CNIC {new_ntn.strip()} already exists",
                        )
                    )

            for field, value in changes.items():
                setattr(customer, field, value.strip() if isinstance(value, str) else value)
            customer.updated_at = datetime.utcnow()

            updated = await self.customer_repo.update(customer)
            await self.uow.commit()
            return Return.ok(to_customer_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update customer {customer_id}: {e}")
            return Return.err(
                Error(code="CUSTOMER_UPDATE_FAILED", message="Failed to update customer", reason=str(e))
            )


class DeleteCustomer:

    def __init__(self, uow: UnitOfWork, customer_repo: CustomerRepository):
        self.uow = uow
        self.customer_repo = customer_repo

    async def execute(self, user_id: str, customer_id: str) -> Result[bool]:
        try:
            if not await self.customer_repo.delete(customer_id, user_id):
                return Return.err(_not_found(customer_id))
            await self.uow.commit()
            return Return.ok(True)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete customer {customer_id}: {e}")
            return Return.err(
                Error(code="CUSTOMER_DELETE_FAILED", message="Failed to delete customer", reason=str(e))
            )
