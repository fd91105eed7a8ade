"""Customer API Routes"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_user
from src.api.error import raise_for_error
from src.app.use_cases.auth import AuthUserDTO
from src.app.use_cases.catalog import (
    CreateCustomer,
    CreateCustomerCommandDTO,
    CustomerDTO,
    DeleteCustomer,
    GetCustomer,
    ListCustomers,
    SearchCustomers,
    UpdateCustomer,
    UpdateCustomerCommandDTO,
)
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=List[CustomerDTO])
async def list_customers(
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await ListCustomers(SqlAlchemyCustomerRepository(session)).execute(current_user.user_id)
    return result.value


@router.post("", response_model=CustomerDTO, status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: CreateCustomerCommandDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Add a customer.

    **Returns:**
    - 201: Customer created
    - 409: A customer with this NTN/CNIC already exists
    """
    use_case = CreateCustomer(SqlAlchemyUnitOfWork(session), SqlAlchemyCustomerRepository(session))
    result = await use_case.execute(current_user.user_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/search", response_model=List[CustomerDTO])
async def search_customers(
    q: str = Query("", max_length=255),
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await SearchCustomers(SqlAlchemyCustomerRepository(session)).execute(current_user.user_id, q)
    return result.value


@router.get("/{customer_id}", response_model=CustomerDTO)
async def get_customer(
    customer_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetCustomer(SqlAlchemyCustomerRepository(session)).execute(current_user.user_id, customer_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{customer_id}", response_model=CustomerDTO)
async def update_customer(
    customer_id: str,
    request: UpdateCustomerCommandDTO,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = UpdateCustomer(SqlAlchemyUnitOfWork(session), SqlAlchemyCustomerRepository(session))
    result = await use_case.execute(current_user.user_id, customer_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    current_user: AuthUserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = DeleteCustomer(SqlAlchemyUnitOfWork(session), SqlAlchemyCustomerRepository(session))
    result = await use_case.execute(current_user.user_id, customer_id)
    if result.is_err():
        raise_for_error(result.error)
