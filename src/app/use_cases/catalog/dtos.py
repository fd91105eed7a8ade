"""Data Transfer Objects for Customer and Product Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.invoice import BuyerRegistrationType


class CreateCustomerCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    ntn: str = Field(..., min_length=7, max_length=13, description="NTN or CNIC")
    province: str = Field(..., min_length=1, max_length=100)
    registration_type: BuyerRegistrationType = Field(default=BuyerRegistrationType.REGISTERED)


class UpdateCustomerCommandDTO(BaseModel):
    """Partial update; unset fields are left unchanged"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    ntn: Optional[str] = Field(default=None, min_length=7, max_length=13)
    province: Optional[str] = Field(default=None, min_length=1, max_length=100)
    registration_type: Optional[BuyerRegistrationType] = None


class CustomerDTO(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    address: str
    ntn: str
    province: str
    registration_type: BuyerRegistrationType
    created_at: datetime


class CreateProductCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default="", max_length=500)
    unit_price: Decimal = Field(..., ge=0, description="Default unit price excluding sales tax")
    hs_code: str = Field(..., min_length=1, max_length=50)
    rate: str = Field(..., min_length=1, max_length=20, description="Sales tax rate, e.g. '18%'")
    uom: str = Field(..., min_length=1, max_length=50)


class UpdateProductCommandDTO(BaseModel):
    """Partial update; unset fields are left unchanged"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    hs_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    rate: Optional[str] = Field(default=None, min_length=1, max_length=20)
    uom: Optional[str] = Field(default=None, min_length=1, max_length=50)


class ProductDTO(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    unit_price: Decimal
    hs_code: str
    rate: str
    uom: str
    created_at: datetime
