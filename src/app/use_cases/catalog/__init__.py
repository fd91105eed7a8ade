"""Customer and product catalogue use cases"""
from .customers import (
    CreateCustomer,
    ListCustomers,
    SearchCustomers,
    GetCustomer,
    UpdateCustomer,
    DeleteCustomer,
)
from .products import (
    CreateProduct,
    ListProducts,
    SearchProducts,
    GetPopularProducts,
    GetProduct,
    UpdateProduct,
    DeleteProduct,
)
from .dtos import (
    CreateCustomerCommandDTO,
    UpdateCustomerCommandDTO,
    CustomerDTO,
    CreateProductCommandDTO,
    UpdateProductCommandDTO,
    ProductDTO,
)

__all__ = [
    "CreateCustomer",
    "ListCustomers",
    "SearchCustomers",
    "GetCustomer",
    "UpdateCustomer",
    "DeleteCustomer",
    "CreateProduct",
    "ListProducts",
    "SearchProducts",
    "GetPopularProducts",
    "GetProduct",
    "UpdateProduct",
    "DeleteProduct",
    "CreateCustomerCommandDTO",
    "UpdateCustomerCommandDTO",
    "CustomerDTO",
    "CreateProductCommandDTO",
    "UpdateProductCommandDTO",
    "ProductDTO",
]
