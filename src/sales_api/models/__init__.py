"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including input validation models, output response models, and entity models.
"""

from .entities import Customer, Item, SalesDetail, SalesHeader
from .input import CustomerRequest, ItemRequest, SaleLineRequest, SaleRequest, SaleUpdateRequest, SignInRequest
from .output import (
    ApiEnvelope,
    CreateSaleOutput,
    GlobalStats,
    HealthCheckOutput,
    MonthlySales,
    PaginationEnvelope,
    SaleCustomer,
    SaleLine,
    SalesDTO,
    SignInOutput,
    TotalSales,
)

__all__ = [
    # Input models
    "CustomerRequest",
    "ItemRequest",
    "SaleLineRequest",
    "SaleRequest",
    "SaleUpdateRequest",
    "SignInRequest",

    # Output models
    "ApiEnvelope",
    "CreateSaleOutput",
    "GlobalStats",
    "HealthCheckOutput",
    "MonthlySales",
    "PaginationEnvelope",
    "SaleCustomer",
    "SaleLine",
    "SalesDTO",
    "SignInOutput",
    "TotalSales",

    # Entity models
    "Customer",
    "Item",
    "SalesDetail",
    "SalesHeader",
]
