"""
Output models for API responses using Pydantic.

Every response body is an ApiEnvelope; the remaining models describe the
shapes carried in its ``data`` field.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, PlainSerializer


class ApiEnvelope(BaseModel):
    """Uniform wrapper around every response body."""

    status: Annotated[int, Field(
        description='HTTP status code repeated in the body',
        examples=[200, 404]
    )]

    error: Annotated[Optional[str], Field(
        default=None,
        description='Error message, null on success',
        examples=['Item not found']
    )] = None

    data: Annotated[Any, Field(
        default=None,
        description='Response payload, null on error'
    )] = None


class PaginationEnvelope(BaseModel):
    """Page of rows with the metadata every list endpoint returns."""

    limit: Annotated[int, Field(
        description='Page size requested',
        examples=[25]
    )]

    current_page: Annotated[int, Field(
        description='Page number requested',
        examples=[1]
    )]

    total_page: Annotated[int, Field(
        description='Number of pages, computed from the total before pagination',
        examples=[4]
    )]

    count: Annotated[int, Field(
        description='Number of rows in this page',
        examples=[25]
    )]

    total: Annotated[int, Field(
        description='Number of rows across all pages',
        examples=[87]
    )]

    data: Annotated[List[Dict[str, Any]], Field(
        default_factory=list,
        description='Rows of this page'
    )]


class SaleCustomer(BaseModel):
    """Customer embedded in a sale."""

    customerid: int
    custname: Optional[str] = None


class SaleLine(BaseModel):
    """Detail line of a sale; item fields are null when the item row is gone."""

    itemid: Annotated[Optional[int], Field(
        default=None,
        description='Item identifier from the item master, null when missing'
    )] = None

    itemname: Annotated[Optional[str], Field(
        default=None,
        description='Item name from the item master, null when missing'
    )] = None

    unitprice: Annotated[float, Field(
        description='Price per unit from the detail row',
        examples=[12500.0]
    )]

    qty: Annotated[int, Field(
        description='Quantity from the detail row',
        examples=[3]
    )]


class SalesDTO(BaseModel):
    """Flattened sale: header, customer and detail lines."""

    docno: int
    docdate: date
    customerid: Optional[int] = None
    customer: Optional[SaleCustomer] = None
    sales_detail: List[SaleLine] = Field(default_factory=list)


class CreateSaleOutput(BaseModel):
    """Response model for sale creation."""

    docno: Annotated[int, Field(
        description='Storage-assigned document number',
        examples=[1001]
    )]


class TotalSales(BaseModel):
    """Sales totals across every stored document."""

    count: Annotated[int, Field(
        description='Number of sales headers',
        examples=[42]
    )]

    # Exact in Python, a plain JSON number on the wire
    total_price: Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json'), Field(
        description='Sum of unitprice * qty over every detail line',
        examples=[1250000.0]
    )]


class GlobalStats(BaseModel):
    """Response model for the global statistics endpoint."""

    total_items: int
    total_customers: int
    total_sales: TotalSales


class MonthlySales(BaseModel):
    """Quantity sold in one calendar month."""

    month: Annotated[str, Field(
        description='Month as YYYY-MM',
        examples=['2024-03']
    )]

    totalSales: Annotated[int, Field(
        description='Sum of qty over detail lines dated in the month',
        examples=[120]
    )]


class SignInOutput(BaseModel):
    """Response model for a successful sign-in."""

    user: Dict[str, Any]
    access_token: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = 'Bearer'


class HealthCheckOutput(BaseModel):
    """Response model for health check endpoint."""

    status: Annotated[str, Field(
        description='Health status of the service',
        examples=['healthy', 'unhealthy']
    )]

    timestamp: Annotated[datetime, Field(
        description='Timestamp of the health check'
    )]

    version: Annotated[str, Field(
        description='Application version',
        examples=['1.0.0']
    )]

    environment: Annotated[str, Field(
        description='Deployment environment',
        examples=['dev', 'staging', 'prod']
    )]

    checks: Annotated[Optional[Dict[str, Any]], Field(
        default=None,
        description='Per-component health results'
    )] = None
