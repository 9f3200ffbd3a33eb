"""
Input models for request validation using Pydantic.

This module defines the request bodies accepted by the sales API.
"""

from datetime import date
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class CustomerRequest(BaseModel):
    """Request model for creating or renaming a customer."""

    custname: Annotated[str, Field(
        min_length=1,
        max_length=200,
        description='Customer name',
        examples=['PT Sumber Makmur', 'Toko Maju Jaya']
    )]

    @field_validator('custname')
    @classmethod
    def strip_custname(cls, v: str) -> str:
        """Reject names made of whitespace only."""
        if not v.strip():
            raise ValueError('custname must not be blank')
        return v.strip()


class ItemRequest(BaseModel):
    """Request model for creating or renaming an item."""

    itemname: Annotated[str, Field(
        min_length=1,
        max_length=200,
        description='Item name',
        examples=['Kopi Arabica 250g']
    )]

    @field_validator('itemname')
    @classmethod
    def strip_itemname(cls, v: str) -> str:
        """Reject names made of whitespace only."""
        if not v.strip():
            raise ValueError('itemname must not be blank')
        return v.strip()


class SaleLineRequest(BaseModel):
    """A single detail line of a sale."""

    itemid: Annotated[int, Field(
        description='Referenced item',
        examples=[7]
    )]

    unitprice: Annotated[float, Field(
        ge=0,
        description='Price per unit',
        examples=[12500.0]
    )]

    qty: Annotated[int, Field(
        gt=0,
        description='Quantity sold',
        examples=[3]
    )]


class SaleRequest(BaseModel):
    """Request model for creating a sale."""

    docdate: Annotated[date, Field(
        description='Document date (YYYY-MM-DD)',
        examples=['2024-03-15']
    )]

    customerid: Annotated[Optional[int], Field(
        default=None,
        description='Referenced customer',
        examples=[1]
    )] = None

    items: Annotated[Optional[List[SaleLineRequest]], Field(
        default=None,
        description='Detail lines; omitted or empty means a sale without lines'
    )] = None

    @property
    def lines(self) -> List[SaleLineRequest]:
        return self.items or []


class SaleUpdateRequest(BaseModel):
    """
    Request model for updating a sale.

    Header fields left out of the body keep their stored values; an explicit
    ``customerid: null`` clears the customer. The items list always replaces
    every existing detail line.
    """

    docdate: Annotated[Optional[date], Field(
        default=None,
        description='Document date (YYYY-MM-DD)',
        examples=['2024-03-15']
    )] = None

    customerid: Annotated[Optional[int], Field(
        default=None,
        description='Referenced customer',
        examples=[1]
    )] = None

    items: Annotated[Optional[List[SaleLineRequest]], Field(
        default=None,
        description='Detail lines; omitted or empty removes every line'
    )] = None

    @field_validator('docdate')
    @classmethod
    def docdate_not_null(cls, v: Optional[date]) -> date:
        """A sale always keeps a document date."""
        if v is None:
            raise ValueError('docdate must not be null')
        return v

    @property
    def lines(self) -> List[SaleLineRequest]:
        return self.items or []

    def header_fields(self) -> Dict[str, Any]:
        """Header columns the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude={'items'})


class SignInRequest(BaseModel):
    """Request model for password sign-in."""

    email: Annotated[str, Field(
        min_length=1,
        description='Account email address',
        examples=['admin@example.com']
    )]

    password: Annotated[str, Field(
        min_length=1,
        description='Account password'
    )]
