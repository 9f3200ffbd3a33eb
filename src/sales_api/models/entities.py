"""
Entity models for rows stored in the hosted sales database.

The database owns these rows; the models describe what the service reads back.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """A row of master_customer."""

    model_config = ConfigDict(extra='ignore')

    customerid: Annotated[int, Field(
        description='Storage-assigned customer identifier',
        examples=[1]
    )]

    custname: Annotated[str, Field(
        description='Customer name',
        examples=['PT Sumber Makmur']
    )]


class Item(BaseModel):
    """A row of master_item."""

    model_config = ConfigDict(extra='ignore')

    itemid: Annotated[int, Field(
        description='Storage-assigned item identifier',
        examples=[7]
    )]

    itemname: Annotated[str, Field(
        description='Item name',
        examples=['Kopi Arabica 250g']
    )]


class SalesHeader(BaseModel):
    """A row of sales_header."""

    model_config = ConfigDict(extra='ignore')

    docno: Annotated[int, Field(
        description='Storage-assigned document number',
        examples=[1001]
    )]

    docdate: Annotated[date, Field(
        description='Document date'
    )]

    customerid: Annotated[Optional[int], Field(
        default=None,
        description='Referenced customer, not enforced by storage'
    )] = None


class SalesDetail(BaseModel):
    """A row of sales_detail, owned by its header."""

    model_config = ConfigDict(extra='ignore')

    docno: int
    itemid: int
    unitprice: Decimal
    qty: int

    @property
    def amount(self) -> Decimal:
        return self.unitprice * self.qty
