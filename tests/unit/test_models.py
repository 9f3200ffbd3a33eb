"""
Unit tests for Pydantic models.

This module tests the validation and serialization of the request, response
and entity models used throughout the application.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from sales_api.models.entities import Customer, SalesDetail, SalesHeader
from sales_api.models.input import CustomerRequest, ItemRequest, SaleRequest, SaleUpdateRequest, SignInRequest
from sales_api.models.output import ApiEnvelope, PaginationEnvelope, TotalSales


class TestCustomerRequest:
    """Test cases for CustomerRequest model."""

    def test_valid_request(self):
        assert CustomerRequest(custname="PT Sumber Makmur").custname == "PT Sumber Makmur"

    def test_name_is_stripped(self):
        assert CustomerRequest(custname="  Toko Maju ").custname == "Toko Maju"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_is_rejected(self, name):
        with pytest.raises(ValidationError):
            CustomerRequest(custname=name)

    def test_missing_name_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CustomerRequest.model_validate({})

        assert exc_info.value.errors()[0]["loc"] == ("custname",)


class TestItemRequest:
    """Test cases for ItemRequest model."""

    def test_valid_request(self):
        assert ItemRequest(itemname="Kopi Arabica 250g").itemname == "Kopi Arabica 250g"

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            ItemRequest(itemname=" ")


class TestSaleRequest:
    """Test cases for SaleRequest model."""

    def test_valid_request_with_lines(self):
        request = SaleRequest.model_validate({
            "docdate": "2024-03-15",
            "customerid": 1,
            "items": [{"itemid": 7, "unitprice": 12500, "qty": 3}],
        })

        assert request.docdate == date(2024, 3, 15)
        assert request.customerid == 1
        assert request.lines[0].itemid == 7
        assert request.lines[0].unitprice == 12500.0

    def test_items_and_customer_are_optional(self):
        """Test that a sale without customer or lines is accepted."""
        request = SaleRequest.model_validate({"docdate": "2024-03-15"})

        assert request.customerid is None
        assert request.items is None
        assert request.lines == []

    def test_docdate_is_required(self):
        with pytest.raises(ValidationError):
            SaleRequest.model_validate({"customerid": 1})

    def test_invalid_docdate(self):
        with pytest.raises(ValidationError):
            SaleRequest.model_validate({"docdate": "15/03/2024"})

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ValidationError):
            SaleRequest.model_validate({"docdate": "2024-03-15", "items": [{"itemid": 7, "unitprice": 1, "qty": 0}]})

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            SaleRequest.model_validate({"docdate": "2024-03-15", "items": [{"itemid": 7, "unitprice": -1, "qty": 1}]})


class TestSaleUpdateRequest:
    """Test cases for SaleUpdateRequest model."""

    def test_header_fields_hold_only_what_was_sent(self):
        request = SaleUpdateRequest.model_validate({"docdate": "2024-03-15", "items": []})

        assert request.header_fields() == {"docdate": date(2024, 3, 15)}

    def test_explicit_null_customer_is_kept(self):
        request = SaleUpdateRequest.model_validate({"customerid": None})

        assert request.header_fields() == {"customerid": None}

    def test_items_only_update_has_no_header_fields(self):
        request = SaleUpdateRequest.model_validate({"items": [{"itemid": 7, "unitprice": 1, "qty": 2}]})

        assert request.header_fields() == {}
        assert request.lines[0].qty == 2

    def test_null_docdate_is_rejected(self):
        with pytest.raises(ValidationError):
            SaleUpdateRequest.model_validate({"docdate": None})


class TestTotalSales:
    """Test cases for TotalSales model."""

    def test_revenue_stays_exact_and_dumps_as_number(self):
        totals = TotalSales(count=1, total_price=Decimal("0.1") + Decimal("0.2"))

        assert totals.total_price == Decimal("0.3")
        assert totals.model_dump(mode="json") == {"count": 1, "total_price": 0.3}


class TestSignInRequest:
    """Test cases for SignInRequest model."""

    def test_missing_password_is_rejected(self):
        with pytest.raises(ValidationError):
            SignInRequest.model_validate({"email": "admin@example.com"})

    def test_empty_email_is_rejected(self):
        with pytest.raises(ValidationError):
            SignInRequest(email="", password="secret")


class TestEntities:
    """Test cases for stored row models."""

    def test_extra_columns_are_ignored(self):
        customer = Customer.model_validate({"customerid": 1, "custname": "Toko Maju", "created_at": "x"})

        assert customer.model_dump() == {"customerid": 1, "custname": "Toko Maju"}

    def test_header_without_customer(self):
        header = SalesHeader.model_validate({"docno": 3, "docdate": date(2024, 1, 1), "customerid": None})

        assert header.customerid is None

    def test_detail_amount(self):
        detail = SalesDetail(docno=1, itemid=2, unitprice=Decimal("5.50"), qty=4)

        assert detail.amount == Decimal("22.00")


class TestEnvelopes:
    """Test cases for response envelopes."""

    def test_success_envelope(self):
        payload = ApiEnvelope(status=200, data={"docno": 1}).model_dump(mode="json")

        assert payload == {"status": 200, "error": None, "data": {"docno": 1}}

    def test_error_envelope(self):
        payload = ApiEnvelope(status=404, error="Item not found").model_dump(mode="json")

        assert payload == {"status": 404, "error": "Item not found", "data": None}

    def test_nested_model_in_envelope_is_serialized(self):
        page = PaginationEnvelope(limit=25, current_page=1, total_page=0, count=0, total=0, data=[])

        payload = ApiEnvelope(status=200, data=page).model_dump(mode="json")

        assert payload["data"] == {
            "limit": 25,
            "current_page": 1,
            "total_page": 0,
            "count": 0,
            "total": 0,
            "data": [],
        }
