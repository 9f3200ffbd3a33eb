"""
Unit tests for the sales aggregator.

This module tests the shaping of join-select rows into sales DTOs and the
write path of the sales service against a mocked repository.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest

from sales_api.handlers.utils.errors import ResourceNotFoundError
from sales_api.logic.pagination import PageRequest
from sales_api.logic.sales_service import SalesService, to_sales_dto, to_sales_list_row
from sales_api.models.input import SaleRequest, SaleUpdateRequest


@pytest.fixture
def join_row():
    return {
        "docno": 1001,
        "docdate": date(2024, 3, 15),
        "customerid": 1,
        "master_customer": {"customerid": 1, "custname": "PT Sumber Makmur"},
        "sales_detail": [
            {"docno": 1001, "itemid": 7, "unitprice": Decimal("10.00"), "qty": 2,
             "master_item": {"itemid": 7, "itemname": "Kopi Arabica 250g"}},
            {"docno": 1001, "itemid": 3, "unitprice": Decimal("5.50"), "qty": 4,
             "master_item": {"itemid": 3, "itemname": "Teh Hijau 100g"}},
        ],
    }


class TestToSalesDTO:
    """Test cases for flattening join rows."""

    def test_full_join_row(self, join_row):
        dto = to_sales_dto(join_row)

        assert dto.docno == 1001
        assert dto.docdate == date(2024, 3, 15)
        assert dto.customerid == 1
        assert dto.customer.custname == "PT Sumber Makmur"
        assert [line.itemname for line in dto.sales_detail] == ["Kopi Arabica 250g", "Teh Hijau 100g"]
        assert dto.sales_detail[0].unitprice == 10.0
        assert dto.sales_detail[1].qty == 4

    def test_detail_order_is_preserved(self, join_row):
        """Test that lines keep the order storage returned them in."""
        dto = to_sales_dto(join_row)

        assert [line.itemid for line in dto.sales_detail] == [7, 3]

    def test_missing_customer_renders_null(self, join_row):
        join_row["master_customer"] = None

        dto = to_sales_dto(join_row)

        assert dto.customer is None
        assert dto.customerid == 1

    def test_missing_item_keeps_the_line(self, join_row):
        """Test that a line whose item is gone keeps its price and quantity."""
        join_row["sales_detail"][0]["master_item"] = None

        line = to_sales_dto(join_row).sales_detail[0]

        assert line.itemid is None
        assert line.itemname is None
        assert line.unitprice == 10.0
        assert line.qty == 2

    def test_sale_without_lines(self, join_row):
        join_row["sales_detail"] = []

        assert to_sales_dto(join_row).sales_detail == []

    def test_serialized_shape(self, join_row):
        join_row["sales_detail"][1]["master_item"] = None

        payload = to_sales_dto(join_row).model_dump(mode="json")

        assert payload["docdate"] == "2024-03-15"
        assert payload["customer"] == {"customerid": 1, "custname": "PT Sumber Makmur"}
        assert payload["sales_detail"][1] == {"itemid": None, "itemname": None, "unitprice": 5.5, "qty": 4}


class TestToSalesListRow:
    """Test cases for listed sales headers."""

    def test_renames_embedded_customer(self):
        row = to_sales_list_row({
            "docno": 1,
            "docdate": date(2024, 1, 2),
            "customerid": 4,
            "master_customer": {"customerid": 4, "custname": "Toko Maju"},
        })

        assert "master_customer" not in row
        assert row["customer"] == {"customerid": 4, "custname": "Toko Maju"}

    def test_missing_customer(self):
        row = to_sales_list_row({"docno": 1, "docdate": date(2024, 1, 2), "customerid": 9, "master_customer": None})

        assert row["customer"] is None


class TestSalesService:
    """Test cases for SalesService over a mocked repository."""

    @pytest.fixture
    def repository(self):
        return Mock()

    @pytest.fixture
    def service(self, repository):
        return SalesService(repository)

    def test_get_missing_sale_raises_not_found(self, service, repository):
        repository.get_sale.return_value = None

        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.get_sale(404)

        assert exc_info.value.message == "Sales record not found"

    def test_create_sale_returns_assigned_docno(self, service, repository):
        """Test that lines go to the repository without a docno and the assigned one comes back."""
        repository.create_sale.return_value = {"docno": 55, "docdate": date(2024, 5, 1), "customerid": 2}
        request = SaleRequest(
            docdate=date(2024, 5, 1),
            customerid=2,
            items=[{"itemid": 7, "unitprice": 10, "qty": 2}],
        )

        output = service.create_sale(request)

        assert output.docno == 55
        repository.create_sale.assert_called_once_with(
            header={"docdate": date(2024, 5, 1), "customerid": 2},
            lines=[{"itemid": 7, "unitprice": 10.0, "qty": 2}],
        )

    def test_create_sale_without_items(self, service, repository):
        repository.create_sale.return_value = {"docno": 56, "docdate": date(2024, 5, 1), "customerid": None}

        service.create_sale(SaleRequest(docdate=date(2024, 5, 1)))

        assert repository.create_sale.call_args.kwargs["lines"] == []

    def test_update_missing_sale_returns_none(self, service, repository):
        repository.replace_sale.return_value = None

        assert service.update_sale(9, SaleUpdateRequest(docdate=date(2024, 5, 1), items=[])) is None

    def test_update_returns_header(self, service, repository):
        repository.replace_sale.return_value = {"docno": 9, "docdate": date(2024, 6, 1), "customerid": 3}

        header = service.update_sale(9, SaleUpdateRequest(docdate=date(2024, 6, 1), customerid=3))

        assert header.docno == 9
        assert header.customerid == 3

    def test_update_passes_only_sent_header_fields(self, service, repository):
        """Test that a header field left out of the request is not written."""
        repository.replace_sale.return_value = {"docno": 9, "docdate": date(2024, 6, 1), "customerid": 3}

        service.update_sale(9, SaleUpdateRequest.model_validate({"docdate": "2024-06-01", "items": []}))

        repository.replace_sale.assert_called_once_with(9, header={"docdate": date(2024, 6, 1)}, lines=[])

    def test_list_page_builds_envelope(self, service, repository):
        repository.page.return_value = (3, [
            {"docno": 1, "docdate": date(2024, 1, 1), "customerid": None, "master_customer": None},
        ])

        envelope = service.list_page(PageRequest(limit=1, page=1))

        repository.page.assert_called_once_with(0, 1)
        assert envelope.total == 3
        assert envelope.total_page == 3
        assert envelope.data[0]["customer"] is None
