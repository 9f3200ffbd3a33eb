"""
Business logic for sales documents.

This module shapes join-select results into client-facing sales DTOs and
drives the header + detail write path, which the repository runs as a single
transaction.
"""

from typing import Any, Dict, List, Optional, Union

from aws_lambda_powertools.metrics import MetricUnit

from sales_api.dal.repositories import SalesRepository
from sales_api.handlers.utils.errors import ResourceNotFoundError
from sales_api.handlers.utils.observability import logger, metrics, tracer
from sales_api.logic.pagination import PageRequest, build_pagination_envelope
from sales_api.models.entities import SalesHeader
from sales_api.models.input import SaleRequest, SaleUpdateRequest
from sales_api.models.output import CreateSaleOutput, PaginationEnvelope, SaleCustomer, SaleLine, SalesDTO


def to_sale_customer(customer_row: Optional[Dict[str, Any]]) -> Optional[SaleCustomer]:
    if not customer_row:
        return None
    return SaleCustomer(customerid=customer_row['customerid'], custname=customer_row.get('custname'))


def to_sale_line(detail_row: Dict[str, Any]) -> SaleLine:
    """Map a detail row; item fields come from the item join and are None without it."""
    item = detail_row.get('master_item')
    return SaleLine(
        itemid=item['itemid'] if item else None,
        itemname=item['itemname'] if item else None,
        unitprice=detail_row['unitprice'],
        qty=detail_row['qty'],
    )


def to_sales_dto(join_row: Dict[str, Any]) -> SalesDTO:
    """
    Flatten a sales join-select row into a SalesDTO.

    A missing customer renders as ``customer: None`` and a missing item as
    null item fields; detail lines keep the order storage returned them in.
    """
    return SalesDTO(
        docno=join_row['docno'],
        docdate=join_row['docdate'],
        customerid=join_row.get('customerid'),
        customer=to_sale_customer(join_row.get('master_customer')),
        sales_detail=[to_sale_line(detail) for detail in join_row.get('sales_detail') or []],
    )


def to_sales_list_row(header_row: Dict[str, Any]) -> Dict[str, Any]:
    """Rename the embedded ``master_customer`` of a listed header to ``customer``."""
    row = {key: value for key, value in header_row.items() if key != 'master_customer'}
    row['customer'] = header_row.get('master_customer')
    return row


def to_detail_rows(request: Union[SaleRequest, SaleUpdateRequest]) -> List[Dict[str, Any]]:
    return [
        {'itemid': line.itemid, 'unitprice': line.unitprice, 'qty': line.qty}
        for line in request.lines
    ]


class SalesService:
    """Business logic service for sales documents."""

    def __init__(self, repository: SalesRepository):
        self.repository = repository

    @tracer.capture_method
    def list_page(self, page_request: PageRequest) -> PaginationEnvelope:
        total, rows = self.repository.page(page_request.offset, page_request.limit)

        logger.info("Sales page listed", extra={
            "page": page_request.page,
            "limit": page_request.limit,
            "total": total,
            "count": len(rows),
        })
        return build_pagination_envelope(page_request, total, [to_sales_list_row(row) for row in rows])

    @tracer.capture_method
    def get_sale(self, docno: int) -> SalesDTO:
        """
        Fetch one sale with its customer and detail lines.

        Raises:
            ResourceNotFoundError: If no header has this docno
        """
        join_row = self.repository.get_sale(docno)
        if join_row is None:
            raise ResourceNotFoundError(
                resource_type="Sale",
                resource_id=str(docno),
                message="Sales record not found",
            )

        tracer.put_annotation("docno", docno)
        return to_sales_dto(join_row)

    @tracer.capture_method
    def create_sale(self, request: SaleRequest) -> CreateSaleOutput:
        """
        Create a header and its detail lines.

        A sale without items is valid and gets no detail lines.
        """
        header = self.repository.create_sale(
            header={'docdate': request.docdate, 'customerid': request.customerid},
            lines=to_detail_rows(request),
        )

        metrics.add_metric(name="SaleCreated", unit=MetricUnit.Count, value=1)
        metrics.add_metric(name="SaleLinesWritten", unit=MetricUnit.Count, value=len(request.lines))
        logger.info("Sale created", extra={
            "docno": header['docno'],
            "customerid": request.customerid,
            "line_count": len(request.lines),
        })
        return CreateSaleOutput(docno=header['docno'])

    @tracer.capture_method
    def update_sale(self, docno: int, request: SaleUpdateRequest) -> Optional[SalesHeader]:
        """
        Update the header fields sent and replace every detail line with ``request.items``.

        Returns:
            The updated header, or None when no header has this docno
        """
        updated = self.repository.replace_sale(
            docno,
            header=request.header_fields(),
            lines=to_detail_rows(request),
        )
        if updated is None:
            logger.info("Sale not found for update", extra={"docno": docno})
            return None

        metrics.add_metric(name="SaleUpdated", unit=MetricUnit.Count, value=1)
        return SalesHeader.model_validate(updated)

    @tracer.capture_method
    def delete_sale(self, docno: int) -> None:
        deleted = self.repository.delete_sale(docno)
        logger.info("Sale delete processed", extra={"docno": docno, "deleted_rows": deleted})
