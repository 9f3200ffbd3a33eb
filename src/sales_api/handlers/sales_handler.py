"""
Sales routes: paginated headers, expanded single sale, and the header + lines
write path.
"""

from aws_lambda_powertools.event_handler import Response

from sales_api.handlers.utils.dependencies import get_services
from sales_api.handlers.utils.errors import ResourceNotFoundError
from sales_api.handlers.utils.observability import logger, tracer
from sales_api.handlers.utils.responses import ok, parse_body, parse_id
from sales_api.handlers.utils.rest_api_resolver import SALES_PATH, app
from sales_api.logic.pagination import PageRequest
from sales_api.models.input import SaleRequest, SaleUpdateRequest
from sales_api.security.auth import AUTH_MIDDLEWARES

SALE_PATH = f'{SALES_PATH}/<docno>'


@app.get(SALES_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def list_sales() -> Response:
    page_request = PageRequest.from_query(
        limit=app.current_event.get_query_string_value(name='limit'),
        page=app.current_event.get_query_string_value(name='page'),
    )
    return ok(get_services().sales.list_page(page_request))


@app.get(SALE_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def get_sale(docno: str) -> Response:
    """
    Get one sale with its customer and detail lines.

    Args:
        docno: Document number

    Returns:
        Envelope carrying the sales DTO
    """
    try:
        parsed_docno = int(docno)
    except ValueError:
        raise ResourceNotFoundError(resource_type="Sale", resource_id=docno, message="Sales record not found") from None

    return ok(get_services().sales.get_sale(parsed_docno))


@app.post(SALES_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def create_sale() -> Response:
    """
    Create a sale and its detail lines in one transaction.

    Returns:
        Envelope carrying the assigned docno
    """
    request = parse_body(app.current_event.body, SaleRequest)
    tracer.put_annotation("sale_line_count", len(request.lines))

    created = get_services().sales.create_sale(request)
    logger.info("Create sale request processed", extra={"docno": created.docno})
    return ok(created)


@app.put(SALE_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def update_sale(docno: str) -> Response:
    """
    Update the sent header fields of a sale and replace all of its detail lines.

    Returns:
        Envelope carrying the updated header, or null data when the sale does not exist
    """
    parsed_docno = parse_id(docno, 'docno')
    request = parse_body(app.current_event.body, SaleUpdateRequest)
    return ok(get_services().sales.update_sale(parsed_docno, request))


@app.delete(SALE_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def delete_sale(docno: str) -> Response:
    get_services().sales.delete_sale(parse_id(docno, 'docno'))
    return ok(None)
