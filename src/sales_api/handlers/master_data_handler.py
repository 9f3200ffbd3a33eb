"""
Master data routes: customers and items.

Both families expose the same five routes (list, fetch one, create, rename,
delete), so the route functions are built once per family and registered on
the shared resolver.
"""

from typing import Callable, Type

from aws_lambda_powertools.event_handler import Response
from pydantic import BaseModel

from sales_api.handlers.utils.dependencies import get_services
from sales_api.handlers.utils.errors import ResourceNotFoundError
from sales_api.handlers.utils.observability import logger, tracer
from sales_api.handlers.utils.responses import ok, parse_body, parse_id
from sales_api.handlers.utils.rest_api_resolver import CUSTOMERS_PATH, ITEMS_PATH, app
from sales_api.logic.master_data_service import MasterDataService
from sales_api.logic.pagination import PageRequest
from sales_api.models.input import CustomerRequest, ItemRequest
from sales_api.security.auth import AUTH_MIDDLEWARES


def register_master_data_routes(
    base_path: str,
    entity_name: str,
    id_field: str,
    name_field: str,
    request_model: Type[BaseModel],
    get_service: Callable[[], MasterDataService],
) -> None:
    """Register the list/get/create/update/delete routes of one master table under ``base_path``."""
    item_path = f'{base_path}/<entity_id>'

    @app.get(base_path, middlewares=AUTH_MIDDLEWARES)
    @tracer.capture_method
    def list_entities() -> Response:
        page_request = PageRequest.from_query(
            limit=app.current_event.get_query_string_value(name='limit'),
            page=app.current_event.get_query_string_value(name='page'),
        )
        return ok(get_service().list_page(page_request))

    @app.get(item_path, middlewares=AUTH_MIDDLEWARES)
    @tracer.capture_method
    def get_entity(entity_id: str) -> Response:
        # an id that is not a number cannot match any row
        try:
            parsed_id = int(entity_id)
        except ValueError:
            raise ResourceNotFoundError(resource_type=entity_name, resource_id=entity_id) from None

        tracer.put_annotation(id_field, parsed_id)
        return ok(get_service().get(parsed_id))

    @app.post(base_path, middlewares=AUTH_MIDDLEWARES)
    @tracer.capture_method
    def create_entity() -> Response:
        request = parse_body(app.current_event.body, request_model)
        get_service().create(getattr(request, name_field))

        logger.info(f"{entity_name} create request processed")
        return ok(None)

    @app.put(item_path, middlewares=AUTH_MIDDLEWARES)
    @tracer.capture_method
    def update_entity(entity_id: str) -> Response:
        parsed_id = parse_id(entity_id, id_field)
        request = parse_body(app.current_event.body, request_model)
        return ok(get_service().update(parsed_id, getattr(request, name_field)))

    @app.delete(item_path, middlewares=AUTH_MIDDLEWARES)
    @tracer.capture_method
    def delete_entity(entity_id: str) -> Response:
        get_service().delete(parse_id(entity_id, id_field))
        return ok(None)


register_master_data_routes(
    CUSTOMERS_PATH,
    entity_name='Customer',
    id_field='customerid',
    name_field='custname',
    request_model=CustomerRequest,
    get_service=lambda: get_services().customers,
)

register_master_data_routes(
    ITEMS_PATH,
    entity_name='Item',
    id_field='itemid',
    name_field='itemname',
    request_model=ItemRequest,
    get_service=lambda: get_services().items,
)
