"""
Service wiring for the Lambda handler.

The query gateway and auth provider are built once per container from the
environment, then handed to every repository and service explicitly. Tests
swap the whole bundle with ``override_services``.
"""

from dataclasses import dataclass
from typing import Optional

from sales_api.dal import QueryGateway, get_query_gateway
from sales_api.dal.repositories import CustomerRepository, ItemRepository, SalesRepository
from sales_api.handlers.models.env_vars import get_handler_env_vars
from sales_api.handlers.utils.observability import logger
from sales_api.logic.master_data_service import MasterDataService
from sales_api.logic.sales_service import SalesService
from sales_api.logic.statistics_service import StatisticsService
from sales_api.models.entities import Customer, Item
from sales_api.security.auth import AuthProvider, CognitoAuthProvider


@dataclass
class Services:
    """Everything a route needs, built over one gateway and one auth provider."""

    gateway: QueryGateway
    auth_provider: AuthProvider
    customers: MasterDataService
    items: MasterDataService
    sales: SalesService
    stats: StatisticsService

    @classmethod
    def from_components(cls, gateway: QueryGateway, auth_provider: AuthProvider) -> 'Services':
        customer_repository = CustomerRepository(gateway)
        item_repository = ItemRepository(gateway)
        sales_repository = SalesRepository(gateway)

        return cls(
            gateway=gateway,
            auth_provider=auth_provider,
            customers=MasterDataService(customer_repository, Customer),
            items=MasterDataService(item_repository, Item),
            sales=SalesService(sales_repository),
            stats=StatisticsService(customer_repository, item_repository, sales_repository),
        )


_services: Optional[Services] = None


def get_services() -> Services:
    """Get or create the services of this container."""
    global _services

    if _services is None:
        env_vars = get_handler_env_vars()
        gateway = get_query_gateway(
            env_vars.DATABASE_URL,
            pool_size=env_vars.DB_POOL_SIZE,
            connect_timeout=env_vars.DB_CONNECT_TIMEOUT_SECONDS,
            echo=env_vars.is_development,
        )
        auth_provider = CognitoAuthProvider(
            app_client_id=env_vars.COGNITO_APP_CLIENT_ID,
            region=env_vars.AWS_REGION,
        )
        _services = Services.from_components(gateway, auth_provider)
        logger.info("Services initialized", extra={"environment": env_vars.ENVIRONMENT})

    return _services


def override_services(services: Optional[Services]) -> None:
    """Replace the services of this container; None resets to lazy construction."""
    global _services
    _services = services
