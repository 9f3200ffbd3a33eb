"""
Pytest configuration and shared fixtures for the sales API.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import json
import os
from datetime import date
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import pytest

# Test environment configuration; set before the service package is imported
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "DATABASE_URL": "sqlite://",
    "COGNITO_APP_CLIENT_ID": "test-app-client-id",
    "ENVIRONMENT": "test",
    "APP_VERSION": "test-1.0.0",
    "POWERTOOLS_SERVICE_NAME": "test-serverless-sales-api",
    "POWERTOOLS_METRICS_NAMESPACE": "TestSalesApi",
    "LOG_LEVEL": "DEBUG",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
})

from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sales_api.dal.schema import metadata  # noqa: E402
from sales_api.dal.sql_gateway import SqlQueryGateway  # noqa: E402
from sales_api.handlers.utils.dependencies import Services, override_services  # noqa: E402
from sales_api.handlers.utils.errors import AuthenticationError  # noqa: E402
from sales_api.handlers.utils.observability import metrics  # noqa: E402
from sales_api.models.output import SignInOutput  # noqa: E402
from sales_api.security.auth import AuthenticatedUser  # noqa: E402

VALID_TOKEN = "valid-access-token"
TEST_EMAIL = "admin@example.com"
TEST_PASSWORD = "correct-horse"


class FakeAuthProvider:
    """In-memory auth provider accepting one user and one token."""

    def __init__(self):
        self.user = AuthenticatedUser(
            user_id="user-123",
            username="admin",
            email=TEST_EMAIL,
            attributes={"sub": "user-123", "email": TEST_EMAIL},
        )
        self.signed_out_tokens = []

    def sign_in(self, email: str, password: str) -> SignInOutput:
        if email != TEST_EMAIL or password != TEST_PASSWORD:
            raise AuthenticationError("Incorrect username or password.")
        return SignInOutput(user=self.user.model_dump(), access_token=VALID_TOKEN, expires_in=3600)

    def get_user(self, access_token: str) -> AuthenticatedUser:
        if access_token != VALID_TOKEN or access_token in self.signed_out_tokens:
            raise AuthenticationError("Access Token has been revoked")
        return self.user

    def sign_out(self, access_token: str) -> None:
        self.signed_out_tokens.append(access_token)


# Database fixtures
@pytest.fixture
def engine():
    """In-memory sqlite database holding the sales tables."""
    db_engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(db_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        # sqlite ignores ON DELETE CASCADE unless foreign keys are switched on
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    metadata.create_all(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def gateway(engine) -> SqlQueryGateway:
    return SqlQueryGateway(engine)


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def services(gateway, auth_provider) -> Services:
    """Services wired over the sqlite gateway and installed for the handler."""
    wired = Services.from_components(gateway, auth_provider)
    override_services(wired)
    yield wired
    override_services(None)


# Sample data fixtures
@pytest.fixture
def seeded(gateway) -> Dict[str, Any]:
    """Two customers, three items and two sales dated in March and July 2024."""
    customers = gateway.insert("master_customer", [{"custname": "PT Sumber Makmur"}, {"custname": "Toko Maju"}])
    items = gateway.insert("master_item", [
        {"itemname": "Kopi Arabica 250g"},
        {"itemname": "Teh Hijau 100g"},
        {"itemname": "Gula Aren 1kg"},
    ])
    sales = gateway.insert("sales_header", [
        {"docdate": date(2024, 3, 15), "customerid": customers[0]["customerid"]},
        {"docdate": date(2024, 7, 2), "customerid": customers[1]["customerid"]},
    ])
    gateway.insert("sales_detail", [
        {"docno": sales[0]["docno"], "itemid": items[0]["itemid"], "unitprice": 10, "qty": 2},
        {"docno": sales[0]["docno"], "itemid": items[1]["itemid"], "unitprice": 5.5, "qty": 4},
        {"docno": sales[1]["docno"], "itemid": items[2]["itemid"], "unitprice": 100, "qty": 1},
    ], returning=False)
    return {"customers": customers, "items": items, "sales": sales}


@pytest.fixture
def api_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST events; authenticated with the valid token by default."""

    def make_event(
        method: str,
        path: str,
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        token: Optional[str] = VALID_TOKEN,
        raw_body: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "test-agent/1.0",
        }
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        if raw_body is None and body is not None:
            raw_body = json.dumps(body)

        return {
            "resource": path,
            "httpMethod": method,
            "path": path,
            "headers": headers,
            "multiValueHeaders": {key: [value] for key, value in headers.items()},
            "body": raw_body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "requestTime": "2024-01-01T12:00:00.000Z",
                "requestTimeEpoch": 1704110400000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": None,
            "queryStringParameters": query,
            "multiValueQueryStringParameters": {key: [value] for key, value in query.items()} if query else None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return make_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-sales-api"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-sales-api"
    context.memory_limit_in_mb = "512"
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-sales-api"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def invoke(services, api_event, lambda_context) -> Callable[..., Dict[str, Any]]:
    """Invoke the Lambda handler and return ``(status_code, decoded_body)``."""
    from sales_api.handlers.api_handler import lambda_handler

    def call(method: str, path: str, **kwargs):
        response = lambda_handler(api_event(method, path, **kwargs), lambda_context)
        return response["statusCode"], json.loads(response["body"])

    return call


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics recorded outside a decorated handler between tests."""
    metrics.clear_metrics()
    yield
    metrics.clear_metrics()


# Integration test fixtures
@pytest.fixture
def integration_client():
    """HTTP client for tests against a deployed stage."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Add markers based on test location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
