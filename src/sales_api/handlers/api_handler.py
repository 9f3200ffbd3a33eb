"""
Sales API Handler - Lambda function for the sales REST API.

This module wires every route module onto the shared resolver and converts
every failure into the uniform ``{status, error, data}`` envelope at the
handler boundary.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

# route modules register their routes on import
from sales_api.handlers import (  # noqa: F401
    health_handler,
    master_data_handler,
    sales_handler,
    session_handler,
    stats_handler,
)
from sales_api.handlers.utils.errors import (
    BaseServiceError,
    ErrorContext,
    ValidationError as ServiceValidationError,
    create_error_context,
    get_http_status_code,
    log_error_metrics,
)
from sales_api.handlers.utils.observability import logger, metrics, tracer
from sales_api.handlers.utils.responses import error_response
from sales_api.handlers.utils.rest_api_resolver import app


def request_error_context() -> ErrorContext:
    """Error context of the request being resolved."""
    event = app.current_event
    request_context = event.request_context
    user = app.context.get('user')
    return create_error_context(
        request_id=request_context.request_id if request_context else "unknown",
        operation=f"{event.http_method} {event.path}",
        user_id=user.user_id if user else None,
    )


def format_validation_errors(error: ValidationError) -> str:
    field_errors = [
        f"{'.'.join(str(part) for part in detail['loc']) or 'body'}: {detail['msg']}"
        for detail in error.errors()
    ]
    return "Request validation failed: " + "; ".join(field_errors)


@app.exception_handler(BaseServiceError)
def handle_service_error(error: BaseServiceError) -> Response:
    """Convert a service error into the envelope with its mapped status code."""
    if error.context is None:
        error.context = request_error_context()
    log_error_metrics(error)
    return error_response(get_http_status_code(error), error.user_message)


@app.exception_handler(ValidationError)
def handle_request_validation_error(error: ValidationError) -> Response:
    """Convert a pydantic body validation failure into a 400 envelope."""
    message = format_validation_errors(error)
    log_error_metrics(ServiceValidationError(
        message=message,
        field_errors=[
            {"field": str(detail["loc"][-1]) if detail["loc"] else "body", "message": detail["msg"]}
            for detail in error.errors()
        ],
        context=request_error_context(),
    ))
    return error_response(400, message)


@app.exception_handler(Exception)
def handle_unexpected_error(error: Exception) -> Response:
    logger.exception("Unexpected error in handler", extra={"error": str(error)})
    metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)
    return error_response(500, "An unexpected error occurred")


@app.not_found
def handle_not_found(error: NotFoundError) -> Response:
    logger.info("Route not found", extra={
        "path": app.current_event.path,
        "method": app.current_event.http_method,
    })
    return error_response(404, "Route not found")


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda handler for the sales API.

    Args:
        event: API Gateway REST event
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return app.resolve(event, context)
