"""
Health check route.
"""

from datetime import datetime, timezone

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.metrics import MetricUnit

from sales_api.handlers.models.env_vars import get_handler_env_vars
from sales_api.handlers.utils.dependencies import get_services
from sales_api.handlers.utils.observability import logger, metrics, tracer
from sales_api.handlers.utils.responses import envelope_response
from sales_api.handlers.utils.rest_api_resolver import HEALTH_PATH, app
from sales_api.models.output import HealthCheckOutput


@app.get(HEALTH_PATH)
@tracer.capture_method
def health_check() -> Response:
    """
    Health check endpoint.

    Returns:
        Envelope carrying the health status; 503 when the database ping fails
    """
    logger.info("Health check requested")
    env_vars = get_handler_env_vars()

    database = get_services().gateway.ping()
    healthy = database.get('status') == 'healthy'

    if healthy:
        metrics.add_metric(name="HealthCheckSuccess", unit=MetricUnit.Count, value=1)
    else:
        metrics.add_metric(name="HealthCheckFailure", unit=MetricUnit.Count, value=1)

    health = HealthCheckOutput(
        status='healthy' if healthy else 'unhealthy',
        timestamp=datetime.now(timezone.utc),
        version=env_vars.APP_VERSION,
        environment=env_vars.ENVIRONMENT,
        checks={'database': database},
    )
    status_code = 200 if healthy else 503
    return envelope_response(
        status_code,
        data=health,
        error=None if healthy else "Service unhealthy",
    )
