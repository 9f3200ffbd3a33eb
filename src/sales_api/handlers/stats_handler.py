"""
Statistics routes: global totals and the monthly breakdown of a year.
"""

from typing import Optional

from aws_lambda_powertools.event_handler import Response

from sales_api.handlers.utils.dependencies import get_services
from sales_api.handlers.utils.errors import ValidationError
from sales_api.handlers.utils.observability import tracer
from sales_api.handlers.utils.responses import ok
from sales_api.handlers.utils.rest_api_resolver import MONTHLY_SALES_PATH, STATS_PATH, app
from sales_api.security.auth import AUTH_MIDDLEWARES


def parse_year(raw: Optional[str]) -> Optional[int]:
    """
    Parse the ``year`` query value; None when absent.

    Raises:
        ValidationError: If the value is not a year between 1 and 9999
    """
    if raw is None or raw.strip() == '':
        return None
    try:
        year = int(raw.strip())
    except ValueError:
        year = 0
    if not 1 <= year <= 9999:
        raise ValidationError(
            message=f"Invalid year: {raw}",
            field_errors=[{"field": "year", "message": "must be an integer between 1 and 9999"}],
        )
    return year


@app.get(STATS_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def get_global_stats() -> Response:
    return ok(get_services().stats.compute_global_stats())


@app.get(MONTHLY_SALES_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def get_monthly_sales() -> Response:
    """Quantity sold per month of ``year`` (default: the current year), January first."""
    year = parse_year(app.current_event.get_query_string_value(name='year'))
    return ok(get_services().stats.compute_monthly_sales(year))
