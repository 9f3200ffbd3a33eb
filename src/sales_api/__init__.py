"""
Serverless Sales API Service Module.

This package contains the sales API implementation following the three-layer
architecture pattern from the aws-lambda-handler-cookbook:

- handlers: API routes, middleware and the Lambda entry point
- logic: Pagination, sales DTO shaping and statistics
- dal: Query gateway and repositories over the hosted Postgres database
- models: Request, response and entity schemas
- security: Cognito session passthrough and bearer token middleware
"""

__version__ = "1.0.0"
__description__ = "Serverless CRUD API over customers, items and sales"

from sales_api.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
