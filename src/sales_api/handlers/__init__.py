"""
AWS Lambda Handlers Module.

This module contains the route modules of the sales API. Each follows the
three-layer architecture pattern:

1. Handler Layer (this module): Request/response handling, validation, routing
2. Logic Layer: Pagination, sales DTO shaping, statistics
3. Data Access Layer: Query gateway over the hosted Postgres database

The handlers use AWS Lambda Powertools for:
- Structured logging with correlation IDs
- Distributed tracing with X-Ray
- Custom metrics collection
- Route middlewares for bearer token authentication
"""

__version__ = "1.0.0"
