"""
REST API resolver utility for the sales API Lambda handler.

This module provides the API Gateway REST resolver every route module
registers on, along with the path constants of the API.
"""

import os

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig

# API path constants
API_PREFIX = '/api/v1'
HEALTH_PATH = f'{API_PREFIX}/health'
CUSTOMERS_PATH = f'{API_PREFIX}/customers'
ITEMS_PATH = f'{API_PREFIX}/items'
SALES_PATH = f'{API_PREFIX}/sales'
STATS_PATH = f'{API_PREFIX}/stats/all'
MONTHLY_SALES_PATH = f'{API_PREFIX}/monthly-sales'
SIGNIN_PATH = f'{API_PREFIX}/signin'
PROFILE_PATH = f'{API_PREFIX}/profile'
SIGNOUT_PATH = f'{API_PREFIX}/signout'

# Configure CORS
cors_config = CORSConfig(
    allow_origin=os.environ.get('CORS_ALLOW_ORIGIN', '*'),
    max_age=600,
    allow_headers=["content-type", "authorization"],
)

# Request bodies are validated by the route modules, so resolver validation stays off
app = APIGatewayRestResolver(cors=cors_config, debug=False)
