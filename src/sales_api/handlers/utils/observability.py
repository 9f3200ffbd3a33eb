"""
Powertools logger, tracer and metrics shared by the sales API.

Every layer imports these three instances, so log lines, trace segments and
EMF metrics of one invocation share a service name and correlation id.
"""

import os

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Used when POWERTOOLS_METRICS_NAMESPACE is not set
METRICS_NAMESPACE = 'SalesApi'

# Level from LOG_LEVEL; uncaught exceptions are logged before the runtime reports them
logger: Logger = Logger(log_uncaught_exceptions=True)

# No-op outside Lambda or with POWERTOOLS_TRACE_DISABLED=true
tracer: Tracer = Tracer()

metrics = Metrics(namespace=os.environ.get('POWERTOOLS_METRICS_NAMESPACE', METRICS_NAMESPACE))

# Split dashboards per stage without tagging every add_metric call
metrics.set_default_dimensions(environment=os.environ.get('ENVIRONMENT', 'dev'))
