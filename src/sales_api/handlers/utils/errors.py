"""
Error handling utilities for the sales API.

This module defines the service exception hierarchy shared by the handler,
logic and data access layers, and the helpers that classify errors into
HTTP status codes and structured log/metric records.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from sales_api.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    SECURITY = "SECURITY"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    user_id: Optional[str] = Field(default=None, description="User identifier if available")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        context: Optional[ErrorContext] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.user_message = user_message or message
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseServiceError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.field_errors = field_errors or []


class AuthenticationError(BaseServiceError):
    """Raised when a bearer token or a set of credentials is rejected."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.SECURITY,
            context=context,
        )


class ResourceNotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message or f"{resource_type} not found",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            context=context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class StorageError(BaseServiceError):
    """Raised when a call against the hosted database fails.

    The driver message is kept verbatim so it can be passed back to the caller.
    """

    WRITE_OPERATIONS = frozenset({"insert", "update", "delete", "commit"})

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="STORAGE_WRITE_ERROR" if operation in self.WRITE_OPERATIONS else "STORAGE_READ_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )
        self.operation = operation
        self.table_name = table_name

    @property
    def is_write(self) -> bool:
        return self.operation in self.WRITE_OPERATIONS


class ExternalServiceError(BaseServiceError):
    """Raised when external service calls fail."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
            context=context,
        )
        self.service_name = service_name


def create_error_context(
    request_id: str,
    operation: str,
    user_id: Optional[str] = None,
    resource_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        user_id=user_id,
        operation=operation,
        resource_id=resource_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)
    tracer.put_metadata("error_details", error.to_dict())

    log = logger.error if error.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else logger.warning
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
            "context": error.context.model_dump(mode="json") if error.context else None,
        }
    )


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    if isinstance(error, StorageError):
        return 400 if error.is_write else 500

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "AUTHENTICATION_ERROR": 401,
        "RESOURCE_NOT_FOUND": 404,
        "EXTERNAL_SERVICE_ERROR": 500,
    }

    return status_mapping.get(error.error_code, 500)
