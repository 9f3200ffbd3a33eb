"""
Response helpers producing the uniform ``{status, error, data}`` envelope.
"""

import json
from typing import Any, Optional, Type, TypeVar

from aws_lambda_powertools.event_handler import Response, content_types
from pydantic import BaseModel

from sales_api.handlers.utils.errors import ValidationError
from sales_api.models.output import ApiEnvelope

ModelT = TypeVar('ModelT', bound=BaseModel)


def envelope_response(status_code: int = 200, data: Any = None, error: Optional[str] = None) -> Response:
    """Wrap ``data`` or ``error`` in the envelope, echoing the status code in the body."""
    envelope = ApiEnvelope(status=status_code, error=error, data=data)
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=envelope.model_dump_json(),
    )


def ok(data: Any = None) -> Response:
    return envelope_response(200, data=data)


def error_response(status_code: int, message: str) -> Response:
    return envelope_response(status_code, error=message)


def parse_body(body: Optional[str], model: Type[ModelT]) -> ModelT:
    """
    Decode a JSON request body and validate it into ``model``.

    Raises:
        ValidationError: If the body is not JSON or not a JSON object
        pydantic.ValidationError: If the object does not satisfy ``model``
    """
    try:
        payload = json.loads(body or "{}")
    except json.JSONDecodeError as e:
        raise ValidationError(message=f"Invalid JSON in request body: {e.msg}") from e

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    return model.model_validate(payload)


def parse_id(raw_id: str, field: str) -> int:
    """
    Parse a path identifier.

    Raises:
        ValidationError: If ``raw_id`` is not an integer
    """
    try:
        return int(raw_id)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            message=f"Invalid {field}: {raw_id}",
            field_errors=[{"field": field, "message": "must be an integer"}],
        ) from e
