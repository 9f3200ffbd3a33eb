"""
Business logic for the customer and item master data.

Both entity families share the same lifecycle: create by name, rename by id,
delete by id, list with pagination, fetch one by id.
"""

from typing import Any, Dict, Optional, Type

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel

from sales_api.dal.repositories import MasterDataRepository
from sales_api.handlers.utils.errors import ResourceNotFoundError
from sales_api.handlers.utils.observability import logger, metrics, tracer
from sales_api.logic.pagination import PageRequest, build_pagination_envelope
from sales_api.models.output import PaginationEnvelope


class MasterDataService:
    """Business logic service for one master table."""

    def __init__(self, repository: MasterDataRepository, entity_model: Type[BaseModel]):
        """
        Initialize the service.

        Args:
            repository: Repository of the master table
            entity_model: Model single rows are validated into
        """
        self.repository = repository
        self.entity_model = entity_model
        self.entity_name = repository.entity_name

    @tracer.capture_method
    def list_page(self, page_request: PageRequest) -> PaginationEnvelope:
        total, rows = self.repository.page(page_request.offset, page_request.limit)

        logger.info(f"{self.entity_name} page listed", extra={
            "page": page_request.page,
            "limit": page_request.limit,
            "total": total,
            "count": len(rows),
        })
        return build_pagination_envelope(page_request, total, rows)

    @tracer.capture_method
    def get(self, entity_id: int) -> BaseModel:
        """
        Fetch one row by id.

        Raises:
            ResourceNotFoundError: If no row has this id
        """
        row = self.repository.get(entity_id)
        if row is None:
            raise ResourceNotFoundError(resource_type=self.entity_name, resource_id=str(entity_id))
        return self.entity_model.model_validate(row)

    @tracer.capture_method
    def create(self, name: str) -> None:
        """Create a row; the assigned id is not returned to the caller."""
        self.repository.create(name)
        metrics.add_metric(name=f"{self.entity_name}Created", unit=MetricUnit.Count, value=1)

    @tracer.capture_method
    def update(self, entity_id: int, name: str) -> Optional[Dict[str, Any]]:
        """Rename a row; returns the updated row or None when no row has this id."""
        updated = self.repository.update(entity_id, name)
        if updated is None:
            logger.info(f"{self.entity_name} not found for update", extra={"entity_id": entity_id})
        return updated

    @tracer.capture_method
    def delete(self, entity_id: int) -> None:
        deleted = self.repository.delete(entity_id)
        logger.info(f"{self.entity_name} delete processed", extra={
            "entity_id": entity_id,
            "deleted_rows": deleted,
        })
