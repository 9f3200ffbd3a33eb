"""
Data Access Layer (DAL) for the sales API.

This module provides the query gateway interface used by the repositories,
the filter and relation value objects passed through it, and the factory
that builds the production gateway.
"""

from dataclasses import dataclass, field
from typing import Any, ContextManager, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable


@dataclass(frozen=True)
class Filter:
    """A single column predicate: ``column <op> value``."""

    column: str
    op: str
    value: Any


def eq(column: str, value: Any) -> Filter:
    return Filter(column, 'eq', value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, 'gte', value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, 'lte', value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, 'in', tuple(values))


@dataclass(frozen=True)
class Relation:
    """
    A foreign-key relation embedded into the rows of a join-select.

    Rows of ``table`` whose ``remote_column`` matches the parent's ``local_column``
    are nested under ``name``: a list when ``many`` is set, otherwise the first
    match or None.
    """

    name: str
    table: str
    local_column: str
    remote_column: str
    many: bool = False
    columns: Optional[Tuple[str, ...]] = None
    filters: Tuple[Filter, ...] = ()
    relations: Tuple['Relation', ...] = field(default_factory=tuple)


@runtime_checkable
class QueryGateway(Protocol):
    """Protocol defining the hosted database query interface."""

    def count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        """Return the exact number of rows matching the filters."""
        ...

    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        columns: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows, optionally range-limited."""
        ...

    def select_embedded(
        self,
        table: str,
        relations: Sequence[Relation],
        filters: Sequence[Filter] = (),
        columns: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows together with their related rows."""
        ...

    def insert(self, table: str, rows: Sequence[Dict[str, Any]], returning: bool = True) -> List[Dict[str, Any]]:
        """Insert a batch of rows."""
        ...

    def update(self, table: str, values: Dict[str, Any], filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""
        ...

    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        """Delete matching rows and return how many were removed."""
        ...

    def transaction(self, read_only: bool = False) -> ContextManager['QueryGateway']:
        """Run the enclosed calls as one atomic unit; ``read_only`` marks failures as reads."""
        ...

    def ping(self) -> Dict[str, Any]:
        """Check database connectivity."""
        ...


def get_query_gateway(
    database_url: str,
    pool_size: int = 1,
    connect_timeout: int = 10,
    echo: bool = False,
) -> QueryGateway:
    """
    Factory function to get the production query gateway.

    Args:
        database_url: SQLAlchemy URL of the hosted database
        pool_size: Connections kept open per container
        connect_timeout: Connection timeout in seconds
        echo: Log every statement

    Returns:
        Query gateway instance
    """
    # Import here to avoid circular imports
    from sales_api.dal.sql_gateway import SqlQueryGateway, create_database_engine

    engine = create_database_engine(database_url, pool_size=pool_size, connect_timeout=connect_timeout, echo=echo)
    return SqlQueryGateway(engine)


__all__ = [
    'Filter',
    'Relation',
    'QueryGateway',
    'eq',
    'gte',
    'lte',
    'in_',
    'get_query_gateway',
]
