"""
SQLAlchemy implementation of the query gateway.

This module talks to the hosted Postgres database (Supabase) through SQLAlchemy
Core, converting driver failures into StorageError with the driver message kept
verbatim, and exposing transactions as an explicit context manager.
"""

import functools
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from aws_lambda_powertools.metrics import MetricUnit
from sqlalchemy import MetaData, Table, create_engine, delete, func, insert, select, text, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from sales_api.dal import Filter, Relation
from sales_api.dal.schema import metadata as sales_metadata
from sales_api.handlers.utils.errors import StorageError
from sales_api.handlers.utils.observability import logger, metrics, tracer

_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    'eq': lambda column, value: column == value,
    'gte': lambda column, value: column >= value,
    'lte': lambda column, value: column <= value,
    'in': lambda column, value: column.in_(value),
}


def create_database_engine(
    database_url: str,
    pool_size: int = 1,
    connect_timeout: int = 10,
    echo: bool = False,
) -> Engine:
    """
    Create the SQLAlchemy engine for the hosted database.

    Args:
        database_url: SQLAlchemy database URL
        pool_size: Connections kept open per Lambda container
        connect_timeout: Connection timeout in seconds
        echo: Log every statement

    Returns:
        Configured engine
    """
    if database_url.startswith('sqlite'):
        return create_engine(database_url, echo=echo)

    connect_args: Dict[str, Any] = {'connect_timeout': connect_timeout}

    # Supabase only accepts TLS connections
    if 'supabase.co' in database_url:
        connect_args['sslmode'] = 'require'

    engine = create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=connect_args,
        echo=echo,
    )
    logger.info("Database engine created", extra={
        "dialect": engine.dialect.name,
        "pool_size": pool_size,
        "ssl_required": 'sslmode' in connect_args,
    })
    return engine


def handle_storage_errors(operation: str):
    """Decorator converting SQLAlchemy failures of a gateway call into StorageError."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, table: str, *args, **kwargs):
            operation_start = time.time()
            try:
                result = method(self, table, *args, **kwargs)
            except SQLAlchemyError as e:
                message = str(getattr(e, 'orig', None) or e)
                metrics.add_metric(name="StorageError", unit=MetricUnit.Count, value=1)
                logger.error(f"Database {operation} error", extra={
                    "error_message": message,
                    "table_name": table,
                    "operation": operation,
                })
                raise StorageError(message=message, operation=operation, table_name=table) from e

            logger.debug(f"Database {operation} completed", extra={
                "table_name": table,
                "operation": operation,
                "duration_ms": round((time.time() - operation_start) * 1000, 2),
            })
            return result

        return wrapper
    return decorator


class SqlQueryGateway:
    """Query gateway over a SQLAlchemy engine."""

    def __init__(
        self,
        engine: Engine,
        metadata: MetaData = sales_metadata,
        connection: Optional[Connection] = None,
    ):
        """
        Initialize the gateway.

        Args:
            engine: SQLAlchemy engine for the hosted database
            metadata: Table definitions queries are built from
            connection: Connection of an open transaction; when set every call
                runs on it and nothing is committed until the transaction ends
        """
        self.engine = engine
        self.metadata = metadata
        self._connection = connection

    @contextmanager
    def transaction(self, read_only: bool = False) -> Iterator['SqlQueryGateway']:
        """
        Run the enclosed gateway calls in a single database transaction.

        Args:
            read_only: The enclosed calls only read, so a failure to begin or
                end the transaction is reported as a read failure

        Yields:
            A gateway bound to the transaction's connection. Nested calls reuse
            the outer transaction.
        """
        if self._connection is not None:
            yield self
            return

        operation = "select" if read_only else "commit"
        try:
            with self.engine.begin() as connection:
                yield SqlQueryGateway(self.engine, metadata=self.metadata, connection=connection)
        except SQLAlchemyError as e:
            message = str(getattr(e, 'orig', None) or e)
            logger.error("Database transaction failed", extra={"error_message": message, "operation": operation})
            raise StorageError(message=message, operation=operation, table_name="*") from e

    @tracer.capture_method
    @handle_storage_errors("count")
    def count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        """
        Count rows exactly.

        Args:
            table: Table name
            filters: Predicates rows must satisfy

        Returns:
            Number of matching rows
        """
        table_obj = self._table(table)
        stmt = select(func.count()).select_from(table_obj).where(*self._where(table_obj, filters))
        with self._connect() as connection:
            return int(connection.execute(stmt).scalar_one())

    @tracer.capture_method
    @handle_storage_errors("select")
    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        columns: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name
            filters: Predicates rows must satisfy
            columns: Columns to return, all when omitted
            offset: Number of rows to skip
            limit: Maximum number of rows to return
            order_by: Column names to sort by; range selects default to the primary key

        Returns:
            Matching rows as dictionaries
        """
        table_obj = self._table(table)
        with self._connect() as connection:
            rows = self._select_rows(connection, table_obj, filters, offset, limit, order_by)
        return [self._project(row, columns) for row in rows]

    @tracer.capture_method
    @handle_storage_errors("select")
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
        """
        Select rows together with their related rows.

        Related rows are loaded with one IN query per relation on the same
        connection, and nested under the relation name of each parent row.

        Args:
            table: Base table name
            relations: Relations to embed
            filters: Predicates base rows must satisfy
            columns: Base columns to return, all when omitted
            offset: Number of base rows to skip
            limit: Maximum number of base rows to return
            order_by: Column names to sort base rows by

        Returns:
            Base rows with embedded relations
        """
        table_obj = self._table(table)
        with self._connect() as connection:
            rows = self._select_rows(connection, table_obj, filters, offset, limit, order_by)
            self._embed(connection, rows, relations)
        return [self._project(row, columns, relations) for row in rows]

    @tracer.capture_method
    @handle_storage_errors("insert")
    def insert(self, table: str, rows: Sequence[Dict[str, Any]], returning: bool = True) -> List[Dict[str, Any]]:
        """
        Insert a batch of rows.

        Args:
            table: Table name
            rows: Rows to insert; all rows must carry the same keys
            returning: Return the stored rows including storage-assigned ids

        Returns:
            Inserted rows when ``returning`` is set, otherwise an empty list
        """
        if not rows:
            return []

        table_obj = self._table(table)
        with self._connect() as connection:
            if returning:
                stmt = insert(table_obj).returning(*table_obj.c, sort_by_parameter_order=True)
                result = connection.execute(stmt, list(rows))
                inserted = [dict(row) for row in result.mappings()]
            else:
                connection.execute(insert(table_obj), list(rows))
                inserted = []

        logger.info("Rows inserted", extra={"table_name": table, "row_count": len(rows)})
        return inserted

    @tracer.capture_method
    @handle_storage_errors("update")
    def update(self, table: str, values: Dict[str, Any], filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        """
        Update matching rows.

        Args:
            table: Table name
            values: Column values to set
            filters: Predicates selecting the rows to update; required

        Returns:
            Updated rows
        """
        if not filters:
            raise ValueError("update requires at least one filter")

        table_obj = self._table(table)
        stmt = (
            update(table_obj)
            .where(*self._where(table_obj, filters))
            .values(**values)
            .returning(*table_obj.c)
        )
        with self._connect() as connection:
            updated = [dict(row) for row in connection.execute(stmt).mappings()]

        logger.info("Rows updated", extra={"table_name": table, "row_count": len(updated)})
        return updated

    @tracer.capture_method
    @handle_storage_errors("delete")
    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        """
        Delete matching rows.

        Args:
            table: Table name
            filters: Predicates selecting the rows to delete; required

        Returns:
            Number of deleted rows
        """
        if not filters:
            raise ValueError("delete requires at least one filter")

        table_obj = self._table(table)
        with self._connect() as connection:
            deleted = connection.execute(delete(table_obj).where(*self._where(table_obj, filters))).rowcount

        logger.info("Rows deleted", extra={"table_name": table, "row_count": deleted})
        return deleted

    @tracer.capture_method
    def ping(self) -> Dict[str, Any]:
        """
        Perform a connectivity check against the database.

        Returns:
            Health check results
        """
        start_time = time.time()
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            error_data = {
                'status': 'unhealthy',
                'error': str(getattr(e, 'orig', None) or e),
                'timestamp': datetime.now(timezone.utc).isoformat(),
            }
            logger.error("Database health check failed", extra=error_data)
            return error_data

        return {
            'status': 'healthy',
            'dialect': self.engine.dialect.name,
            'response_time_ms': round((time.time() - start_time) * 1000, 2),
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
        else:
            with self.engine.begin() as connection:
                yield connection

    def _table(self, name: str) -> Table:
        return self.metadata.tables[name]

    @staticmethod
    def _where(table_obj: Table, filters: Sequence[Filter]) -> List[Any]:
        return [_OPERATORS[f.op](table_obj.c[f.column], f.value) for f in filters]

    def _select_rows(
        self,
        connection: Connection,
        table_obj: Table,
        filters: Sequence[Filter] = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        stmt = select(table_obj).where(*self._where(table_obj, filters))

        # A range without an explicit order is not stable between calls
        if order_by is None and (offset is not None or limit is not None):
            order_by = [column.name for column in table_obj.primary_key.columns]
        if order_by:
            stmt = stmt.order_by(*(table_obj.c[name] for name in order_by))
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return [dict(row) for row in connection.execute(stmt).mappings()]

    def _embed(self, connection: Connection, rows: List[Dict[str, Any]], relations: Sequence[Relation]) -> None:
        for relation in relations:
            target = self._table(relation.table)
            keys = {row[relation.local_column] for row in rows if row.get(relation.local_column) is not None}

            related: List[Dict[str, Any]] = []
            if keys:
                key_filter = Filter(relation.remote_column, 'in', tuple(keys))
                related = self._select_rows(connection, target, (key_filter, *relation.filters))
                self._embed(connection, related, relation.relations)

            grouped: Dict[Any, List[Dict[str, Any]]] = {}
            for child in related:
                grouped.setdefault(child[relation.remote_column], []).append(
                    self._project(child, relation.columns, relation.relations)
                )

            for row in rows:
                matches = grouped.get(row.get(relation.local_column), [])
                if relation.many:
                    row[relation.name] = matches
                else:
                    row[relation.name] = matches[0] if matches else None

    @staticmethod
    def _project(
        row: Dict[str, Any],
        columns: Optional[Sequence[str]],
        relations: Sequence[Relation] = (),
    ) -> Dict[str, Any]:
        if not columns:
            return row
        keep = [*columns, *(relation.name for relation in relations)]
        return {key: row[key] for key in keep if key in row}
