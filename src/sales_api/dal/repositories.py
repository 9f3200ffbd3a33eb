"""
Entity repositories over the query gateway.

Each repository translates one entity family's CRUD intents into gateway
calls and returns raw rows; shaping the rows for clients is left to the
logic layer.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sales_api.dal import Filter, QueryGateway, Relation, eq, gte, in_, lte
from sales_api.handlers.utils.observability import logger, tracer

CUSTOMER_RELATION = Relation(
    name='master_customer',
    table='master_customer',
    local_column='customerid',
    remote_column='customerid',
    columns=('customerid', 'custname'),
)

ITEM_RELATION = Relation(
    name='master_item',
    table='master_item',
    local_column='itemid',
    remote_column='itemid',
    columns=('itemid', 'itemname'),
)

DETAIL_RELATION = Relation(
    name='sales_detail',
    table='sales_detail',
    local_column='docno',
    remote_column='docno',
    many=True,
    relations=(ITEM_RELATION,),
)

HEADER_COLUMNS = ('docno', 'docdate', 'customerid')


def fetch_page(
    gateway: QueryGateway,
    table: str,
    offset: int,
    limit: int,
    filters: Sequence[Filter] = (),
    relations: Sequence[Relation] = (),
) -> Tuple[int, List[Dict[str, Any]]]:
    """
    Count and range-select one page of a table in a single transaction.

    Both calls receive the same filters so the total always describes the
    rows the page was cut from.

    Returns:
        Tuple of (total row count, rows of the page)
    """
    with gateway.transaction(read_only=True) as tx:
        total = tx.count(table, filters)
        if relations:
            rows = tx.select_embedded(table, relations, filters=filters, offset=offset, limit=limit)
        else:
            rows = tx.select(table, filters=filters, offset=offset, limit=limit)
    return total, rows


class MasterDataRepository:
    """Repository for a master table holding an id and a name."""

    entity_name: str = ''
    table_name: str = ''
    id_column: str = ''
    name_column: str = ''

    def __init__(self, gateway: QueryGateway):
        self.gateway = gateway

    def page(self, offset: int, limit: int) -> Tuple[int, List[Dict[str, Any]]]:
        return fetch_page(self.gateway, self.table_name, offset, limit)

    def count(self) -> int:
        return self.gateway.count(self.table_name)

    def get(self, entity_id: int) -> Optional[Dict[str, Any]]:
        rows = self.gateway.select(self.table_name, filters=[eq(self.id_column, entity_id)], limit=1)
        return rows[0] if rows else None

    @tracer.capture_method
    def create(self, name: str) -> Dict[str, Any]:
        created = self.gateway.insert(self.table_name, [{self.name_column: name}])[0]
        logger.info(f"{self.entity_name} created", extra={self.id_column: created[self.id_column]})
        return created

    @tracer.capture_method
    def update(self, entity_id: int, name: str) -> Optional[Dict[str, Any]]:
        rows = self.gateway.update(
            self.table_name,
            {self.name_column: name},
            filters=[eq(self.id_column, entity_id)],
        )
        return rows[0] if rows else None

    @tracer.capture_method
    def delete(self, entity_id: int) -> int:
        return self.gateway.delete(self.table_name, filters=[eq(self.id_column, entity_id)])


class CustomerRepository(MasterDataRepository):
    entity_name = 'Customer'
    table_name = 'master_customer'
    id_column = 'customerid'
    name_column = 'custname'


class ItemRepository(MasterDataRepository):
    entity_name = 'Item'
    table_name = 'master_item'
    id_column = 'itemid'
    name_column = 'itemname'


class SalesRepository:
    """Repository for sales headers and their detail lines."""

    header_table = 'sales_header'
    detail_table = 'sales_detail'

    def __init__(self, gateway: QueryGateway):
        self.gateway = gateway

    def page(self, offset: int, limit: int) -> Tuple[int, List[Dict[str, Any]]]:
        """Page of headers, each with its customer embedded under ``master_customer``."""
        return fetch_page(self.gateway, self.header_table, offset, limit, relations=[CUSTOMER_RELATION])

    def count(self) -> int:
        return self.gateway.count(self.header_table)

    @tracer.capture_method
    def get_sale(self, docno: int) -> Optional[Dict[str, Any]]:
        """
        Join-select one header with its customer, detail lines and their items.

        Returns:
            Nested row with ``master_customer`` and ``sales_detail[].master_item``,
            or None when the header does not exist
        """
        rows = self.gateway.select_embedded(
            self.header_table,
            [CUSTOMER_RELATION, DETAIL_RELATION],
            filters=[eq('docno', docno)],
            columns=HEADER_COLUMNS,
        )
        return rows[0] if rows else None

    @tracer.capture_method
    def create_sale(self, header: Dict[str, Any], lines: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Insert a header and its detail lines as one unit.

        Returns:
            The stored header including its storage-assigned docno
        """
        with self.gateway.transaction() as tx:
            created = tx.insert(self.header_table, [header])[0]
            docno = created['docno']
            if lines:
                tx.insert(self.detail_table, [{**line, 'docno': docno} for line in lines], returning=False)

        logger.info("Sale stored", extra={"docno": docno, "line_count": len(lines)})
        return created

    @tracer.capture_method
    def replace_sale(
        self,
        docno: int,
        header: Dict[str, Any],
        lines: Sequence[Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        """
        Update a header and fully replace its detail lines as one unit.

        Only the columns present in ``header`` are written; an empty ``header``
        leaves the stored header as it is.

        Returns:
            The updated header, or None when no header has this docno (the
            detail lines are then left untouched)
        """
        key = [eq('docno', docno)]
        with self.gateway.transaction() as tx:
            if header:
                updated = tx.update(self.header_table, header, filters=key)
            else:
                updated = tx.select(self.header_table, filters=key, columns=HEADER_COLUMNS, limit=1)
            if not updated:
                return None

            removed = tx.delete(self.detail_table, filters=key)
            if lines:
                tx.insert(self.detail_table, [{**line, 'docno': docno} for line in lines], returning=False)

        logger.info("Sale replaced", extra={
            "docno": docno,
            "removed_lines": removed,
            "inserted_lines": len(lines),
        })
        return updated[0]

    @tracer.capture_method
    def delete_sale(self, docno: int) -> int:
        # detail lines go with the header through ON DELETE CASCADE
        return self.gateway.delete(self.header_table, filters=[eq('docno', docno)])

    def list_detail_lines(self) -> List[Dict[str, Any]]:
        """Every detail line currently stored, without any page limit."""
        return self.gateway.select(self.detail_table)

    def list_detail_lines_dated(self, start: date, end: date) -> List[Dict[str, Any]]:
        """
        Detail lines of headers dated within ``[start, end]``, each with its
        header's docdate embedded under ``sales_header``.
        """
        date_range = (gte('docdate', start), lte('docdate', end))
        header_relation = Relation(
            name='sales_header',
            table=self.header_table,
            local_column='docno',
            remote_column='docno',
            columns=('docdate',),
            filters=date_range,
        )

        with self.gateway.transaction(read_only=True) as tx:
            headers = tx.select(self.header_table, filters=date_range, columns=('docno',))
            if not headers:
                return []
            return tx.select_embedded(
                self.detail_table,
                [header_relation],
                filters=[in_('docno', [header['docno'] for header in headers])],
            )
