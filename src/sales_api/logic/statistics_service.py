"""
Sales statistics computed client-side from raw rows.

Global stats sum revenue (unitprice * qty); monthly stats sum quantity.
The two totals answer different questions and are kept apart.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sales_api.dal.repositories import CustomerRepository, ItemRepository, SalesRepository
from sales_api.handlers.utils.observability import logger, tracer
from sales_api.models.entities import SalesDetail
from sales_api.models.output import GlobalStats, MonthlySales, TotalSales


def sum_revenue(detail_rows: Iterable[Dict[str, Any]]) -> Decimal:
    """Exact sum of ``unitprice * qty`` over the given detail rows."""
    return sum((SalesDetail.model_validate(row).amount for row in detail_rows), Decimal('0'))


def month_keys(year: int) -> List[str]:
    return [f"{year:04d}-{month:02d}" for month in range(1, 13)]


def aggregate_monthly_quantities(year: int, dated_rows: Iterable[Dict[str, Any]]) -> List[MonthlySales]:
    """
    Sum ``qty`` per ``YYYY-MM`` over detail rows carrying an embedded ``sales_header``.

    Rows whose header did not resolve a date are skipped. The result always
    holds twelve entries, January first, with zero for months without sales.
    """
    totals = {key: 0 for key in month_keys(year)}

    for row in dated_rows:
        header = row.get('sales_header')
        if not header or header.get('docdate') is None:
            continue
        key = str(header['docdate'])[:7]
        if key in totals:
            totals[key] += int(row['qty'])

    return [MonthlySales(month=key, totalSales=value) for key, value in totals.items()]


class StatisticsService:
    """Business logic service for the stats endpoints."""

    def __init__(
        self,
        customers: CustomerRepository,
        items: ItemRepository,
        sales: SalesRepository,
    ):
        self.customers = customers
        self.items = items
        self.sales = sales

    @tracer.capture_method
    def compute_global_stats(self) -> GlobalStats:
        """
        Count items, customers and sales headers, and total every detail line.

        Each count is its own query; the revenue is summed over every detail
        row in storage with no page limit applied.
        """
        total_items = self.items.count()
        total_customers = self.customers.count()
        sales_count = self.sales.count()
        revenue = sum_revenue(self.sales.list_detail_lines())

        logger.info("Global stats computed", extra={
            "total_items": total_items,
            "total_customers": total_customers,
            "sales_count": sales_count,
        })
        return GlobalStats(
            total_items=total_items,
            total_customers=total_customers,
            total_sales=TotalSales(count=sales_count, total_price=revenue),
        )

    @tracer.capture_method
    def compute_monthly_sales(self, year: Optional[int] = None) -> List[MonthlySales]:
        year = year or date.today().year
        rows = self.sales.list_detail_lines_dated(date(year, 1, 1), date(year, 12, 31))

        tracer.put_annotation("stats_year", year)
        logger.info("Monthly sales computed", extra={"year": year, "source_rows": len(rows)})
        return aggregate_monthly_quantities(year, rows)
