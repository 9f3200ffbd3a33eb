"""
Pagination engine shared by every list endpoint.

Parses the ``limit``/``page`` query parameters, turns them into a row range,
and builds the pagination envelope from the pre-pagination total.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sales_api.models.output import PaginationEnvelope

DEFAULT_LIMIT = 25
DEFAULT_PAGE = 1


def _positive_int(raw: Optional[str], default: int) -> int:
    """Parse a query value, falling back to the default for anything but a positive integer."""
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class PageRequest:
    """A requested page: ``limit`` rows starting at page ``page`` (1-based)."""

    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE

    @classmethod
    def from_query(cls, limit: Optional[str] = None, page: Optional[str] = None) -> 'PageRequest':
        return cls(limit=_positive_int(limit, DEFAULT_LIMIT), page=_positive_int(page, DEFAULT_PAGE))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    current_page: int
    total_page: int
    limit: int


def paginate(total_count: int, limit: int, requested_page: int) -> PageInfo:
    """
    Compute page metadata.

    ``total_page`` is ``ceil(total_count / limit)`` and therefore 0 when there
    are no rows. Pages past the end are not an error; they simply hold no rows.
    """
    if total_count < 0:
        raise ValueError("total_count must not be negative")
    if limit <= 0:
        raise ValueError("limit must be positive")

    return PageInfo(
        current_page=requested_page,
        total_page=math.ceil(total_count / limit),
        limit=limit,
    )


def build_pagination_envelope(
    page_request: PageRequest,
    total_count: int,
    rows: List[Dict[str, Any]],
) -> PaginationEnvelope:
    info = paginate(total_count, page_request.limit, page_request.page)
    return PaginationEnvelope(
        limit=info.limit,
        current_page=info.current_page,
        total_page=info.total_page,
        count=len(rows),
        total=total_count,
        data=rows,
    )
