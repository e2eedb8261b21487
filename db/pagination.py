"""
db/pagination.py
----------------
Offset pagination: sort specifications, page requests and result pages,
and their translation into ORDER BY / LIMIT ... OFFSET fragments.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from db.sql import Where
from errors import ValidationError

T = TypeVar("T")
U = TypeVar("U")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class Direction(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class Order:
    property: str
    direction: Direction = Direction.ASC

    @classmethod
    def asc(cls, prop: str) -> "Order":
        return cls(prop, Direction.ASC)

    @classmethod
    def desc(cls, prop: str) -> "Order":
        return cls(prop, Direction.DESC)


@dataclass(frozen=True)
class Sort:
    """Ordered list of (property, direction) pairs; empty means unsorted."""
    orders: tuple[Order, ...] = ()

    @classmethod
    def by(cls, *orders: "Order | str") -> "Sort":
        return cls(tuple(o if isinstance(o, Order) else Order.asc(o) for o in orders))

    @classmethod
    def unsorted(cls) -> "Sort":
        return cls()

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    def __iter__(self):
        return iter(self.orders)


@dataclass(frozen=True)
class PageRequest:
    """
    Zero-based page index, positive page size and an optional sort.

    Raises:
        ValidationError: If page < 0 or size <= 0.
    """
    page: int
    size: int
    sort: Sort = field(default_factory=Sort.unsorted)

    def __post_init__(self):
        if self.page < 0:
            raise ValidationError(
                "Page index must not be negative", context={"page": self.page}
            )
        if self.size <= 0:
            raise ValidationError(
                "Page size must be positive", context={"size": self.size}
            )

    @classmethod
    def of(cls, page: int, size: int, sort: Optional[Sort] = None) -> "PageRequest":
        return cls(page, size, sort or Sort.unsorted())

    @property
    def offset(self) -> int:
        return self.page * self.size

    def next(self) -> "PageRequest":
        return PageRequest(self.page + 1, self.size, self.sort)

    def with_sort(self, sort: Sort) -> "PageRequest":
        return PageRequest(self.page, self.size, sort)


@dataclass
class Page(Generic[T]):
    """One slice of a result set plus the total across all pages."""
    content: list[T]
    request: PageRequest
    total_elements: int

    @property
    def number(self) -> int:
        return self.request.page

    @property
    def size(self) -> int:
        return self.request.size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.request.size)

    @property
    def has_next(self) -> bool:
        return self.request.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.request.page > 0

    @property
    def is_empty(self) -> bool:
        return not self.content

    def map(self, fn: Callable[[T], U]) -> "Page[U]":
        return Page([fn(item) for item in self.content], self.request, self.total_elements)


# ── SQL FRAGMENTS ─────────────────────────────────────────

def _resolve_column(prop: str, columns: Optional[Mapping[str, str]]) -> str:
    if columns is not None:
        try:
            return columns[prop]
        except KeyError:
            raise ValidationError(
                f"Cannot sort by unknown property '{prop}'",
                context={"property": prop, "allowed": ", ".join(sorted(columns))},
            ) from None
    if not _IDENTIFIER.match(prop):
        raise ValidationError(
            f"Invalid sort property '{prop}'", context={"property": prop}
        )
    return prop


def build_order_by_clause(
    sort: Sort,
    columns: Optional[Mapping[str, str]] = None,
    tiebreaker: Optional[str] = None,
) -> str:
    """
    ORDER BY fragment with a leading space, or "" when there is nothing to
    order by.

    Args:
        sort: Requested sort.
        columns: Optional property -> column mapping; when given, only its
            keys are accepted as sort properties.
        tiebreaker: Unique column appended last (ascending) unless the sort
            already orders by it, so that equal sort keys still give a
            total order across pages.
    """
    resolved = [(_resolve_column(o.property, columns), o.direction) for o in sort]
    if tiebreaker and tiebreaker not in {c for c, _ in resolved}:
        resolved.append((tiebreaker, Direction.ASC))
    if not resolved:
        return ""
    return " ORDER BY " + ", ".join(f"{c} {d.value}" for c, d in resolved)


def build_pagination_clause(request: PageRequest, dialect: str = "postgresql") -> str:
    """LIMIT/OFFSET fragment (or the ANSI OFFSET/FETCH form) with a leading space."""
    if dialect == "ansi":
        return f" OFFSET {request.offset} ROWS FETCH NEXT {request.size} ROWS ONLY"
    return f" LIMIT {request.size} OFFSET {request.offset}"


def fetch_page(
    executor,
    *,
    select_sql: str,
    count_sql: str,
    where: Where,
    request: PageRequest,
    mapper: Callable[[Mapping[str, Any]], T],
    columns: Optional[Mapping[str, str]] = None,
    default_sort: Optional[Sort] = None,
    tiebreaker: Optional[str] = None,
) -> Page[T]:
    """
    Run the count and content statements for one page.

    Both statements get the same WHERE fragment and parameters; ORDER BY and
    LIMIT/OFFSET are appended to the content statement only.

    Args:
        executor: StatementExecutor to run the statements on.
        select_sql: SELECT ... FROM ... without a WHERE clause.
        count_sql: SELECT COUNT(*) FROM ... over the same FROM clause.
        where: Filter shared by both statements.
        request: Page to fetch.
        mapper: Row mapper for the content rows.
        columns: Optional property -> column mapping for sorting.
        default_sort: Used when the request is unsorted.
        tiebreaker: Unique column appended as the last sort key.
    """
    params: Sequence = tuple(where.params)
    total = executor.count(count_sql + where.sql, params)
    if total <= request.offset:
        return Page([], request, total)

    sort = request.sort if request.sort.is_sorted else (default_sort or Sort.unsorted())
    sql = (
        select_sql
        + where.sql
        + build_order_by_clause(sort, columns, tiebreaker)
        + build_pagination_clause(request, executor.dialect)
    )
    content = executor.query_for_list(sql, mapper, params)
    return Page(content, request, total)
