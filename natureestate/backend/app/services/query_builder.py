# backend/app/services/query_builder.py
"""
Dynamic search / filter / paginate.

A resource declares a SearchSpec: an ordered table of recognized filters
(public name -> column(s), operator, value type) plus an allowlist of sort
keys. Requests go through three steps:

  1) parse()  - validation boundary; raw query strings become typed
                Predicate triples, unknown names are dropped
  2) apply()  - predicates compile to bound SQLAlchemy clauses
  3) fetch()  - one COUNT over the filtered statement, one page query

Nothing from the request is ever spliced into SQL text: column names come
from the table, values travel as bind parameters.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import InvalidFilterValue, StoreUnavailable

log = logging.getLogger("natureestate.search")

OPS = ("contains", "eq", "gte", "lte")
VALUE_TYPES = ("text", "int", "number", "bool", "datetime", "choice")

_TRUE = ("true", "1", "yes")
_FALSE = ("false", "0", "no")

# signed BIGINT; anything wider overflows the driver bind
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


class FilterTableError(ValueError):
    """A recognized-filter table is malformed (programming error, not a request error)."""


@dataclass(frozen=True)
class FilterSpec:
    name: str
    columns: tuple
    op: str = "eq"
    value_type: str = "text"
    choices: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", (self.columns,))
        if not self.columns:
            raise FilterTableError(f"filter {self.name!r} has no columns")
        if self.op not in OPS:
            raise FilterTableError(f"filter {self.name!r}: unknown operator {self.op!r}")
        if self.value_type not in VALUE_TYPES:
            raise FilterTableError(f"filter {self.name!r}: unknown value type {self.value_type!r}")
        if self.op == "contains" and self.value_type != "text":
            raise FilterTableError(f"filter {self.name!r}: contains requires a text value")
        if self.op in ("gte", "lte") and self.value_type in ("text", "bool", "choice"):
            raise FilterTableError(f"filter {self.name!r}: range operator on {self.value_type} value")
        if self.value_type == "choice" and not self.choices:
            raise FilterTableError(f"filter {self.name!r}: choice filter without choices")

    def coerce(self, raw: str) -> Any:
        v = raw.strip()
        t = self.value_type

        if t == "text":
            return v

        if t == "int":
            return _parse_int(self.name, raw, None)

        if t == "number":
            try:
                out = float(v)
            except ValueError:
                raise InvalidFilterValue(self.name, raw, "number")
            if not math.isfinite(out):
                raise InvalidFilterValue(self.name, raw, "number")
            return out

        if t == "bool":
            low = v.lower()
            if low in _TRUE:
                return True
            if low in _FALSE:
                return False
            raise InvalidFilterValue(self.name, raw, "boolean")

        if t == "datetime":
            return parse_datetime(self.name, raw)

        # choice
        if v not in self.choices:
            raise InvalidFilterValue(self.name, raw, "one of " + ", ".join(self.choices))
        return v


@dataclass(frozen=True)
class SortSpec:
    name: str
    columns: tuple
    default_order: str = "desc"

    def __post_init__(self) -> None:
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", (self.columns,))
        if not self.columns:
            raise FilterTableError(f"sort {self.name!r} has no columns")
        if self.default_order not in ("asc", "desc"):
            raise FilterTableError(f"sort {self.name!r}: default_order must be asc|desc")


@dataclass(frozen=True)
class Predicate:
    columns: tuple
    op: str
    value: Any

    def clause(self):
        if self.op == "contains":
            pattern = f"%{_escape_like(str(self.value))}%"
            parts = [c.ilike(pattern, escape="\\") for c in self.columns]
            return parts[0] if len(parts) == 1 else or_(*parts)

        parts = []
        for c in self.columns:
            if self.op == "eq":
                parts.append(c == self.value)
            elif self.op == "gte":
                parts.append(c >= self.value)
            else:
                parts.append(c <= self.value)
        return parts[0] if len(parts) == 1 else or_(*parts)


@dataclass
class SearchParams:
    predicates: list[Predicate]
    values: dict[str, Any]
    sort_key: str
    sort_order: str
    limit: int
    offset: int

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1


@dataclass
class Page:
    items: list
    total_count: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return int(math.ceil(self.total_count / self.limit)) if self.total_count else 0

    def envelope(self, key: str, items: Optional[list] = None, **extra: Any) -> dict[str, Any]:
        out: dict[str, Any] = {
            key: list(self.items if items is None else items),
            "total_count": self.total_count,
            "page": self.page,
            "per_page": self.limit,
            "total_pages": self.total_pages,
        }
        out.update(extra)
        return out


def _escape_like(s: str) -> str:
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_datetime(name: str, raw: str) -> datetime:
    v = raw.strip()
    if v.endswith("Z") or v.endswith("z"):
        v = v[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(v)
    except ValueError:
        raise InvalidFilterValue(name, raw, "ISO-8601 date or datetime")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _parse_int(name: str, raw: Optional[str], default: Optional[int]) -> Optional[int]:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        out = int(str(raw).strip())
    except ValueError:
        raise InvalidFilterValue(name, raw, "integer")
    if not INT_MIN <= out <= INT_MAX:
        raise InvalidFilterValue(name, raw, f"integer between {INT_MIN} and {INT_MAX}")
    return out


class SearchSpec:
    """
    Recognized-filter table + sort allowlist for one resource.

    Filters are applied in declaration order. `tiebreak` (usually the
    primary key) is always appended to ORDER BY so equal sort values still
    page deterministically.
    """

    def __init__(
        self,
        name: str,
        *,
        filters: Sequence[FilterSpec],
        sorts: Sequence[SortSpec],
        tiebreak,
        default_sort: str = "created_at",
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> None:
        seen: set[str] = set()
        for f in filters:
            if f.name in seen:
                raise FilterTableError(f"{name}: duplicate filter {f.name!r}")
            seen.add(f.name)

        self.sorts = {s.name: s for s in sorts}
        if len(self.sorts) != len(sorts):
            raise FilterTableError(f"{name}: duplicate sort key")
        if default_sort not in self.sorts:
            raise FilterTableError(f"{name}: default sort {default_sort!r} not in sort table")
        if default_limit < 1 or max_limit < default_limit:
            raise FilterTableError(f"{name}: bad limits")

        self.name = name
        self.filters = tuple(filters)
        self.tiebreak = tiebreak
        self.default_sort = default_sort
        self.default_limit = int(default_limit)
        self.max_limit = int(max_limit)

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.filters)

    # ---- validation boundary ----
    def parse(self, query: Mapping[str, Any]) -> SearchParams:
        predicates: list[Predicate] = []
        values: dict[str, Any] = {}

        for f in self.filters:
            raw = query.get(f.name)
            if raw is None:
                continue
            raw = str(raw)
            if raw.strip() == "":
                continue
            value = f.coerce(raw)
            values[f.name] = value
            predicates.append(Predicate(columns=f.columns, op=f.op, value=value))

        sort_key = str(query.get("sort_by") or "").strip()
        if sort_key not in self.sorts:
            sort_key = self.default_sort

        sort_order = str(query.get("sort_order") or "").strip().lower()
        if sort_order not in ("asc", "desc"):
            sort_order = self.sorts[sort_key].default_order

        limit = _parse_int("limit", query.get("limit"), self.default_limit)
        offset = _parse_int("offset", query.get("offset"), 0)

        return SearchParams(
            predicates=predicates,
            values=values,
            sort_key=sort_key,
            sort_order=sort_order,
            limit=max(1, min(limit, self.max_limit)),
            offset=max(0, offset),
        )

    # ---- compilation ----
    def apply(self, stmt: Select, params: SearchParams) -> Select:
        if params.predicates:
            stmt = stmt.where(and_(*[p.clause() for p in params.predicates]))
        return stmt

    def order_clauses(self, params: SearchParams) -> list:
        sort = self.sorts.get(params.sort_key) or self.sorts[self.default_sort]
        out = [c.asc() if params.sort_order == "asc" else c.desc() for c in sort.columns]
        out.append(self.tiebreak.asc())
        return out

    def count(self, db: Session, stmt: Select) -> int:
        sub = stmt.order_by(None).limit(None).offset(None).subquery()
        return int(db.scalar(select(func.count()).select_from(sub)) or 0)

    def fetch(self, db: Session, stmt: Select, params: SearchParams, *, scalars: bool = True) -> Page:
        """
        Apply predicates to `stmt` (already scoped by the caller, e.g. to the
        current user), count the full match set, then load one page.
        """
        filtered = self.apply(stmt, params)
        try:
            total = self.count(db, filtered)
            paged = filtered.order_by(*self.order_clauses(params)).limit(params.limit).offset(params.offset)
            result = db.execute(paged)
            items = list(result.scalars().all()) if scalars else list(result.all())
        except SQLAlchemyError as e:
            log.exception("search failed", extra={"search": self.name})
            raise StoreUnavailable("data store unavailable") from e

        log.debug(
            "search executed",
            extra={"search": self.name, "filters": sorted(params.values), "total": total},
        )
        return Page(items=items, total_count=total, limit=params.limit, offset=params.offset)


__all__ = [
    "FilterSpec",
    "FilterTableError",
    "Page",
    "Predicate",
    "SearchParams",
    "SearchSpec",
    "SortSpec",
    "parse_datetime",
]
