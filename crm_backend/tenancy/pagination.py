"""
tenancy/pagination.py
---------------------
Generic paginate / search / sort / populate over any mapped model.

Semantics:
  - page defaults to 1 and limit to the caller-supplied default when missing,
    unparsable or non-positive.
  - search is a case-insensitive, unanchored substring match OR-ed across the
    given fields. LIKE wildcards in the term are escaped, so the term is
    matched literally.
  - the total is counted with the same filter (search included) but without
    offset/limit or loaders, so ``pages`` is exact on every page.
  - rows are ordered by the requested sort, then by primary key, so pages of
    an unchanging table never overlap.
  - a page past the end is an empty page, not an error.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty, RelationshipProperty, selectinload
from sqlalchemy.sql.elements import ColumnElement

from crm_backend.core.errors import InvalidQueryError

T = TypeVar("T")

_LIKE_ESCAPE = "\\"


def _positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


@dataclass(frozen=True)
class QuerySpec:
    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    sort: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        page: Any = None,
        limit: Any = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        *,
        default_limit: int = 10,
        max_limit: Optional[int] = None,
    ) -> "QuerySpec":
        resolved_limit = _positive_int(limit) or default_limit
        if max_limit is not None:
            resolved_limit = min(resolved_limit, max_limit)
        return cls(
            page=_positive_int(page) or 1,
            limit=resolved_limit,
            search=search or None,
            sort=sort or None,
        )


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def meta(self) -> dict:
        return {"total": self.total, "page": self.page, "limit": self.limit, "pages": self.pages}


def escape_like(term: str) -> str:
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def search_clause(model: type, term: Optional[str], fields: Sequence[str]) -> Optional[ColumnElement]:
    if not term or not fields:
        return None
    pattern = f"%{escape_like(term)}%"
    return or_(*(_column(model, name).ilike(pattern, escape=_LIKE_ESCAPE) for name in fields))


def sort_clauses(model: type, sort: Optional[str]) -> list[ColumnElement]:
    """
    Accepts ``field``, ``field:asc``, ``field:desc`` or ``-field``.
    The primary key is always appended as a tie-breaker.
    """
    order: list[ColumnElement] = []
    if sort:
        name, _, direction = sort.partition(":")
        descending = direction.lower() == "desc"
        if name.startswith("-"):
            name, descending = name[1:], True
        column = _column(model, name)
        order.append(column.desc() if descending else column.asc())
        if name == "id":
            return order
    order.append(model.id.asc())
    return order


def loader_options(model: type, paths: Iterable[str]) -> list:
    """Turn dotted relationship paths (``interaction.lead.client``) into selectin loaders."""
    options = []
    for path in paths:
        current, loader = model, None
        for name in path.split("."):
            attr = getattr(current, name, None)
            if attr is None or not isinstance(getattr(attr, "property", None), RelationshipProperty):
                raise InvalidQueryError(f"Cannot populate '{path}'")
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current = attr.property.mapper.class_
        options.append(loader)
    return options


def _column(model: type, name: str):
    column = getattr(model, name, None) if name and not name.startswith("_") else None
    if not isinstance(getattr(column, "property", None), ColumnProperty):
        raise InvalidQueryError(f"Unknown field '{name}'")
    return column


async def paginate(
    db: AsyncSession,
    model: type,
    where: Sequence[ColumnElement],
    spec: QuerySpec,
    *,
    search_fields: Sequence[str] = (),
    populate: Sequence[str] = (),
    default_sort: Optional[str] = None,
) -> Page:
    clauses = list(where)
    matched = search_clause(model, spec.search, search_fields)
    if matched is not None:
        clauses.append(matched)

    count_result = await db.execute(
        select(func.count()).select_from(model).where(*clauses)
    )
    total = count_result.scalar_one()

    stmt = (
        select(model)
        .where(*clauses)
        .order_by(*sort_clauses(model, spec.sort or default_sort))
        .offset(spec.offset)
        .limit(spec.limit)
    )
    if populate:
        stmt = stmt.options(*loader_options(model, populate))

    result = await db.execute(stmt)
    items = list(result.scalars().all())
    return Page(items=items, total=total, page=spec.page, limit=spec.limit)
