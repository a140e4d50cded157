"""
Pagination Utility Module

Offset pagination and substring filtering shared by the list endpoints.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
from pydantic import BaseModel, computed_field
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from unidirectory.core.config import settings

# OFFSET is a signed 64-bit value in both SQLite and Postgres
MAX_OFFSET = 2 ** 63 - 1


class PaginationParams(BaseModel):
    """Normalized pagination parameters"""
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    # Prisma-style aliases
    @property
    def skip(self) -> int:
        return self.offset

    @property
    def take(self) -> int:
        return self.limit


def _parse_positive_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value >= 1 else None


def parse_pagination(
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    default_page: Optional[int] = None,
    default_page_size: Optional[int] = None,
    max_page_size: Optional[int] = None,
) -> PaginationParams:
    """
    Build PaginationParams from raw query-string values.

    Missing, unparseable and non-positive values fall back to the defaults.
    page_size is capped at max_page_size, and page at the last page whose
    offset still fits in MAX_OFFSET (beyond it every page is empty anyway).
    """
    default_page = default_page or settings.DEFAULT_PAGE
    default_page_size = default_page_size or settings.DEFAULT_PAGE_SIZE
    max_page_size = max_page_size or settings.MAX_PAGE_SIZE

    parsed_page = _parse_positive_int(page) or default_page
    parsed_size = _parse_positive_int(page_size) or default_page_size

    parsed_size = min(parsed_size, max_page_size)
    parsed_page = min(parsed_page, MAX_OFFSET // parsed_size + 1)

    return PaginationParams(page=parsed_page, page_size=parsed_size)


class ContainsFilter:
    """
    Conjunction of case-insensitive "contains" predicates.

    Only non-empty values become predicates; absent fields are left out
    rather than matched as a wildcard. Values are matched literally, LIKE
    wildcards in them are escaped.
    """

    def __init__(self, model: Type[Any], **values: Optional[str]):
        self.model = model
        self.values: Dict[str, str] = {
            field: value for field, value in values.items() if value
        }

    @property
    def where(self) -> Dict[str, Dict[str, str]]:
        return {field: {"contains": value} for field, value in self.values.items()}

    @property
    def conditions(self) -> List[ColumnElement[bool]]:
        return [
            getattr(self.model, field).icontains(value, autoescape=True)
            for field, value in self.values.items()
        ]

    def __bool__(self) -> bool:
        return bool(self.values)

    def __repr__(self) -> str:
        return f"<ContainsFilter {self.model.__name__} {self.where}>"


class ListQuery:
    """
    A filtered, paginated listing of one model.

    The slice and the total are two independent statements sharing the same
    predicate; they are not run in a transaction together.
    """

    def __init__(
        self,
        model: Type[Any],
        pagination: PaginationParams,
        conditions: Sequence[ColumnElement[bool]] = (),
        options: Sequence[Any] = (),
    ):
        self.model = model
        self.pagination = pagination
        self.conditions = list(conditions)
        self.options = list(options)

    def count_statement(self) -> Select:
        stmt = select(func.count()).select_from(self.model)
        if self.conditions:
            stmt = stmt.where(*self.conditions)
        return stmt

    def page_statement(self) -> Select:
        stmt = select(self.model)
        if self.conditions:
            stmt = stmt.where(*self.conditions)
        if self.options:
            # refresh rows already in the identity map so eager loads apply
            stmt = stmt.options(*self.options).execution_options(populate_existing=True)
        return (
            stmt.order_by(self.model.id)
            .offset(self.pagination.offset)
            .limit(self.pagination.limit)
        )

    async def execute(self, db: AsyncSession) -> Tuple[List[Any], int]:
        """Run both statements, returning (items, total)"""
        count_result = await db.execute(self.count_statement())
        total = count_result.scalar() or 0

        result = await db.execute(self.page_statement())
        items = list(result.scalars().all())
        return items, total


class PaginatedResponse(BaseModel):
    """Paging metadata that accompanies a list payload"""
    total: int
    page: int
    page_size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size if self.total > 0 else 1

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.page > 1


def create_paginated_response(total: int, pagination: PaginationParams) -> Dict[str, Any]:
    """
    Paging fields for a list response body, camelCased for the client.

    Returns: total, page, pageSize, totalPages, hasNext, hasPrevious
    """
    meta = PaginatedResponse(total=total, page=pagination.page, page_size=pagination.page_size)
    return {
        "total": meta.total,
        "page": meta.page,
        "pageSize": meta.page_size,
        "totalPages": meta.total_pages,
        "hasNext": meta.has_next,
        "hasPrevious": meta.has_previous,
    }
