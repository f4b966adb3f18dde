"""Shared endpoint dependencies"""

from dataclasses import dataclass
from fastapi import Query

from app.database import get_db  # noqa: F401  (re-exported for endpoints)
from app.schemas.responses import PaginationMeta


@dataclass
class Pagination:
    page: int
    page_size: int

    def meta(self, total: int) -> PaginationMeta:
        return PaginationMeta.for_page(self.page, self.page_size, total)


async def get_pagination(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
) -> Pagination:
    """?page=&pageSize= for list endpoints"""
    return Pagination(page=page, page_size=page_size)
