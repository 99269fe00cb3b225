"""
Пагинация списков.

page: номер страницы с нуля (по умолчанию 0), limit: размер страницы.
Без limit возвращаются все записи.
"""
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SAQuery

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int = 0
    limit: Optional[int] = None


@dataclass
class PageParams:
    page: int = 0
    limit: Optional[int] = None


def page_params(
    page: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def paginate(q: SAQuery, params: PageParams) -> tuple[list, int]:
    """Возвращает (записи страницы, общее количество)."""
    total = q.order_by(None).count()
    if params.limit is None:
        return q.all(), total
    return q.offset(params.page * params.limit).limit(params.limit).all(), total
