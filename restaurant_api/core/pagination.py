from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from sqlalchemy.orm import Query

from restaurant_api.core.config import DEFAULT_PAGE, DEFAULT_PER_PAGE, MAX_PER_PAGE


@dataclass(frozen=True)
class PageParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def normalize_page_params(page: Optional[int], per_page: Optional[int]) -> PageParams:
    page = DEFAULT_PAGE if page is None else int(page)
    per_page = DEFAULT_PER_PAGE if per_page is None else int(per_page)

    if page < 1:
        page = 1
    if per_page < 1:
        per_page = DEFAULT_PER_PAGE
    if per_page > MAX_PER_PAGE:
        per_page = MAX_PER_PAGE
    return PageParams(page=page, per_page=per_page)


def pagination_metadata(*, total: int, page: int, per_page: int) -> dict:
    total_pages = math.ceil(total / per_page) if total > 0 else 0
    return {
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def paginate(
    collection: Union[Query, Sequence[Any]],
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> dict:
    """Slice ``collection`` into one page plus its pagination metadata.

    Accepts a SQLAlchemy ``Query`` (paged with LIMIT/OFFSET) or an in-memory
    sequence. The caller is responsible for a stable ordering.
    """
    params = normalize_page_params(page, per_page)

    if isinstance(collection, Query):
        total = collection.order_by(None).count()
        data = collection.limit(params.per_page).offset(params.offset).all()
    else:
        items = list(collection)
        total = len(items)
        data = items[params.offset : params.offset + params.per_page]

    return {
        "data": data,
        "pagination": pagination_metadata(total=total, page=params.page, per_page=params.per_page),
    }
