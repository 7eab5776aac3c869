"""페이지네이션 유틸리티 모듈.

Pagination utility module.
Normalises ``page``/``limit`` query parameters and provides the generic
paginated response model used by every list endpoint:

    {"data": [...], "pagination": {"page": 1, "limit": 50, "total": 120, "totalPages": 3}}
"""

import math
from typing import Any, Generic, Sequence, TypeVar

from app.schemas.base import ApiModel

T = TypeVar("T")

# 기본/최대 페이지 크기 — Default and maximum page size
DEFAULT_LIMIT: int = 50
MAX_LIMIT: int = 100


def parse_page(value: Any) -> int:
    """페이지 번호를 정규화합니다 — 잘못된 값이나 1 미만이면 1.

    Normalise a page number: anything unparsable or below 1 becomes 1.
    """
    try:
        page: int = int(value)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def parse_limit(value: Any) -> int:
    """페이지 크기를 정규화합니다 — 잘못된 값/1 미만은 50, 100 초과는 100.

    Normalise a page size: unparsable or below 1 becomes the default (50),
    above the maximum is clamped to 100.
    """
    try:
        limit: int = int(value)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    if limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


class Pagination(ApiModel):
    """페이지네이션 메타데이터.

    Pagination metadata for client-side paging controls.

    Attributes:
        page: 현재 페이지 번호 (Current page number, 1-based)
        limit: 페이지당 항목 수 (Items per page)
        total: 전체 항목 수 (Total count across all pages)
        total_pages: 전체 페이지 수 (Total number of pages)
    """

    page: int
    limit: int
    total: int
    total_pages: int  # ceil(total / limit)


class Page(ApiModel, Generic[T]):
    """페이지네이션 결과 모델.

    Paginated response wrapper.
    """

    data: list[T]
    pagination: Pagination


def build_page(items: Sequence[Any], total: int, page: int, limit: int) -> dict[str, Any]:
    """항목과 전체 개수로 페이지 응답 딕셔너리를 만듭니다.

    Build the paginated payload from a page of items and the total count.

    Args:
        items: 현재 페이지 항목 (Items of the current page)
        total: 전체 개수 (Total count)
        page: 페이지 번호 (Page number)
        limit: 페이지 크기 (Page size)

    Returns:
        dict[str, Any]: {"data", "pagination"} 딕셔너리 (Page payload)
    """
    return {
        "data": list(items),
        "pagination": Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        ),
    }
