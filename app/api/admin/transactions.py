"""관리자 거래 라우터 — 전체 거래 조회.

Admin Transaction Router — Paginated listing of every transaction.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.deps import AdminUser, ServicesDep, StorageDep
from app.schemas.admin import AdminTransaction
from app.utils.pagination import Page, build_page, parse_limit, parse_page

router: APIRouter = APIRouter()


@router.get("", response_model=Page[AdminTransaction])
async def list_transactions(
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
    search: Annotated[str, Query()] = "",
    status: Annotated[str, Query()] = "",
) -> dict:
    """거래 목록 (설명 검색, 상태 필터) — Transactions across every company."""
    page_number: int = parse_page(page)
    page_size: int = parse_limit(limit)
    rows, total = await services.admin.list_transactions(
        storage, search.strip(), status.strip(), page_number, page_size
    )
    return build_page(rows, total, page_number, page_size)
