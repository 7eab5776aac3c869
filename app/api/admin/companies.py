"""관리자 회사 라우터 — 전체 회사 조회.

Admin Company Router — Paginated listing of every company with its owner.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.deps import AdminUser, ServicesDep, StorageDep
from app.schemas.admin import AdminCompany
from app.utils.pagination import Page, build_page, parse_limit, parse_page

router: APIRouter = APIRouter()


@router.get("", response_model=Page[AdminCompany])
async def list_companies(
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
    search: Annotated[str, Query()] = "",
) -> dict:
    """회사 목록 (회사명/소유자 검색, 거래 수 포함).

    Companies matching ``search`` in their name or their owner's name or
    email, with owner details and transaction counts.
    """
    page_number: int = parse_page(page)
    page_size: int = parse_limit(limit)
    rows, total = await services.admin.list_companies(storage, search.strip(), page_number, page_size)
    return build_page(rows, total, page_number, page_size)
