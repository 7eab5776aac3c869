"""관리자 대시보드 라우터 — 전체 통계.

Admin Dashboard Router — Cross-tenant statistics for the admin home.
"""

from fastapi import APIRouter

from app.api.deps import AdminUser, ServicesDep, StorageDep
from app.schemas.admin import AdminStatsResponse

router: APIRouter = APIRouter()


@router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats(
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
) -> AdminStatsResponse:
    """전체 사용자/회사/거래 수, 지급 합계, 최근 사용자/거래 5건.

    User, company and transaction counts, paid revenue, and the five most
    recent users and transactions.
    """
    return await services.admin.get_stats(storage)
