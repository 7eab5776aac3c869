"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates the administrator endpoints into a
single router mounted under ``/api/admin``. Every route requires the
``ADMIN_EMAIL`` account.

Included routers:
    - dashboard: 전체 통계 (Cross-tenant statistics)
    - users: 사용자 관리 (User management)
    - companies: 회사 조회 (Company listing)
    - transactions: 거래 조회 (Transaction listing)
    - maintenance: 토큰 정리 (Token sweep)
"""

from fastapi import APIRouter

from app.api.admin.companies import router as companies_router
from app.api.admin.dashboard import router as dashboard_router
from app.api.admin.maintenance import router as maintenance_router
from app.api.admin.transactions import router as transactions_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(dashboard_router, tags=["Admin - Dashboard"])
admin_router.include_router(users_router, prefix="/users", tags=["Admin - Users"])
admin_router.include_router(companies_router, prefix="/companies", tags=["Admin - Companies"])
admin_router.include_router(transactions_router, prefix="/transactions", tags=["Admin - Transactions"])
admin_router.include_router(maintenance_router, prefix="/maintenance", tags=["Admin - Maintenance"])
