"""관리자 유지보수 라우터 — 만료 토큰 정리.

Admin Maintenance Router — On-demand expired token sweep.
"""

from fastapi import APIRouter

from app.api.deps import AdminUser, ServicesDep, StorageDep
from app.schemas.admin import CleanupResponse

router: APIRouter = APIRouter()


@router.post("/cleanup-tokens", response_model=CleanupResponse)
async def cleanup_tokens(
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
) -> CleanupResponse:
    """만료/폐기 리프레시 토큰과 사용/만료된 재설정 토큰을 삭제합니다.

    Delete expired or long-revoked refresh tokens and used or expired reset
    tokens.
    """
    result: CleanupResponse = await services.admin.cleanup_tokens(storage)
    await storage.commit()
    return result
