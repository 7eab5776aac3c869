"""CNPJ 조회 라우터.

CNPJ Router — Registry lookup used to prefill the company form.
"""

from fastapi import APIRouter

from app.api.deps import CurrentUser, ServicesDep
from app.schemas.cnpj import CnpjResponse

router: APIRouter = APIRouter()


@router.get("/{cnpj}", response_model=CnpjResponse)
async def lookup_cnpj(cnpj: str, current_user: CurrentUser, services: ServicesDep) -> CnpjResponse:
    """CNPJ로 회사 정보 조회 — Look up a company in the CNPJ registry."""
    return await services.cnpj.lookup(cnpj)
