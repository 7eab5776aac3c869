"""회사 라우터 — 사용자 소유 회사 CRUD.

Company Router — CRUD endpoints for the caller's companies.
Deleting a company removes everything under it.
"""

from uuid import UUID

from fastapi import APIRouter

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_company
from app.models.company import Company
from app.schemas.base import MessageResponse
from app.schemas.company import CompanyCreate, CompanyResponse, CompanyUpdate

router: APIRouter = APIRouter()


@router.get("", response_model=list[CompanyResponse])
async def list_companies(
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> list[Company]:
    """내 회사 목록 (이름순) — The caller's companies ordered by name."""
    return await services.companies.list_companies(storage, current_user.id)


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    data: CompanyCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Company:
    """회사를 생성합니다 — 기본 카테고리 5개가 함께 생성됨.

    Create a company; five default categories are seeded with it.
    """
    company: Company = await services.companies.create_company(storage, current_user.id, data)
    await storage.commit()
    return company


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: UUID,
    data: CompanyUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Company:
    """회사 정보를 수정합니다 — Update one of the caller's companies."""
    company: Company = await require_company(storage, current_user, company_id)
    updated: Company = await services.companies.update_company(storage, company, data)
    await storage.commit()
    return updated


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> MessageResponse:
    """회사와 하위 데이터(거래, 카테고리, 반복 규칙, 견적, 양식)를 삭제합니다.

    Delete a company with its transactions, categories, recurring rules,
    quotes and quote templates.
    """
    await require_company(storage, current_user, company_id)
    await services.companies.delete_company(storage, company_id)
    await storage.commit()
    return MessageResponse(message="Empresa excluida com sucesso")
