"""카테고리 라우터 — 회사별 카테고리 CRUD.

Category Router — CRUD endpoints for the categories of a company.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_category, require_company
from app.models.company import Category
from app.schemas.company import CategoryCreate, CategoryResponse, CategoryUpdate

router: APIRouter = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    company_id: Annotated[UUID, Query(alias="companyId")],
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> list[Category]:
    """회사의 카테고리 목록 (이름순) — Categories of a company ordered by name."""
    await require_company(storage, current_user, company_id)
    return await services.categories.list_categories(storage, company_id)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    company_id: Annotated[UUID, Query(alias="companyId")],
    data: CategoryCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Category:
    await require_company(storage, current_user, company_id)
    category: Category = await services.categories.create_category(storage, company_id, data)
    await storage.commit()
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Category:
    category: Category = await require_category(storage, current_user, category_id)
    updated: Category = await services.categories.update_category(storage, category, data)
    await storage.commit()
    return updated


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Response:
    await require_category(storage, current_user, category_id)
    await services.categories.delete_category(storage, category_id)
    await storage.commit()
    return Response(status_code=204)
