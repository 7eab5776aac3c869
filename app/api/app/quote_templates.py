"""견적 양식 라우터 — 회사별 양식 CRUD.

Quote Template Router — CRUD endpoints for the PDF templates of a company.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_company, require_template
from app.models.quote import QuoteTemplate
from app.schemas.quote import QuoteTemplateCreate, QuoteTemplateResponse, QuoteTemplateUpdate

router: APIRouter = APIRouter()


@router.get("", response_model=list[QuoteTemplateResponse])
async def list_quote_templates(
    company_id: Annotated[UUID, Query(alias="companyId")],
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> list[QuoteTemplate]:
    await require_company(storage, current_user, company_id)
    return await services.quote_templates.list_templates(storage, company_id)


@router.get("/{template_id}", response_model=QuoteTemplateResponse)
async def get_quote_template(
    template_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
) -> QuoteTemplate:
    return await require_template(storage, current_user, template_id)


@router.post("", response_model=QuoteTemplateResponse, status_code=201)
async def create_quote_template(
    company_id: Annotated[UUID, Query(alias="companyId")],
    data: QuoteTemplateCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteTemplate:
    """양식을 생성합니다 — isDefault이면 다른 양식의 기본 표시 해제.

    Create a template; marking it default clears the flag on the others.
    """
    await require_company(storage, current_user, company_id)
    template: QuoteTemplate = await services.quote_templates.create_template(storage, company_id, data)
    await storage.commit()
    return template


@router.put("/{template_id}", response_model=QuoteTemplateResponse)
async def update_quote_template(
    template_id: UUID,
    data: QuoteTemplateUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteTemplate:
    template: QuoteTemplate = await require_template(storage, current_user, template_id)
    updated: QuoteTemplate = await services.quote_templates.update_template(storage, template, data)
    await storage.commit()
    return updated


@router.delete("/{template_id}", status_code=204)
async def delete_quote_template(
    template_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Response:
    await require_template(storage, current_user, template_id)
    await services.quote_templates.delete_template(storage, template_id)
    await storage.commit()
    return Response(status_code=204)
