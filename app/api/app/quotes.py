"""견적 라우터 — 견적 CRUD, 복제, 상태 변경, PDF, 실행 비교.

Quote Router — Quote CRUD, duplication, status changes, PDF download and
the quoted-versus-executed comparison.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, Response

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_company, require_quote
from app.middleware.rate_limit import limiter
from app.models.quote import QuoteItem, QuoteTemplate
from app.schemas.quote import (
    QuoteComparisonResponse,
    QuoteCreate,
    QuoteResponse,
    QuoteStatusUpdate,
    QuoteUpdate,
)

router: APIRouter = APIRouter()


@router.get("", response_model=list[QuoteResponse])
async def list_quotes(
    company_id: Annotated[UUID, Query(alias="companyId")],
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
    status: Annotated[str | None, Query()] = None,
) -> list[QuoteResponse]:
    """회사의 견적 목록 (최신순, 상태 필터 선택).

    Quotes of a company, newest first, optionally filtered by status.
    """
    await require_company(storage, current_user, company_id)
    return await services.quotes.list_quotes(storage, company_id, status)


@router.get("/{quote_id}", response_model=QuoteResponse)
async def get_quote(
    quote_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteResponse:
    quote, _ = await require_quote(storage, current_user, quote_id)
    return await services.quotes.get_quote(storage, quote)


@router.post("", response_model=QuoteResponse, status_code=201)
async def create_quote(
    company_id: Annotated[UUID, Query(alias="companyId")],
    data: QuoteCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteResponse:
    """견적을 생성합니다 — 번호(ORC-<연도>-<NNN>)는 서버가 발급.

    Create a quote; the server assigns the number and computes totals.
    """
    await require_company(storage, current_user, company_id)
    return await services.quotes.create_quote(storage, company_id, data)


@router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: UUID,
    data: QuoteUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteResponse:
    quote, _ = await require_quote(storage, current_user, quote_id)
    result: QuoteResponse = await services.quotes.update_quote(storage, quote, data)
    await storage.commit()
    return result


@router.delete("/{quote_id}", status_code=204)
async def delete_quote(
    quote_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Response:
    await require_quote(storage, current_user, quote_id)
    await services.quotes.delete_quote(storage, quote_id)
    await storage.commit()
    return Response(status_code=204)


@router.post("/{quote_id}/duplicate", response_model=QuoteResponse, status_code=201)
async def duplicate_quote(
    quote_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteResponse:
    """견적 복제 — 새 번호, DRAFT, 제목 + " (Copia)"."""
    quote, _ = await require_quote(storage, current_user, quote_id)
    return await services.quotes.duplicate_quote(storage, quote)


@router.patch("/{quote_id}/status", response_model=QuoteResponse)
async def update_quote_status(
    quote_id: UUID,
    data: QuoteStatusUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteResponse:
    quote, _ = await require_quote(storage, current_user, quote_id)
    result: QuoteResponse = await services.quotes.update_status(storage, quote, data.status)
    await storage.commit()
    return result


@router.get("/{quote_id}/pdf")
@limiter.limit("10/minute")
async def download_quote_pdf(
    request: Request,
    quote_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Response:
    """견적서 PDF 다운로드.

    Render the quote as a PDF attachment named ``<number>.pdf``.
    """
    quote, company = await require_quote(storage, current_user, quote_id)
    items: list[QuoteItem] = await storage.quotes.get_items(quote.id)
    template: QuoteTemplate | None = None
    if quote.template_id is not None:
        template = await storage.quote_templates.get_by_id(quote.template_id)

    content: bytes = await services.quote_pdf.render(quote, items, company, template)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{quote.number}.pdf"'},
    )


@router.get("/{quote_id}/comparison", response_model=QuoteComparisonResponse)
async def get_quote_comparison(
    quote_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> QuoteComparisonResponse:
    """견적 대비 실행 금액 비교 — Quoted versus executed amounts per item."""
    quote, _ = await require_quote(storage, current_user, quote_id)
    return await services.quotes.get_comparison(storage, quote)
