"""거래 라우터 — 거래 CRUD, 상태 토글, 통계.

Transaction Router — Paginated listing, CRUD, PAGO/ABERTO toggle and the
``/api/stats`` totals endpoint.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_company, require_transaction
from app.models.company import Company
from app.models.transaction import Transaction
from app.models.user import User
from app.repositories.interfaces import Storage
from app.schemas.base import MessageResponse
from app.schemas.transaction import (
    StatsResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from app.utils.pagination import Page, build_page, parse_limit, parse_page

router: APIRouter = APIRouter()
stats_router: APIRouter = APIRouter()


async def _scope_company_ids(storage: Storage, user: User, company_id: UUID | None) -> list[UUID]:
    """조회 범위 — companyId가 있으면 해당 회사, 없으면 사용자의 모든 회사.

    Companies a listing covers: the given one (ownership checked) or all of
    the caller's companies.
    """
    if company_id is not None:
        company: Company = await require_company(storage, user, company_id)
        return [company.id]
    companies: list[Company] = await storage.companies.list_by_user(user.id)
    return [company.id for company in companies]


@router.get("", response_model=Page[TransactionResponse])
async def list_transactions(
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
    company_id: Annotated[UUID | None, Query(alias="companyId")] = None,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
) -> dict:
    """거래 목록 (연도/월 내림차순, 페이지네이션).

    Paginated transactions, newest year and month first. ``page`` and
    ``limit`` are normalised rather than rejected.
    """
    page_number: int = parse_page(page)
    page_size: int = parse_limit(limit)
    company_ids: list[UUID] = await _scope_company_ids(storage, current_user, company_id)
    items, total = await services.transactions.list_transactions(storage, company_ids, page_number, page_size)
    return build_page(
        [TransactionResponse.model_validate(item) for item in items], total, page_number, page_size
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
) -> Transaction:
    return await require_transaction(storage, current_user, transaction_id)


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    data: TransactionCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Transaction:
    """거래를 생성합니다 — 회사 소유권 확인 후 저장.

    Create a transaction in one of the caller's companies.
    """
    await require_company(storage, current_user, data.company_id)
    transaction: Transaction = await services.transactions.create_transaction(storage, data)
    await storage.commit()
    return transaction


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: UUID,
    data: TransactionUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Transaction:
    transaction: Transaction = await require_transaction(storage, current_user, transaction_id)
    updated: Transaction = await services.transactions.update_transaction(storage, transaction, data)
    await storage.commit()
    return updated


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> MessageResponse:
    await require_transaction(storage, current_user, transaction_id)
    await services.transactions.delete_transaction(storage, transaction_id)
    await storage.commit()
    return MessageResponse(message="Transacao excluida com sucesso")


@router.patch("/{transaction_id}/toggle-status", response_model=TransactionResponse)
async def toggle_status(
    transaction_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> Transaction:
    """상태 전환 (PAGO ⇄ ABERTO) — Flip a transaction between paid and open."""
    transaction: Transaction = await require_transaction(storage, current_user, transaction_id)
    updated: Transaction = await services.transactions.toggle_status(storage, transaction)
    await storage.commit()
    return updated


@stats_router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
    company_id: Annotated[UUID | None, Query(alias="companyId")] = None,
) -> StatsResponse:
    """지급/미결/합계 통계 — ``{paid, open, total}`` for one or all companies."""
    company_ids: list[UUID] = await _scope_company_ids(storage, current_user, company_id)
    return await services.transactions.get_stats(storage, company_ids)
