"""반복 규칙 라우터 — 규칙 CRUD와 월별 거래 생성.

Recurring Router — Recurring rule endpoints and the month processing that
materialises rules into open transactions.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.deps import CurrentUser, ServicesDep, StorageDep
from app.api.ownership import require_company, require_recurring
from app.models.transaction import RecurringRule
from app.schemas.base import MessageResponse
from app.schemas.transaction import ProcessRecurringResponse, RecurringCreate, RecurringResponse
from app.utils.exceptions import ValidationFailedError
from app.utils.validation import check_month, check_year

router: APIRouter = APIRouter()


@router.get("", response_model=list[RecurringResponse])
async def list_recurring(
    company_id: Annotated[UUID, Query(alias="companyId")],
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> list[RecurringRule]:
    """회사의 반복 규칙 목록 — Recurring rules of a company by day of month."""
    await require_company(storage, current_user, company_id)
    return await services.recurring.list_rules(storage, company_id)


@router.post("", response_model=RecurringResponse, status_code=201)
async def create_recurring(
    data: RecurringCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> RecurringRule:
    await require_company(storage, current_user, data.company_id)
    rule: RecurringRule = await services.recurring.create_rule(storage, data)
    await storage.commit()
    return rule


@router.delete("/{rule_id}", response_model=MessageResponse)
async def delete_recurring(
    rule_id: UUID,
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> MessageResponse:
    await require_recurring(storage, current_user, rule_id)
    await services.recurring.delete_rule(storage, rule_id)
    await storage.commit()
    return MessageResponse(message="Regra recorrente excluida com sucesso")


@router.post("/process", response_model=ProcessRecurringResponse)
async def process_recurring(
    company_id: Annotated[UUID, Query(alias="companyId")],
    month: Annotated[str, Query()],
    year: Annotated[int, Query()],
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
) -> ProcessRecurringResponse:
    """지정 월에 회사의 모든 규칙을 적용합니다 (중복 생성 없음).

    Create the month's open transactions for every rule of the company.
    Running it again for the same month creates nothing.

    Args:
        company_id: 회사 ID (Company UUID)
        month: 포르투갈어 월 이름 (Portuguese month name, e.g. "Janeiro")
        year: 연도 (Year, 2000-2100)
    """
    try:
        check_month(month)
    except ValueError as exc:
        raise ValidationFailedError.single("month", str(exc))
    try:
        check_year(year)
    except ValueError as exc:
        raise ValidationFailedError.single("year", str(exc))
    await require_company(storage, current_user, company_id)
    created: int = await services.recurring.process(storage, company_id, month, year)
    await storage.commit()
    return ProcessRecurringResponse(message="Processed", created=created)
