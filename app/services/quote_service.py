"""견적 서비스 — 견적 번호 발급, 합계 계산, 복제, 상태 변경, 실행 비교.

Quote Service — Quote numbering, server-side totals, duplication, status
changes, and the quoted-vs-executed comparison. Also hosts the quote
template service.

Numbering: one ``asyncio.Lock`` per service instance (the service is a
process-wide singleton) serialises "read highest number, insert, commit",
so numbers are strictly increasing per company within a year. The unique
(company_id, number) constraint backs it up.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any, Sequence
from uuid import UUID

from app.models.quote import Quote, QuoteItem, QuoteTemplate
from app.repositories.interfaces import Storage
from app.schemas.quote import (
    ComparisonItem,
    QuoteComparisonResponse,
    QuoteCreate,
    QuoteItemCreate,
    QuoteItemResponse,
    QuoteResponse,
    QuoteTemplateCreate,
    QuoteTemplateUpdate,
    QuoteUpdate,
)
from app.utils.exceptions import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

STATUS_DRAFT: str = "DRAFT"
STATUS_EXECUTED: str = "EXECUTED"
DISCOUNT_PERCENT: str = "PERCENT"
VALIDITY_DAYS: int = 30


def quote_number(year: int, sequence: int) -> str:
    """견적 번호 형식 — ``ORC-<year>-<NNN>``."""
    return f"ORC-{year}-{sequence:03d}"


def next_sequence(numbers: Sequence[str], prefix: str) -> int:
    """기존 번호 중 최대 일련번호 + 1을 반환합니다.

    Return the highest sequence found after ``prefix`` plus one;
    unparsable numbers are ignored.
    """
    highest: int = 0
    for number in numbers:
        suffix: str = number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


def compute_items(items: Sequence[QuoteItemCreate]) -> tuple[list[dict[str, Any]], float]:
    """항목별 합계와 소계를 계산합니다.

    Compute ``total = quantity × unit_price`` per item and the subtotal.

    Returns:
        tuple[list[dict], float]: (항목 필드 목록, 소계) (Item fields, subtotal)
    """
    rows: list[dict[str, Any]] = []
    subtotal: float = 0.0
    for item in items:
        total: float = item.quantity * item.unit_price
        subtotal += total
        rows.append({
            "description": item.description,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": total,
            "category_id": item.category_id,
        })
    return rows, subtotal


def apply_discount(subtotal: float, discount: float, discount_type: str) -> float:
    """할인 적용 — PERCENT는 비율, VALUE는 금액.

    PERCENT: ``subtotal - subtotal * discount / 100``; VALUE:
    ``subtotal - discount``.
    """
    if discount_type == DISCOUNT_PERCENT:
        return subtotal - (subtotal * discount / 100)
    return subtotal - discount


def quote_response(quote: Quote, items: Sequence[QuoteItem]) -> QuoteResponse:
    """견적과 항목으로 응답 모델을 만듭니다 — Quote response with its items."""
    return QuoteResponse.model_validate(quote).model_copy(
        update={"items": [QuoteItemResponse.model_validate(item) for item in items]}
    )


class QuoteService:
    """견적 관련 비즈니스 로직을 처리하는 서비스.

    Service handling quote business logic.
    """

    def __init__(self) -> None:
        # 번호 발급 직렬화 — Serialises numbering across concurrent requests
        self._number_lock: asyncio.Lock = asyncio.Lock()

    async def next_number(self, storage: Storage, company_id: UUID, year: int | None = None) -> str:
        """회사의 다음 견적 번호를 계산합니다 (잠금 안에서 호출).

        Compute the next quote number of a company for ``year``. Must be
        called while holding the numbering lock.
        """
        year = year or date.today().year
        prefix: str = f"ORC-{year}-"
        numbers: list[str] = await storage.quotes.list_numbers(company_id, prefix)
        return quote_number(year, next_sequence(numbers, prefix))

    async def list_quotes(self, storage: Storage, company_id: UUID, status: str | None = None) -> list[QuoteResponse]:
        """회사의 견적 목록 (최신순, 항목 포함).

        A company's quotes, newest first, each with its items.
        """
        quotes: list[Quote] = await storage.quotes.list_by_company(company_id, status or None)
        items = await storage.quotes.items_by_quote([quote.id for quote in quotes])
        return [quote_response(quote, items.get(quote.id, [])) for quote in quotes]

    async def get_quote(self, storage: Storage, quote: Quote) -> QuoteResponse:
        return quote_response(quote, await storage.quotes.get_items(quote.id))

    async def _check_template(self, storage: Storage, company_id: UUID, template_id: UUID | None) -> None:
        # 양식은 같은 회사 소속이어야 함 — Template must belong to the same company
        if template_id is None:
            return
        template: QuoteTemplate | None = await storage.quote_templates.get_by_id(template_id)
        if template is None or template.company_id != company_id:
            raise NotFoundError("Template de orcamento nao encontrado", "QUOTE_TEMPLATE_NOT_FOUND")

    async def create_quote(self, storage: Storage, company_id: UUID, data: QuoteCreate) -> QuoteResponse:
        """견적을 생성합니다 — 번호 발급부터 커밋까지 잠금 안에서 수행.

        Create a quote. Totals are computed here; the request never sets
        them. Number allocation, insert and commit run under the numbering
        lock.

        Args:
            storage: 작업 단위 (Unit of work)
            company_id: 소속 회사 ID (Parent company UUID)
            data: 견적 생성 요청 (Quote create request)

        Returns:
            QuoteResponse: 생성된 견적 (Created quote with items)
        """
        await self._check_template(storage, company_id, data.template_id)
        rows, subtotal = compute_items(data.items)
        fields: dict[str, Any] = data.model_dump(exclude={"items"})
        fields.update(
            company_id=company_id,
            subtotal=subtotal,
            total=apply_discount(subtotal, data.discount, data.discount_type),
            status=STATUS_DRAFT,
            valid_until=data.valid_until or date.today() + timedelta(days=VALIDITY_DAYS),
        )

        async with self._number_lock:
            fields["number"] = await self.next_number(storage, company_id)
            quote: Quote = await storage.quotes.create(fields, rows)
            await storage.commit()

        logger.info("Quote %s created for company %s", quote.number, company_id)
        return await self.get_quote(storage, quote)

    async def update_quote(self, storage: Storage, quote: Quote, data: QuoteUpdate) -> QuoteResponse:
        """견적을 수정합니다 — 실행(EXECUTED)된 견적은 수정 불가.

        Replace a quote's content and items and recompute its totals.
        Without ``validUntil`` the current validity is kept.

        Raises:
            BadRequestError: 실행된 견적 (Quote already executed)
        """
        if quote.status == STATUS_EXECUTED:
            raise BadRequestError("Nao e possivel editar um orcamento executado", "QUOTE_ALREADY_EXECUTED")
        await self._check_template(storage, quote.company_id, data.template_id)

        rows, subtotal = compute_items(data.items)
        fields: dict[str, Any] = data.model_dump(exclude={"items", "valid_until"})
        fields.update(
            subtotal=subtotal,
            total=apply_discount(subtotal, data.discount, data.discount_type),
        )
        if data.valid_until is not None:
            fields["valid_until"] = data.valid_until

        updated: Quote | None = await storage.quotes.update(quote.id, fields)
        if updated is None:
            raise NotFoundError("Orcamento nao encontrado", "QUOTE_NOT_FOUND")
        items: list[QuoteItem] = await storage.quotes.replace_items(quote.id, rows)
        return quote_response(updated, items)

    async def delete_quote(self, storage: Storage, quote_id: UUID) -> None:
        if not await storage.quotes.delete(quote_id):
            raise NotFoundError("Orcamento nao encontrado", "QUOTE_NOT_FOUND")

    async def update_status(self, storage: Storage, quote: Quote, status: str) -> QuoteResponse:
        """견적 상태를 변경합니다 — Change a quote's status."""
        updated: Quote | None = await storage.quotes.update(quote.id, {"status": status})
        if updated is None:
            raise NotFoundError("Orcamento nao encontrado", "QUOTE_NOT_FOUND")
        return await self.get_quote(storage, updated)

    async def duplicate_quote(self, storage: Storage, quote: Quote) -> QuoteResponse:
        """견적을 복제합니다.

        Copy a quote under a new number: title gets " (Copia)", status is
        DRAFT and validity restarts at today + 30 days.
        """
        items: list[QuoteItem] = await storage.quotes.get_items(quote.id)
        rows: list[dict[str, Any]] = [
            {
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total": item.total,
                "category_id": item.category_id,
            }
            for item in items
        ]
        fields: dict[str, Any] = {
            column: getattr(quote, column)
            for column in (
                "company_id", "client_name", "client_email", "client_phone", "client_document",
                "client_address", "client_city", "client_state", "client_zip_code", "description",
                "subtotal", "discount", "discount_type", "total", "notes", "template_id",
            )
        }
        fields.update(
            title=f"{quote.title} (Copia)",
            status=STATUS_DRAFT,
            valid_until=date.today() + timedelta(days=VALIDITY_DAYS),
        )

        async with self._number_lock:
            fields["number"] = await self.next_number(storage, quote.company_id)
            copy: Quote = await storage.quotes.create(fields, rows)
            await storage.commit()

        logger.info("Quote %s duplicated as %s", quote.number, copy.number)
        return await self.get_quote(storage, copy)

    async def get_comparison(self, storage: Storage, quote: Quote) -> QuoteComparisonResponse:
        """견적 대비 실행 금액을 비교합니다.

        For every item linked to a category, executed is the sum of the
        company's transactions whose category equals the category id or its
        name. ``variance = quotedTotal - executedTotal`` and
        ``variancePercent`` is relative to the quoted total (0 when the
        quoted total is 0).
        """
        items: list[QuoteItem] = await storage.quotes.get_items(quote.id)
        comparison: list[ComparisonItem] = []
        executed_total: float = 0.0

        for item in items:
            executed: float = 0.0
            category_key: str | None = None
            if item.category_id is not None:
                category_key = str(item.category_id)
                keys: list[str] = [category_key]
                category = await storage.categories.get_by_id(item.category_id)
                if category is not None and category.company_id == quote.company_id:
                    keys.append(category.name)
                executed = await storage.transactions.sum_by_categories(quote.company_id, keys)
            executed_total += executed
            comparison.append(ComparisonItem(
                description=item.description,
                category_id=category_key,
                quoted=item.total,
                executed=executed,
                variance=item.total - executed,
            ))

        variance: float = quote.total - executed_total
        return QuoteComparisonResponse(
            quote_id=quote.id,
            quoted_total=quote.total,
            executed_total=executed_total,
            variance=variance,
            variance_percent=(variance / quote.total) * 100 if quote.total > 0 else 0.0,
            items=comparison,
        )


class QuoteTemplateService:
    """견적 양식 관련 비즈니스 로직을 처리하는 서비스.

    At most one template per company is the default: setting the flag on
    one clears it on the others.
    """

    async def list_templates(self, storage: Storage, company_id: UUID) -> list[QuoteTemplate]:
        return await storage.quote_templates.list_by_company(company_id)

    async def create_template(self, storage: Storage, company_id: UUID, data: QuoteTemplateCreate) -> QuoteTemplate:
        if data.is_default:
            await storage.quote_templates.clear_default(company_id)
        return await storage.quote_templates.create({"company_id": company_id, **data.model_dump()})

    async def update_template(
        self,
        storage: Storage,
        template: QuoteTemplate,
        data: QuoteTemplateUpdate,
    ) -> QuoteTemplate:
        if data.is_default:
            await storage.quote_templates.clear_default(template.company_id, exclude_id=template.id)
        updated: QuoteTemplate | None = await storage.quote_templates.update(template.id, data.model_dump())
        if updated is None:
            raise NotFoundError("Template de orcamento nao encontrado", "QUOTE_TEMPLATE_NOT_FOUND")
        return updated

    async def delete_template(self, storage: Storage, template_id: UUID) -> None:
        """양식을 삭제하고 이를 참조하는 견적의 연결을 해제합니다.

        Delete a template and detach the quotes that used it.
        """
        await storage.quotes.clear_template(template_id)
        if not await storage.quote_templates.delete(template_id):
            raise NotFoundError("Template de orcamento nao encontrado", "QUOTE_TEMPLATE_NOT_FOUND")
