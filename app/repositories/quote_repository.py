"""견적/견적 양식 레포지토리 — 견적과 항목, 번호 조회, 양식 기본값 관리.

Quote and Quote Template Repositories — Quotes are stored together with
their items: creating, replacing and deleting a quote always covers its
items in the same unit of work.
"""

from collections import defaultdict
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.quote import Quote, QuoteItem, QuoteTemplate
from app.repositories.base import BaseRepository


class QuoteRepository(BaseRepository[Quote]):
    """견적 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for quotes and their items.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Quote)

    async def list_by_company(self, company_id: UUID, status: str | None = None) -> list[Quote]:
        """회사의 견적 목록 (최신순), 상태 필터 선택.

        List a company's quotes newest first, optionally filtered by status.
        """
        query: Select = select(Quote).where(Quote.company_id == company_id)
        if status:
            query = query.where(Quote.status == status)
        result = await self.db.execute(query.order_by(Quote.created_at.desc()))
        return list(result.scalars().all())

    async def create(self, data: dict[str, Any], items: Sequence[dict[str, Any]]) -> Quote:  # type: ignore[override]
        """견적과 항목을 함께 생성합니다.

        Insert a quote and its items.

        Args:
            data: 견적 필드 (Quote fields)
            items: 항목 필드 목록, 순서대로 sort_order 부여
                   (Item fields; ``sort_order`` follows list order)

        Returns:
            Quote: 생성된 견적 (The created quote)
        """
        quote: Quote = await super().create(data)
        await self._insert_items(quote.id, items)
        return quote

    async def replace_items(self, quote_id: UUID, items: Sequence[dict[str, Any]]) -> list[QuoteItem]:
        """기존 항목을 모두 삭제하고 새 항목으로 교체합니다.

        Replace every item of a quote.
        """
        await self._delete_items([quote_id])
        return await self._insert_items(quote_id, items)

    async def get_items(self, quote_id: UUID) -> list[QuoteItem]:
        result = await self.db.execute(
            select(QuoteItem).where(QuoteItem.quote_id == quote_id).order_by(QuoteItem.sort_order)
        )
        return list(result.scalars().all())

    async def items_by_quote(self, quote_ids: Sequence[UUID]) -> dict[UUID, list[QuoteItem]]:
        """여러 견적의 항목을 견적별로 묶어 반환합니다.

        Items of several quotes grouped by quote id (one query).
        """
        grouped: dict[UUID, list[QuoteItem]] = defaultdict(list)
        if not quote_ids:
            return grouped
        result = await self.db.execute(
            select(QuoteItem)
            .where(QuoteItem.quote_id.in_(quote_ids))
            .order_by(QuoteItem.quote_id, QuoteItem.sort_order)
        )
        for item in result.scalars().all():
            grouped[item.quote_id].append(item)
        return grouped

    async def delete(self, quote_id: UUID) -> bool:
        await self._delete_items([quote_id])
        return await super().delete(quote_id)

    async def delete_by_company(self, company_id: UUID) -> int:
        """회사의 모든 견적과 항목을 삭제합니다 — Delete a company's quotes and items."""
        quote_ids = select(Quote.id).where(Quote.company_id == company_id)
        await self.db.execute(
            delete(QuoteItem)
            .where(QuoteItem.quote_id.in_(quote_ids))
            .execution_options(synchronize_session="fetch")
        )
        return await self.delete_where(Quote.company_id == company_id)

    async def list_numbers(self, company_id: UUID, prefix: str) -> list[str]:
        """접두사로 시작하는 견적 번호 목록 — Quote numbers starting with ``prefix``."""
        result = await self.db.execute(
            select(Quote.number).where(
                Quote.company_id == company_id,
                Quote.number.startswith(prefix, autoescape=True),
            )
        )
        return list(result.scalars().all())

    async def clear_template(self, template_id: UUID) -> None:
        """삭제될 양식을 참조하는 견적의 template_id를 해제합니다.

        Detach quotes from a template that is being deleted.
        """
        await self.db.execute(
            update(Quote)
            .where(Quote.template_id == template_id)
            .values(template_id=None)
            .execution_options(synchronize_session="fetch")
        )

    async def _insert_items(self, quote_id: UUID, items: Sequence[dict[str, Any]]) -> list[QuoteItem]:
        rows: list[QuoteItem] = [
            QuoteItem(quote_id=quote_id, sort_order=index, **item)
            for index, item in enumerate(items)
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def _delete_items(self, quote_ids: Sequence[UUID]) -> None:
        await self.db.execute(
            delete(QuoteItem)
            .where(QuoteItem.quote_id.in_(quote_ids))
            .execution_options(synchronize_session="fetch")
        )


class QuoteTemplateRepository(BaseRepository[QuoteTemplate]):
    """견적 양식 레포지토리."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, QuoteTemplate)

    async def list_by_company(self, company_id: UUID) -> list[QuoteTemplate]:
        result = await self.db.execute(
            select(QuoteTemplate)
            .where(QuoteTemplate.company_id == company_id)
            .order_by(QuoteTemplate.name)
        )
        return list(result.scalars().all())

    async def clear_default(self, company_id: UUID, exclude_id: UUID | None = None) -> None:
        """회사의 다른 양식에서 기본 플래그를 해제합니다.

        Clear ``is_default`` on the company's templates, except ``exclude_id``.
        """
        stmt = update(QuoteTemplate).where(
            QuoteTemplate.company_id == company_id,
            QuoteTemplate.is_default.is_(True),
        )
        if exclude_id is not None:
            stmt = stmt.where(QuoteTemplate.id != exclude_id)
        await self.db.execute(
            stmt.values(is_default=False).execution_options(synchronize_session="fetch")
        )

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where(QuoteTemplate.company_id == company_id)
