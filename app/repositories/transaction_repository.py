"""거래/반복 규칙 레포지토리 — 거래 페이지 조회, 통계 집계, 반복 규칙.

Transaction and Recurring Rule Repositories — Paginated listing across one
or several companies, status totals, category sums for the quote
comparison, admin search, and the recurring rules that feed them.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import RecurringRule, Transaction
from app.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """거래 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the transactions table.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Transaction)

    async def list_page(
        self,
        company_ids: Sequence[UUID],
        page: int,
        limit: int,
    ) -> tuple[list[Transaction], int]:
        """회사 목록의 거래를 최신순으로 페이지 조회합니다.

        Page through the transactions of ``company_ids`` sorted by year
        descending, then month descending.

        Args:
            company_ids: 대상 회사 ID 목록 (Companies to include)
            page: 페이지 번호 (Page number)
            limit: 페이지 크기 (Page size)

        Returns:
            tuple[list[Transaction], int]: (거래 목록, 전체 개수) (Transactions, total count)
        """
        if not company_ids:
            return [], 0
        query: Select = (
            select(Transaction)
            .where(Transaction.company_id.in_(company_ids))
            .order_by(Transaction.year.desc(), Transaction.month.desc(), Transaction.created_at.desc())
        )
        return await self.get_paginated(query, page, limit)

    async def exists_for_period(
        self,
        company_id: UUID,
        description: str,
        month: str,
        year: int,
    ) -> bool:
        """같은 설명/월/연도의 거래가 존재하는지 확인합니다.

        Whether the company already has a transaction with this description
        in the given month and year (the recurring dedup key).
        """
        result = await self.db.execute(
            select(func.count())
            .select_from(Transaction)
            .where(
                Transaction.company_id == company_id,
                Transaction.description == description,
                Transaction.month == month,
                Transaction.year == year,
            )
        )
        return (result.scalar() or 0) > 0

    async def totals_by_status(self, company_ids: Sequence[UUID]) -> dict[str, float]:
        """상태별 금액 합계 — Sum of amounts grouped by status."""
        if not company_ids:
            return {}
        result = await self.db.execute(
            select(Transaction.status, func.coalesce(func.sum(Transaction.amount), 0.0))
            .where(Transaction.company_id.in_(company_ids))
            .group_by(Transaction.status)
        )
        return {status: float(total) for status, total in result.all()}

    async def sum_by_categories(self, company_id: UUID, categories: Sequence[str]) -> float:
        """카테고리 값(ID 또는 이름) 중 하나와 일치하는 거래 금액 합계.

        Sum the amounts of the company's transactions whose category equals
        any of ``categories``.
        """
        if not categories:
            return 0.0
        result = await self.db.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0.0)).where(
                Transaction.company_id == company_id,
                Transaction.category.in_(categories),
            )
        )
        return float(result.scalar() or 0.0)

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where(Transaction.company_id == company_id)

    async def sum_paid(self) -> float:
        """전체 PAGO 거래 금액 합계 — Sum of every paid transaction."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0.0)).where(Transaction.status == "PAGO")
        )
        return float(result.scalar() or 0.0)

    async def list_recent(self, limit: int) -> list[Transaction]:
        result = await self.db.execute(
            select(Transaction).order_by(Transaction.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_companies(self, company_ids: Sequence[UUID]) -> dict[UUID, int]:
        """회사별 거래 수 — Transaction count per company."""
        if not company_ids:
            return {}
        result = await self.db.execute(
            select(Transaction.company_id, func.count(Transaction.id))
            .where(Transaction.company_id.in_(company_ids))
            .group_by(Transaction.company_id)
        )
        return {company_id: count for company_id, count in result.all()}

    async def search(
        self,
        search: str,
        status: str,
        page: int,
        limit: int,
    ) -> tuple[list[Transaction], int]:
        """설명 검색과 상태 필터 + 페이지네이션 (관리자용).

        Admin listing: case-insensitive description search and optional
        status filter, newest first.
        """
        query: Select = select(Transaction)
        if search:
            query = query.where(Transaction.description.ilike(f"%{search}%"))
        if status:
            query = query.where(Transaction.status == status)
        query = query.order_by(Transaction.created_at.desc())
        return await self.get_paginated(query, page, limit)


class RecurringRepository(BaseRepository[RecurringRule]):
    """반복 규칙 레포지토리."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RecurringRule)

    async def list_by_company(self, company_id: UUID) -> list[RecurringRule]:
        result = await self.db.execute(
            select(RecurringRule)
            .where(RecurringRule.company_id == company_id)
            .order_by(RecurringRule.day_of_month, RecurringRule.description)
        )
        return list(result.scalars().all())

    async def list_by_day(self, day_of_month: int) -> list[RecurringRule]:
        """발생일이 일치하는 전체 규칙 — Every rule due on ``day_of_month``."""
        result = await self.db.execute(
            select(RecurringRule).where(RecurringRule.day_of_month == day_of_month)
        )
        return list(result.scalars().all())

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where(RecurringRule.company_id == company_id)
