"""회사/카테고리 레포지토리 — 회사 CRUD, 소유자 조회, 카테고리 관리.

Company and Category Repositories — Company CRUD scoped by owner,
admin search joined with the owner, and per-company categories.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Category, Company
from app.models.user import User
from app.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """회사 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the companies table.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Company)

    async def list_by_user(self, user_id: UUID) -> list[Company]:
        """사용자가 소유한 회사 목록 (이름순).

        List the companies owned by ``user_id`` ordered by name.
        """
        result = await self.db.execute(
            select(Company).where(Company.user_id == user_id).order_by(Company.name)
        )
        return list(result.scalars().all())

    async def count_by_users(self, user_ids: Sequence[UUID]) -> dict[UUID, int]:
        """사용자별 회사 수 — Company count per owner."""
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(Company.user_id, func.count(Company.id))
            .where(Company.user_id.in_(user_ids))
            .group_by(Company.user_id)
        )
        return {user_id: count for user_id, count in result.all()}

    async def search(self, search: str, page: int, limit: int) -> tuple[list[Company], int]:
        """회사명 또는 소유자 이름/이메일 검색 + 페이지네이션.

        Case-insensitive search on the company name and on the owner's name
        and email, newest first.

        Args:
            search: 검색어, 빈 문자열이면 전체 (Search term; empty lists all)
            page: 페이지 번호 (Page number)
            limit: 페이지 크기 (Page size)

        Returns:
            tuple[list[Company], int]: (회사 목록, 전체 개수) (Companies, total count)
        """
        query: Select = select(Company)
        if search:
            pattern: str = f"%{search}%"
            owner_ids = select(User.id).where(
                or_(User.name.ilike(pattern), User.email.ilike(pattern))
            )
            query = query.where(or_(Company.name.ilike(pattern), Company.user_id.in_(owner_ids)))
        query = query.order_by(Company.created_at.desc())
        return await self.get_paginated(query, page, limit)


class CategoryRepository(BaseRepository[Category]):
    """카테고리 레포지토리 — 회사별 카테고리."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Category)

    async def list_by_company(self, company_id: UUID) -> list[Category]:
        """회사의 카테고리 목록 (이름순) — Categories of a company by name."""
        result = await self.db.execute(
            select(Category).where(Category.company_id == company_id).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def create_many(self, rows: Sequence[dict[str, Any]]) -> list[Category]:
        """여러 카테고리를 한 번에 생성합니다 — Insert several categories at once."""
        categories: list[Category] = [Category(**row) for row in rows]
        self.db.add_all(categories)
        await self.db.flush()
        return categories

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where(Category.company_id == company_id)
