"""사용자 레포지토리 — 사용자 CRUD 및 관리자 검색 쿼리.

User Repository — CRUD and admin search queries for users.
Extends BaseRepository with email lookup, recency listing and the
paginated case-insensitive search used by the admin area.
"""

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """이메일로 사용자를 조회합니다.

        Retrieve a user by email. Emails are stored lower-cased, so the
        caller passes the normalised value.

        Args:
            email: 정규화된 이메일 (Normalised email)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int) -> list[User]:
        """최근 가입한 사용자 목록 — Most recently created users."""
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def search(self, search: str, page: int, limit: int) -> tuple[list[User], int]:
        """이름/이메일 검색 + 페이지네이션.

        Case-insensitive substring search on name and email, newest first.

        Args:
            search: 검색어, 빈 문자열이면 전체 (Search term; empty lists all)
            page: 페이지 번호 (Page number)
            limit: 페이지 크기 (Page size)

        Returns:
            tuple[list[User], int]: (사용자 목록, 전체 개수) (Users, total count)
        """
        query: Select = select(User)
        if search:
            pattern: str = f"%{search}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        query = query.order_by(User.created_at.desc())
        return await self.get_paginated(query, page, limit)
