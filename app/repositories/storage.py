"""관계형 저장소 작업 단위 — SQLAlchemy 세션 하나에 모든 레포지토리를 묶음.

Relational storage unit of work — All repositories of one request bound to
a single SQLAlchemy ``AsyncSession``. Nothing is visible to other requests
until ``commit()``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.company_repository import CategoryRepository, CompanyRepository
from app.repositories.quote_repository import QuoteRepository, QuoteTemplateRepository
from app.repositories.token_repository import PasswordResetRepository, RefreshTokenRepository
from app.repositories.transaction_repository import RecurringRepository, TransactionRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class SqlStorage:
    """SQLAlchemy 기반 Storage 구현.

    Storage implementation over one async session.

    Attributes:
        session: 공유 비동기 세션 (Shared async session)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session: AsyncSession = session
        self.users = UserRepository(session)
        self.refresh_tokens = RefreshTokenRepository(session)
        self.reset_tokens = PasswordResetRepository(session)
        self.companies = CompanyRepository(session)
        self.categories = CategoryRepository(session)
        self.transactions = TransactionRepository(session)
        self.recurring = RecurringRepository(session)
        self.quotes = QuoteRepository(session)
        self.quote_templates = QuoteTemplateRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


class SqlStorageFactory:
    """요청마다 새 세션/SqlStorage를 여는 팩토리.

    Opens one session per unit of work and closes it afterwards. Uncommitted
    work is rolled back when the block raises.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[SqlStorage]:
        async with self.session_factory() as session:
            try:
                yield SqlStorage(session)
            except Exception:
                await session.rollback()
                raise
