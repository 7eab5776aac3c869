"""MongoDB 저장소 작업 단위 및 인덱스 생성.

MongoDB storage unit of work and index bootstrap. Every repository call is
written immediately, so ``commit()`` and ``rollback()`` are no-ops; the
company cascade therefore deletes children before the parent.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient, IndexModel
from pymongo.asynchronous.database import AsyncDatabase

from app.repositories.mongo.repositories import (
    MongoCategoryRepository,
    MongoCompanyRepository,
    MongoPasswordResetRepository,
    MongoQuoteRepository,
    MongoQuoteTemplateRepository,
    MongoRecurringRepository,
    MongoRefreshTokenRepository,
    MongoTransactionRepository,
    MongoUserRepository,
)

logger = logging.getLogger(__name__)

# 컬렉션별 인덱스 — Indexes per collection
INDEXES: dict[str, list[IndexModel]] = {
    "users": [IndexModel([("email", ASCENDING)], unique=True, name="email_unique_idx")],
    "refresh_tokens": [
        IndexModel([("token_hash", ASCENDING)], unique=True, name="token_hash_unique_idx"),
        IndexModel([("user_id", ASCENDING)], name="user_id_idx"),
    ],
    "password_reset_tokens": [
        IndexModel([("token_hash", ASCENDING)], unique=True, name="token_hash_unique_idx"),
        IndexModel([("user_id", ASCENDING)], name="user_id_idx"),
    ],
    "companies": [IndexModel([("user_id", ASCENDING)], name="user_id_idx")],
    "transactions": [
        IndexModel([("company_id", ASCENDING)], name="company_id_idx"),
        IndexModel(
            [("company_id", ASCENDING), ("year", DESCENDING), ("month", DESCENDING)],
            name="company_period_idx",
        ),
        IndexModel([("status", ASCENDING)], name="status_idx"),
    ],
    "categories": [IndexModel([("company_id", ASCENDING), ("name", ASCENDING)], name="company_name_idx")],
    "recurring": [
        IndexModel([("company_id", ASCENDING)], name="company_id_idx"),
        IndexModel([("day_of_month", ASCENDING)], name="day_of_month_idx"),
    ],
    "quotes": [
        IndexModel(
            [("company_id", ASCENDING), ("number", ASCENDING)],
            unique=True,
            name="company_number_unique_idx",
        ),
        IndexModel([("company_id", ASCENDING), ("created_at", DESCENDING)], name="company_created_idx"),
    ],
    "quote_templates": [IndexModel([("company_id", ASCENDING)], name="company_id_idx")],
}


async def ensure_indexes(db: AsyncDatabase) -> None:
    """필요한 인덱스를 생성합니다 (이미 있으면 무시).

    Create the indexes every collection relies on; existing ones are kept.
    """
    for name, indexes in INDEXES.items():
        await db[name].create_indexes(indexes)
    logger.info("MongoDB indexes ensured for %d collections", len(INDEXES))


class MongoStorage:
    """MongoDB 기반 Storage 구현."""

    def __init__(self, db: AsyncDatabase) -> None:
        self.db: AsyncDatabase = db
        self.users = MongoUserRepository(db)
        self.refresh_tokens = MongoRefreshTokenRepository(db)
        self.reset_tokens = MongoPasswordResetRepository(db)
        self.companies = MongoCompanyRepository(db)
        self.categories = MongoCategoryRepository(db)
        self.transactions = MongoTransactionRepository(db)
        self.recurring = MongoRecurringRepository(db)
        self.quotes = MongoQuoteRepository(db)
        self.quote_templates = MongoQuoteTemplateRepository(db)

    async def commit(self) -> None:
        return None

    async def rollback(self) -> None:
        return None


class MongoStorageFactory:
    """MongoStorage 팩토리 — 클라이언트 하나를 모든 요청이 공유.

    Storage factory sharing one client across requests.
    """

    def __init__(self, client: AsyncMongoClient, database: str) -> None:
        self.client: AsyncMongoClient = client
        self.db: AsyncDatabase = client[database]

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[MongoStorage]:
        yield MongoStorage(self.db)
