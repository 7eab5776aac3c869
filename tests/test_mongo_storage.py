"""MongoDB 저장소 테스트 — TEST_MONGO_URL이 설정된 경우에만 실행.

MongoDB backend tests. They run the same services against a real server
and are skipped unless ``TEST_MONGO_URL`` is set.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio

from app.config import Settings
from app.database import create_mongo_client
from app.repositories.mongo import MongoStorage, MongoStorageFactory, ensure_indexes
from app.schemas.company import CompanyCreate
from app.schemas.quote import QuoteCreate
from app.seed import DEMO_EMAIL, seed_storage
from app.services.company_service import CompanyService
from app.services.quote_service import QuoteService
from app.services.transaction_service import RecurringService
from tests.conftest import quote_payload

MONGO_URL = os.environ.get("TEST_MONGO_URL", "")

pytestmark = pytest.mark.skipif(not MONGO_URL, reason="TEST_MONGO_URL not set")


@pytest_asyncio.fixture
async def mongo_storage() -> AsyncGenerator[MongoStorage, None]:
    """테스트마다 임시 데이터베이스를 만들고 끝나면 삭제합니다."""
    settings = Settings(MONGO_URL=MONGO_URL, MONGO_DATABASE=f"mypila_test_{uuid.uuid4().hex[:8]}")
    client = create_mongo_client(settings)
    factory = MongoStorageFactory(client, settings.MONGO_DATABASE)
    await ensure_indexes(factory.db)
    async with factory() as storage:
        yield storage
    await client.drop_database(settings.MONGO_DATABASE)
    await client.close()


class TestMongoStorage:
    """MongoDB 백엔드 서비스 동작 테스트."""

    async def test_seed_and_cascade(self, mongo_storage):
        """시드 후 회사 삭제 시 하위 데이터 삭제."""
        assert await seed_storage(mongo_storage) is True
        user = await mongo_storage.users.get_by_email(DEMO_EMAIL)
        company = (await mongo_storage.companies.list_by_user(user.id))[0]
        assert len(await mongo_storage.categories.list_by_company(company.id)) == 5
        assert await mongo_storage.transactions.count() == 30

        await CompanyService().delete_company(mongo_storage, company.id)
        assert await mongo_storage.companies.get_by_id(company.id) is None
        assert await mongo_storage.transactions.count() == 0

    async def test_quote_numbering(self, mongo_storage):
        user = await mongo_storage.users.create({
            "name": "Maria", "email": "maria@example.com", "password_hash": "x",
        })
        company = await CompanyService().create_company(mongo_storage, user.id, CompanyCreate(name="Acme"))
        service = QuoteService()
        first = await service.create_quote(mongo_storage, company.id, QuoteCreate(**quote_payload()))
        second = await service.create_quote(mongo_storage, company.id, QuoteCreate(**quote_payload()))
        year = date.today().year
        assert first.number == f"ORC-{year}-001"
        assert second.number == f"ORC-{year}-002"
        assert second.total == 500.0

    async def test_recurring_is_idempotent(self, mongo_storage):
        user = await mongo_storage.users.create({
            "name": "Maria", "email": "maria@example.com", "password_hash": "x",
        })
        company = await CompanyService().create_company(mongo_storage, user.id, CompanyCreate(name="Acme"))
        await mongo_storage.recurring.create({
            "company_id": company.id, "description": "Aluguel", "amount": 1500.0,
            "category": "Moradia", "day_of_month": 5,
        })
        service = RecurringService()
        assert await service.process_due_today(mongo_storage, date(2024, 3, 5)) == 1
        assert await service.process_due_today(mongo_storage, date(2024, 3, 5)) == 0
