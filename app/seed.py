"""초기 데이터 시드 스크립트 — 데모 사용자, 회사, 카테고리, 거래 생성.

Seed script — Creates a demo user with one company, its default categories
and a year of sample transactions. Meant for local development only.

Usage:
    python -m app.seed

Creates:
    - 1개 데모 계정: demo@mypila.com / demo123 (1 demo user)
    - 1개 회사: "M2M Financeiro" + 기본 카테고리 (1 company with default categories)
    - 2024년 샘플 거래 (Sample transactions for 2024)
"""

import asyncio
from typing import Any

from app.config import Settings, get_settings
from app.database import Base, create_engine, create_mongo_client, create_session_factory
from app.models import Company, User
from app.repositories.interfaces import Storage
from app.repositories.mongo import MongoStorageFactory, ensure_indexes
from app.repositories.storage import SqlStorageFactory
from app.schemas.company import CompanyCreate
from app.services.company_service import CompanyService
from app.utils.password import hash_password
from app.utils.validation import MONTH_NAMES

DEMO_EMAIL: str = "demo@mypila.com"
DEMO_PASSWORD: str = "demo123"
DEMO_YEAR: int = 2024


def sample_transactions(company_id: Any) -> list[dict[str, Any]]:
    """데모 회사의 한 해 거래 목록을 만듭니다.

    Monthly salary for the whole year (raised from November, December still
    open) plus a few recurring expenses.
    """
    rows: list[dict[str, Any]] = []
    for index, month in enumerate(MONTH_NAMES, start=1):
        rows.append({
            "company_id": company_id,
            "description": "Salario",
            "amount": 5000.0 if index >= 11 else 3500.0,
            "category": "Salario",
            "month": month,
            "year": DEMO_YEAR,
            "status": "ABERTO" if index == 12 else "PAGO",
        })
    expenses: list[tuple[str, float, str]] = [
        ("Aluguel", 1500.0, "Moradia"),
        ("Mercado", 850.0, "Alimentacao"),
        ("Combustivel", 320.0, "Transporte"),
    ]
    for month in MONTH_NAMES[:6]:
        for description, amount, category in expenses:
            rows.append({
                "company_id": company_id,
                "description": description,
                "amount": amount,
                "category": category,
                "month": month,
                "year": DEMO_YEAR,
                "status": "PAGO",
            })
    return rows


async def seed_storage(storage: Storage) -> bool:
    """저장소에 데모 데이터를 추가합니다.

    Idempotent: 데모 계정이 이미 있으면 건너뜁니다 (Skips when the demo user exists).

    Returns:
        bool: 데이터를 생성했으면 True (True when data was created)
    """
    if await storage.users.get_by_email(DEMO_EMAIL) is not None:
        return False

    user: User = await storage.users.create({
        "name": "Usuario Demo",
        "email": DEMO_EMAIL,
        "password_hash": hash_password(DEMO_PASSWORD),
    })
    # 회사 + 기본 카테고리 — Company with its default categories
    company: Company = await CompanyService().create_company(
        storage, user.id, CompanyCreate(name="M2M Financeiro")
    )
    for row in sample_transactions(company.id):
        await storage.transactions.create(row)
    await storage.commit()
    return True


async def seed(settings: Settings | None = None) -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the configured storage backend. For the relational backend the
    tables are created first; for MongoDB the indexes are.
    """
    settings = settings or get_settings()

    if settings.STORAGE_BACKEND == "mongo":
        client = create_mongo_client(settings)
        factory: Any = MongoStorageFactory(client, settings.MONGO_DATABASE)
        await ensure_indexes(factory.db)
        async with factory() as storage:
            created: bool = await seed_storage(storage)
        await client.close()
    else:
        engine = create_engine(settings)
        # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with SqlStorageFactory(create_session_factory(engine))() as storage:
            created = await seed_storage(storage)
        await engine.dispose()

    if not created:
        print("Already seeded. Skipping.")
        return
    print(f"Seeded: demo user={DEMO_EMAIL}/{DEMO_PASSWORD}, company=M2M Financeiro")


if __name__ == "__main__":
    asyncio.run(seed())
