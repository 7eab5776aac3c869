"""테스트 인프라 — 인메모리 SQLite DB, 작업 단위, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, storage, and httpx client
fixtures. Every test gets a fresh schema; the application shares one
session with the fixtures so data created here is visible to requests.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.deps import get_storage
from app.config import Settings
from app.database import Base
from app.main import create_app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models import Company, User
from app.repositories.storage import SqlStorage
from app.services.company_service import CompanyService
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

ADMIN_EMAIL = "admin@mypila.com"
TEST_PASSWORD = "senha123"


@pytest.fixture
def settings() -> Settings:
    """테스트용 설정 — SQLite, 속도 제한 해제, 고정 JWT 비밀키."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite://",
        JWT_SECRET_KEY="test-secret-key-0123456789-abcdefghij",
        ADMIN_EMAIL=ADMIN_EMAIL,
        RATE_LIMIT_ENABLED=False,
        AXIOM_API_TOKEN="",
        SMTP_USER="",
        SMTP_PASSWORD="",
    )


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 앱, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """인메모리 SQLite 엔진 — 테스트마다 새 스키마."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def storage(db: AsyncSession) -> SqlStorage:
    return SqlStorage(db)


@pytest.fixture
def app(settings: Settings, storage: SqlStorage) -> FastAPI:
    """테스트 앱 — 작업 단위를 공유 세션으로 오버라이드합니다."""
    application = create_app(settings)

    async def _override_get_storage() -> AsyncGenerator[SqlStorage, None]:
        yield storage

    application.dependency_overrides[get_storage] = _override_get_storage
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(storage: SqlStorage, name: str, email: str) -> User:
    user = await storage.users.create({
        "name": name,
        "email": email,
        "password_hash": hash_password(TEST_PASSWORD),
    })
    await storage.commit()
    return user


async def make_company(storage: SqlStorage, user: User, name: str = "Acme Ltda") -> Company:
    """기본 카테고리와 함께 회사를 생성합니다."""
    from app.schemas.company import CompanyCreate
    company = await CompanyService().create_company(storage, user.id, CompanyCreate(name=name))
    await storage.commit()
    return company


@pytest_asyncio.fixture
async def user(storage: SqlStorage) -> User:
    """일반 사용자를 생성합니다."""
    return await make_user(storage, "Maria Silva", "maria@example.com")


@pytest_asyncio.fixture
async def other_user(storage: SqlStorage) -> User:
    """다른 사용자 — 소유권 검사용."""
    return await make_user(storage, "Joao Souza", "joao@example.com")


@pytest_asyncio.fixture
async def admin_user(storage: SqlStorage) -> User:
    """ADMIN_EMAIL과 같은 이메일의 관리자 사용자."""
    return await make_user(storage, "Admin", ADMIN_EMAIL)


@pytest_asyncio.fixture
async def company(storage: SqlStorage, user: User) -> Company:
    return await make_company(storage, user)


@pytest_asyncio.fixture
async def other_company(storage: SqlStorage, other_user: User) -> Company:
    return await make_company(storage, other_user, "Outra Empresa")


def make_token(user: User, settings: Settings) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "email": user.email}, settings)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(user: User, settings: Settings) -> dict[str, str]:
    return auth_header(make_token(user, settings))


@pytest.fixture
def other_headers(other_user: User, settings: Settings) -> dict[str, str]:
    return auth_header(make_token(other_user, settings))


@pytest.fixture
def admin_headers(admin_user: User, settings: Settings) -> dict[str, str]:
    return auth_header(make_token(admin_user, settings))


def transaction_payload(company: Company, **overrides: Any) -> dict[str, Any]:
    """거래 생성 요청 본문 — Transaction create body with sensible defaults."""
    payload: dict[str, Any] = {
        "companyId": str(company.id),
        "month": "Janeiro",
        "year": 2024,
        "amount": 100.0,
        "category": "Alimentacao",
        "status": "ABERTO",
        "description": "Mercado",
    }
    payload.update(overrides)
    return payload


def quote_payload(**overrides: Any) -> dict[str, Any]:
    """견적 생성 요청 본문 — Quote create body with two items."""
    payload: dict[str, Any] = {
        "clientName": "Cliente Teste",
        "clientEmail": "cliente@example.com",
        "title": "Reforma do escritorio",
        "items": [
            {"description": "Pintura", "quantity": 2, "unitPrice": 150.0},
            {"description": "Material", "quantity": 1, "unitPrice": 200.0},
        ],
        "discountType": "VALUE",
        "discount": 0,
    }
    payload.update(overrides)
    return payload
