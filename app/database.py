"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Builds the async SQLAlchemy engine and session factory from Settings and
declares the ORM base class. The MongoDB client is built here as well so
that both storage backends are configured from one place.
"""

from typing import Any

from pymongo import AsyncMongoClient
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    All models inherit from this class to register with the metadata.
    """

    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """설정으로부터 비동기 데이터베이스 엔진을 생성합니다.

    Create the async database engine for the configured DATABASE_URL.
    Pool options only apply to server databases (asyncpg).

    Args:
        settings: 애플리케이션 설정 (Application settings)

    Returns:
        AsyncEngine: 비동기 엔진 (Async SQLAlchemy engine)
    """
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if not settings.DATABASE_URL.startswith("sqlite"):
        # pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
        options.update(
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            # 트랜잭션 모드 풀러에서 prepared statement 비활성화
            # Disable prepared statement caches for transaction-mode pooling
            connect_args={"statement_cache_size": 0},
        )
    return create_async_engine(settings.DATABASE_URL, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """비동기 세션 팩토리를 생성합니다.

    expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능
    (Allows attribute access after commit without refresh)
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """MongoDB 비동기 클라이언트를 생성합니다.

    UUID는 표준 바이너리 표현으로, 날짜는 UTC aware 값으로 저장/조회합니다.
    UUIDs use the standard binary representation and datetimes come back
    timezone-aware (UTC).
    """
    return AsyncMongoClient(
        settings.MONGO_URL,
        uuidRepresentation="standard",
        tz_aware=True,
    )
