"""기본 CRUD 레포지토리 — 모든 SQL 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all relational repositories.
Provides generic Create, Read, Update, Delete operations on one model.
The repository is bound to the request's session, so every repository of
one ``SqlStorage`` shares a single transaction.

Usage:
    class CategoryRepository(BaseRepository[Category]):
        def __init__(self, db: AsyncSession) -> None:
            super().__init__(db, Category)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        db: 요청 단위 비동기 세션 (Request-scoped async session)
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a session and a model class.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.db: AsyncSession = db
        self.model: type[ModelType] = model

    async def get_by_id(self, record_id: UUID) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        result = await self.db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_many(self, record_ids: Sequence[UUID]) -> list[ModelType]:
        """여러 ID의 레코드를 한 번에 조회합니다.

        Retrieve every record whose id is in ``record_ids``.
        """
        if not record_ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(record_ids)))
        return list(result.scalars().all())

    async def get_paginated(
        self,
        query: Select,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve a paginated list of records.

        Args:
            query: 기본 SELECT 쿼리, 정렬 포함 (Base SELECT query, ordered)
            page: 현재 페이지 번호, 1부터 시작 (Current page number, 1-based)
            per_page: 페이지당 레코드 수 (Number of records per page)

        Returns:
            tuple[list[ModelType], int]: (레코드 목록, 전체 개수)
                                         (List of records, total count)
        """
        # 전체 카운트 쿼리 — Total count query
        count_query: Select = select(func.count()).select_from(query.order_by(None).subquery())
        total: int = (await self.db.execute(count_query)).scalar() or 0

        # 오프셋 계산 및 페이지 적용 — Calculate offset and apply pagination
        offset: int = (page - 1) * per_page
        result = await self.db.execute(query.offset(offset).limit(per_page))
        return list(result.scalars().all()), total

    async def create(self, obj_data: dict[str, Any]) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.

        Args:
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def update(self, record_id: UUID, update_data: dict[str, Any]) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Update an existing record by its UUID.

        Args:
            record_id: 업데이트할 레코드의 UUID (UUID of the record to update)
            update_data: 업데이트할 필드와 값의 딕셔너리
                         (Dictionary of fields and values to update)

        Returns:
            ModelType | None: 업데이트된 레코드 또는 None (Updated record or None)
        """
        # 먼저 레코드 존재 여부 확인 — First verify record exists
        db_obj: ModelType | None = await self.get_by_id(record_id)
        if db_obj is None:
            return None

        # 모델에 있는 필드만 반영, None도 그대로 저장 — Unknown keys are ignored
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def delete(self, record_id: UUID) -> bool:
        """레코드를 삭제합니다.

        Delete a record by its UUID.

        Args:
            record_id: 삭제할 레코드의 UUID (UUID of the record to delete)

        Returns:
            bool: 삭제 성공 여부 (Whether the deletion was successful)
        """
        db_obj: ModelType | None = await self.get_by_id(record_id)
        if db_obj is None:
            return False

        await self.db.delete(db_obj)
        await self.db.flush()
        return True

    async def delete_where(self, *conditions: Any) -> int:
        """조건에 맞는 레코드를 일괄 삭제합니다.

        Bulk-delete every record matching ``conditions``.

        Returns:
            int: 삭제된 행 수 (Number of deleted rows)
        """
        result = await self.db.execute(
            delete(self.model).where(*conditions).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def count(self) -> int:
        """전체 레코드 수를 반환합니다 — Total number of records."""
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0
