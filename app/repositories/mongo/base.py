"""MongoDB 기본 레포지토리 — 문서와 ORM 엔티티 간 변환 및 공통 CRUD.

MongoDB base repository — Converts between documents and the ORM model
classes and provides the generic CRUD shared by every collection.

Documents use the model's column names as keys and the entity id as
``_id``. Entities are transient model instances (never added to a
session), so services handle both backends the same way.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Generic, Mapping, Sequence, TypeVar
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from sqlalchemy import Date

from app.database import Base
from app.utils.dates import utc_now

ModelType = TypeVar("ModelType", bound=Base)


def to_bson_value(value: Any) -> Any:
    """BSON이 지원하지 않는 date를 UTC 자정 datetime으로 변환합니다.

    BSON has no date-only type; dates are stored as UTC midnight.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def column_defaults(model: type[Base], data: Mapping[str, Any]) -> dict[str, Any]:
    """모델 컬럼 기본값을 채운 문서 필드를 만듭니다.

    Build document fields from ``data``, filling column defaults (uuid4 ids,
    timestamps, flags) the way the ORM would on INSERT.
    """
    fields: dict[str, Any] = {}
    for column in model.__table__.columns:
        if column.key in data:
            fields[column.key] = to_bson_value(data[column.key])
        elif column.default is not None:
            default = column.default
            fields[column.key] = default.arg(None) if default.is_callable else default.arg
        elif column.nullable:
            fields[column.key] = None
    return fields


def build_entity(model: type[ModelType], doc: Mapping[str, Any], **extra: Any) -> ModelType:
    """문서를 세션에 속하지 않은 모델 인스턴스로 변환합니다.

    Turn a document into a transient model instance.
    """
    values: dict[str, Any] = {}
    for column in model.__table__.columns:
        key: str = column.key
        value: Any = doc.get("_id") if key == "id" else doc.get(key)
        if isinstance(column.type, Date) and isinstance(value, datetime):
            value = value.date()
        values[key] = value
    values.update(extra)
    return model(**values)


class MongoRepository(Generic[ModelType]):
    """컬렉션 하나에 대한 제네릭 CRUD 레포지토리.

    Generic CRUD repository over one collection.

    Attributes:
        db: 비동기 MongoDB 데이터베이스 (Async database handle)
        collection: 대상 컬렉션 (Target collection)
        model: 엔티티 모델 클래스 (Entity model class)
    """

    def __init__(self, db: AsyncDatabase, collection_name: str, model: type[ModelType]) -> None:
        self.db: AsyncDatabase = db
        self.collection = db[collection_name]
        self.model: type[ModelType] = model

    def to_entity(self, doc: Mapping[str, Any] | None) -> ModelType | None:
        if doc is None:
            return None
        return build_entity(self.model, doc)

    def to_document(self, data: Mapping[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = column_defaults(self.model, data)
        fields["_id"] = fields.pop("id")
        return fields

    async def find(
        self,
        query: Mapping[str, Any],
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[ModelType]:
        """조건에 맞는 문서를 엔티티 목록으로 조회합니다.

        Find documents matching ``query`` and return them as entities.
        """
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [build_entity(self.model, doc) async for doc in cursor]

    async def find_page(
        self,
        query: Mapping[str, Any],
        sort: Sequence[tuple[str, int]],
        page: int,
        per_page: int,
    ) -> tuple[list[ModelType], int]:
        """페이지네이션 조회 — (엔티티 목록, 전체 개수).

        Paginated find returning ``(entities, total)``.
        """
        total: int = await self.collection.count_documents(query)
        items: list[ModelType] = await self.find(query, sort, (page - 1) * per_page, per_page)
        return items, total

    async def get_by_id(self, record_id: UUID) -> ModelType | None:
        return self.to_entity(await self.collection.find_one({"_id": record_id}))

    async def get_many(self, record_ids: Sequence[UUID]) -> list[ModelType]:
        if not record_ids:
            return []
        return await self.find({"_id": {"$in": list(record_ids)}})

    async def create(self, obj_data: dict[str, Any]) -> ModelType:
        """새 문서를 삽입합니다 — Insert a new document."""
        doc: dict[str, Any] = self.to_document(obj_data)
        await self.collection.insert_one(doc)
        return build_entity(self.model, doc)

    async def update(self, record_id: UUID, update_data: dict[str, Any]) -> ModelType | None:
        """문서 필드를 갱신하고 갱신 후 엔티티를 반환합니다.

        Set the given fields (and ``updated_at`` when the model has it) and
        return the updated entity, or None when the document does not exist.
        """
        columns = self.model.__table__.columns
        fields: dict[str, Any] = {
            key: to_bson_value(value) for key, value in update_data.items() if key in columns
        }
        if "updated_at" in columns:
            fields["updated_at"] = utc_now()
        if not fields:
            return await self.get_by_id(record_id)
        doc = await self.collection.find_one_and_update(
            {"_id": record_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return self.to_entity(doc)

    async def delete(self, record_id: UUID) -> bool:
        result = await self.collection.delete_one({"_id": record_id})
        return result.deleted_count > 0

    async def delete_where(self, query: Mapping[str, Any]) -> int:
        result = await self.collection.delete_many(query)
        return result.deleted_count

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def group_count(self, field: str, values: Sequence[Any]) -> dict[Any, int]:
        """필드 값별 문서 수 — Document count per ``field`` value."""
        if not values:
            return {}
        cursor = await self.collection.aggregate([
            {"$match": {field: {"$in": list(values)}}},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ])
        return {row["_id"]: row["count"] async for row in cursor}
