"""MongoDB 도메인 레포지토리 — 관계형 레포지토리와 동일한 계약.

MongoDB domain repositories implementing the same contracts as the
relational repositories. Quote items are embedded in their quote document.
"""

import re
from collections import defaultdict
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from app.models import (
    Category,
    Company,
    PasswordResetToken,
    Quote,
    QuoteItem,
    QuoteTemplate,
    RecurringRule,
    RefreshToken,
    Transaction,
    User,
)
from app.repositories.mongo.base import MongoRepository, build_entity, column_defaults
from app.utils.dates import utc_now


def _contains(search: str) -> dict[str, str]:
    # 대소문자 무시 부분 일치 — Case-insensitive substring match
    return {"$regex": re.escape(search), "$options": "i"}


class MongoUserRepository(MongoRepository[User]):
    """사용자 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "users", User)

    async def get_by_email(self, email: str) -> User | None:
        return self.to_entity(await self.collection.find_one({"email": email}))

    async def list_recent(self, limit: int) -> list[User]:
        return await self.find({}, [("created_at", -1)], limit=limit)

    async def search(self, search: str, page: int, limit: int) -> tuple[list[User], int]:
        query: dict[str, Any] = {}
        if search:
            query = {"$or": [{"name": _contains(search)}, {"email": _contains(search)}]}
        return await self.find_page(query, [("created_at", -1)], page, limit)


class MongoRefreshTokenRepository(MongoRepository[RefreshToken]):
    """리프레시 토큰 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "refresh_tokens", RefreshToken)

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        return self.to_entity(await self.collection.find_one({"token_hash": token_hash}))

    async def revoke(self, token_id: UUID, now: datetime) -> bool:
        result = await self.collection.update_one(
            {"_id": token_id}, {"$set": {"is_revoked": True, "revoked_at": now}}
        )
        return result.matched_count > 0

    async def revoke_live_by_hash(self, token_hash: str, now: datetime) -> bool:
        result = await self.collection.update_one(
            {"token_hash": token_hash, "is_revoked": False, "expires_at": {"$gt": now}},
            {"$set": {"is_revoked": True, "revoked_at": now}},
        )
        return result.modified_count > 0

    async def revoke_all_for_user(self, user_id: UUID, now: datetime) -> int:
        result = await self.collection.update_many(
            {"user_id": user_id, "is_revoked": False, "expires_at": {"$gt": now}},
            {"$set": {"is_revoked": True, "revoked_at": now}},
        )
        return result.modified_count

    async def delete_stale(self, now: datetime, revoked_before: datetime) -> int:
        return await self.delete_where({
            "$or": [
                {"expires_at": {"$lt": now}},
                {"is_revoked": True, "created_at": {"$lt": revoked_before}},
            ]
        })

    async def delete_for_user(self, user_id: UUID) -> int:
        return await self.delete_where({"user_id": user_id})


class MongoPasswordResetRepository(MongoRepository[PasswordResetToken]):
    """비밀번호 재설정 토큰 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "password_reset_tokens", PasswordResetToken)

    async def get_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        return self.to_entity(await self.collection.find_one({"token_hash": token_hash}))

    async def mark_used(self, token_id: UUID) -> None:
        await self.collection.update_one({"_id": token_id}, {"$set": {"used": True}})

    async def delete_for_user(self, user_id: UUID) -> int:
        return await self.delete_where({"user_id": user_id})

    async def delete_stale(self, now: datetime) -> int:
        return await self.delete_where({"$or": [{"used": True}, {"expires_at": {"$lt": now}}]})


class MongoCompanyRepository(MongoRepository[Company]):
    """회사 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "companies", Company)

    async def list_by_user(self, user_id: UUID) -> list[Company]:
        return await self.find({"user_id": user_id}, [("name", 1)])

    async def count_by_users(self, user_ids: Sequence[UUID]) -> dict[UUID, int]:
        return await self.group_count("user_id", user_ids)

    async def search(self, search: str, page: int, limit: int) -> tuple[list[Company], int]:
        query: dict[str, Any] = {}
        if search:
            owners = self.db["users"].find(
                {"$or": [{"name": _contains(search)}, {"email": _contains(search)}]},
                {"_id": 1},
            )
            owner_ids: list[UUID] = [doc["_id"] async for doc in owners]
            query = {"$or": [{"name": _contains(search)}, {"user_id": {"$in": owner_ids}}]}
        return await self.find_page(query, [("created_at", -1)], page, limit)


class MongoCategoryRepository(MongoRepository[Category]):
    """카테고리 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "categories", Category)

    async def list_by_company(self, company_id: UUID) -> list[Category]:
        return await self.find({"company_id": company_id}, [("name", 1)])

    async def create_many(self, rows: Sequence[dict[str, Any]]) -> list[Category]:
        if not rows:
            return []
        docs: list[dict[str, Any]] = [self.to_document(row) for row in rows]
        await self.collection.insert_many(docs)
        return [build_entity(Category, doc) for doc in docs]

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where({"company_id": company_id})


class MongoTransactionRepository(MongoRepository[Transaction]):
    """거래 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "transactions", Transaction)

    async def list_page(
        self, company_ids: Sequence[UUID], page: int, limit: int
    ) -> tuple[list[Transaction], int]:
        if not company_ids:
            return [], 0
        return await self.find_page(
            {"company_id": {"$in": list(company_ids)}},
            [("year", -1), ("month", -1), ("created_at", -1)],
            page,
            limit,
        )

    async def exists_for_period(
        self, company_id: UUID, description: str, month: str, year: int
    ) -> bool:
        doc = await self.collection.find_one(
            {"company_id": company_id, "description": description, "month": month, "year": year},
            {"_id": 1},
        )
        return doc is not None

    async def totals_by_status(self, company_ids: Sequence[UUID]) -> dict[str, float]:
        if not company_ids:
            return {}
        cursor = await self.collection.aggregate([
            {"$match": {"company_id": {"$in": list(company_ids)}}},
            {"$group": {"_id": "$status", "total": {"$sum": "$amount"}}},
        ])
        return {row["_id"]: float(row["total"]) async for row in cursor}

    async def sum_by_categories(self, company_id: UUID, categories: Sequence[str]) -> float:
        if not categories:
            return 0.0
        return await self._sum({"company_id": company_id, "category": {"$in": list(categories)}})

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where({"company_id": company_id})

    async def sum_paid(self) -> float:
        return await self._sum({"status": "PAGO"})

    async def list_recent(self, limit: int) -> list[Transaction]:
        return await self.find({}, [("created_at", -1)], limit=limit)

    async def count_by_companies(self, company_ids: Sequence[UUID]) -> dict[UUID, int]:
        return await self.group_count("company_id", company_ids)

    async def search(
        self, search: str, status: str, page: int, limit: int
    ) -> tuple[list[Transaction], int]:
        query: dict[str, Any] = {}
        if search:
            query["description"] = _contains(search)
        if status:
            query["status"] = status
        return await self.find_page(query, [("created_at", -1)], page, limit)

    async def _sum(self, match: dict[str, Any]) -> float:
        cursor = await self.collection.aggregate([
            {"$match": match},
            {"$group": {"_id": None, "total": {"$sum": "$amount"}}},
        ])
        rows = await cursor.to_list()
        return float(rows[0]["total"]) if rows else 0.0


class MongoRecurringRepository(MongoRepository[RecurringRule]):
    """반복 규칙 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "recurring", RecurringRule)

    async def list_by_company(self, company_id: UUID) -> list[RecurringRule]:
        return await self.find({"company_id": company_id}, [("day_of_month", 1), ("description", 1)])

    async def list_by_day(self, day_of_month: int) -> list[RecurringRule]:
        return await self.find({"day_of_month": day_of_month})

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where({"company_id": company_id})


class MongoQuoteRepository(MongoRepository[Quote]):
    """견적 컬렉션 레포지토리 — 항목은 ``items`` 배열로 내장.

    Quote collection repository; items live in the quote's ``items`` array.
    """

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "quotes", Quote)

    @staticmethod
    def _item_documents(items: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        docs: list[dict[str, Any]] = []
        for index, item in enumerate(items):
            fields: dict[str, Any] = column_defaults(QuoteItem, {**item, "sort_order": index})
            fields.pop("quote_id", None)
            docs.append(fields)
        return docs

    @staticmethod
    def _items_of(doc: dict[str, Any]) -> list[QuoteItem]:
        return [
            build_entity(QuoteItem, {**item, "_id": item["id"]}, quote_id=doc["_id"])
            for item in sorted(doc.get("items", []), key=lambda item: item.get("sort_order", 0))
        ]

    async def list_by_company(self, company_id: UUID, status: str | None = None) -> list[Quote]:
        query: dict[str, Any] = {"company_id": company_id}
        if status:
            query["status"] = status
        return await self.find(query, [("created_at", -1)])

    async def create(self, data: dict[str, Any], items: Sequence[dict[str, Any]]) -> Quote:  # type: ignore[override]
        doc: dict[str, Any] = self.to_document(data)
        doc["items"] = self._item_documents(items)
        await self.collection.insert_one(doc)
        return build_entity(Quote, doc)

    async def replace_items(self, quote_id: UUID, items: Sequence[dict[str, Any]]) -> list[QuoteItem]:
        docs: list[dict[str, Any]] = self._item_documents(items)
        await self.collection.update_one(
            {"_id": quote_id}, {"$set": {"items": docs, "updated_at": utc_now()}}
        )
        return self._items_of({"_id": quote_id, "items": docs})

    async def get_items(self, quote_id: UUID) -> list[QuoteItem]:
        doc = await self.collection.find_one({"_id": quote_id}, {"items": 1})
        return self._items_of(doc) if doc else []

    async def items_by_quote(self, quote_ids: Sequence[UUID]) -> dict[UUID, list[QuoteItem]]:
        grouped: dict[UUID, list[QuoteItem]] = defaultdict(list)
        if not quote_ids:
            return grouped
        async for doc in self.collection.find({"_id": {"$in": list(quote_ids)}}, {"items": 1}):
            grouped[doc["_id"]] = self._items_of(doc)
        return grouped

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where({"company_id": company_id})

    async def list_numbers(self, company_id: UUID, prefix: str) -> list[str]:
        cursor = self.collection.find(
            {"company_id": company_id, "number": {"$regex": "^" + re.escape(prefix)}},
            {"number": 1},
        )
        return [doc["number"] async for doc in cursor]

    async def clear_template(self, template_id: UUID) -> None:
        await self.collection.update_many(
            {"template_id": template_id}, {"$set": {"template_id": None}}
        )


class MongoQuoteTemplateRepository(MongoRepository[QuoteTemplate]):
    """견적 양식 컬렉션 레포지토리."""

    def __init__(self, db: AsyncDatabase) -> None:
        super().__init__(db, "quote_templates", QuoteTemplate)

    async def list_by_company(self, company_id: UUID) -> list[QuoteTemplate]:
        return await self.find({"company_id": company_id}, [("name", 1)])

    async def clear_default(self, company_id: UUID, exclude_id: UUID | None = None) -> None:
        query: dict[str, Any] = {"company_id": company_id, "is_default": True}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        await self.collection.update_many(query, {"$set": {"is_default": False}})

    async def delete_by_company(self, company_id: UUID) -> int:
        return await self.delete_where({"company_id": company_id})
