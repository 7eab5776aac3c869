"""레포지토리 인터페이스 — 저장소 구현과 서비스 계층 사이의 계약.

Repository interfaces — The contract between the service layer and the two
storage backends (relational via SQLAlchemy, document via pymongo).

Services depend only on these protocols. Each backend returns the ORM
model classes from ``app.models`` as plain entity objects: the relational
backend returns session-attached instances, the document backend returns
transient instances built from documents.

``Storage`` is the per-request unit of work: one repository per aggregate
plus ``commit()``/``rollback()``.
"""

from datetime import datetime
from typing import Any, Protocol, Sequence
from uuid import UUID

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


class UserRepo(Protocol):
    """사용자 레포지토리 계약."""

    async def get_by_id(self, user_id: UUID) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def get_many(self, user_ids: Sequence[UUID]) -> list[User]: ...
    async def create(self, data: dict[str, Any]) -> User: ...
    async def update(self, user_id: UUID, data: dict[str, Any]) -> User | None: ...
    async def delete(self, user_id: UUID) -> bool: ...
    async def count(self) -> int: ...
    async def list_recent(self, limit: int) -> list[User]: ...
    async def search(self, search: str, page: int, limit: int) -> tuple[list[User], int]: ...


class RefreshTokenRepo(Protocol):
    """리프레시 토큰 레포지토리 계약.

    Tokens are looked up by hash only. ``revoke*`` methods flip the revoked
    flag of live rows and report how many rows changed.
    """

    async def create(self, data: dict[str, Any]) -> RefreshToken: ...
    async def get_by_hash(self, token_hash: str) -> RefreshToken | None: ...
    async def revoke(self, token_id: UUID, now: datetime) -> bool: ...
    async def revoke_live_by_hash(self, token_hash: str, now: datetime) -> bool: ...
    async def revoke_all_for_user(self, user_id: UUID, now: datetime) -> int: ...
    async def delete_stale(self, now: datetime, revoked_before: datetime) -> int: ...
    async def delete_for_user(self, user_id: UUID) -> int: ...


class PasswordResetRepo(Protocol):
    """비밀번호 재설정 토큰 레포지토리 계약."""

    async def create(self, data: dict[str, Any]) -> PasswordResetToken: ...
    async def get_by_hash(self, token_hash: str) -> PasswordResetToken | None: ...
    async def mark_used(self, token_id: UUID) -> None: ...
    async def delete_for_user(self, user_id: UUID) -> int: ...
    async def delete_stale(self, now: datetime) -> int: ...


class CompanyRepo(Protocol):
    """회사 레포지토리 계약."""

    async def get_by_id(self, company_id: UUID) -> Company | None: ...
    async def get_many(self, company_ids: Sequence[UUID]) -> list[Company]: ...
    async def list_by_user(self, user_id: UUID) -> list[Company]: ...
    async def create(self, data: dict[str, Any]) -> Company: ...
    async def update(self, company_id: UUID, data: dict[str, Any]) -> Company | None: ...
    async def delete(self, company_id: UUID) -> bool: ...
    async def count(self) -> int: ...
    async def count_by_users(self, user_ids: Sequence[UUID]) -> dict[UUID, int]: ...
    async def search(self, search: str, page: int, limit: int) -> tuple[list[Company], int]: ...


class CategoryRepo(Protocol):
    """카테고리 레포지토리 계약."""

    async def get_by_id(self, category_id: UUID) -> Category | None: ...
    async def list_by_company(self, company_id: UUID) -> list[Category]: ...
    async def create(self, data: dict[str, Any]) -> Category: ...
    async def create_many(self, rows: Sequence[dict[str, Any]]) -> list[Category]: ...
    async def update(self, category_id: UUID, data: dict[str, Any]) -> Category | None: ...
    async def delete(self, category_id: UUID) -> bool: ...
    async def delete_by_company(self, company_id: UUID) -> int: ...


class TransactionRepo(Protocol):
    """거래 레포지토리 계약."""

    async def get_by_id(self, transaction_id: UUID) -> Transaction | None: ...
    async def create(self, data: dict[str, Any]) -> Transaction: ...
    async def update(self, transaction_id: UUID, data: dict[str, Any]) -> Transaction | None: ...
    async def delete(self, transaction_id: UUID) -> bool: ...
    async def list_page(
        self, company_ids: Sequence[UUID], page: int, limit: int
    ) -> tuple[list[Transaction], int]: ...
    async def exists_for_period(
        self, company_id: UUID, description: str, month: str, year: int
    ) -> bool: ...
    async def totals_by_status(self, company_ids: Sequence[UUID]) -> dict[str, float]: ...
    async def sum_by_categories(self, company_id: UUID, categories: Sequence[str]) -> float: ...
    async def delete_by_company(self, company_id: UUID) -> int: ...
    async def count(self) -> int: ...
    async def sum_paid(self) -> float: ...
    async def list_recent(self, limit: int) -> list[Transaction]: ...
    async def count_by_companies(self, company_ids: Sequence[UUID]) -> dict[UUID, int]: ...
    async def search(
        self, search: str, status: str, page: int, limit: int
    ) -> tuple[list[Transaction], int]: ...


class RecurringRepo(Protocol):
    """반복 규칙 레포지토리 계약."""

    async def get_by_id(self, rule_id: UUID) -> RecurringRule | None: ...
    async def list_by_company(self, company_id: UUID) -> list[RecurringRule]: ...
    async def list_by_day(self, day_of_month: int) -> list[RecurringRule]: ...
    async def create(self, data: dict[str, Any]) -> RecurringRule: ...
    async def delete(self, rule_id: UUID) -> bool: ...
    async def delete_by_company(self, company_id: UUID) -> int: ...


class QuoteRepo(Protocol):
    """견적 레포지토리 계약 — 항목은 견적과 함께 저장/삭제."""

    async def get_by_id(self, quote_id: UUID) -> Quote | None: ...
    async def list_by_company(self, company_id: UUID, status: str | None = None) -> list[Quote]: ...
    async def create(self, data: dict[str, Any], items: Sequence[dict[str, Any]]) -> Quote: ...
    async def update(self, quote_id: UUID, data: dict[str, Any]) -> Quote | None: ...
    async def replace_items(self, quote_id: UUID, items: Sequence[dict[str, Any]]) -> list[QuoteItem]: ...
    async def get_items(self, quote_id: UUID) -> list[QuoteItem]: ...
    async def items_by_quote(self, quote_ids: Sequence[UUID]) -> dict[UUID, list[QuoteItem]]: ...
    async def delete(self, quote_id: UUID) -> bool: ...
    async def delete_by_company(self, company_id: UUID) -> int: ...
    async def list_numbers(self, company_id: UUID, prefix: str) -> list[str]: ...
    async def clear_template(self, template_id: UUID) -> None: ...


class QuoteTemplateRepo(Protocol):
    """견적 양식 레포지토리 계약."""

    async def get_by_id(self, template_id: UUID) -> QuoteTemplate | None: ...
    async def list_by_company(self, company_id: UUID) -> list[QuoteTemplate]: ...
    async def create(self, data: dict[str, Any]) -> QuoteTemplate: ...
    async def update(self, template_id: UUID, data: dict[str, Any]) -> QuoteTemplate | None: ...
    async def delete(self, template_id: UUID) -> bool: ...
    async def clear_default(self, company_id: UUID, exclude_id: UUID | None = None) -> None: ...
    async def delete_by_company(self, company_id: UUID) -> int: ...


class Storage(Protocol):
    """요청 단위 작업 단위(Unit of work).

    Per-request bundle of repositories sharing one transaction scope.
    The relational backend commits everything at once; the document backend
    writes each operation immediately and ``commit()`` is a no-op.
    """

    users: UserRepo
    refresh_tokens: RefreshTokenRepo
    reset_tokens: PasswordResetRepo
    companies: CompanyRepo
    categories: CategoryRepo
    transactions: TransactionRepo
    recurring: RecurringRepo
    quotes: QuoteRepo
    quote_templates: QuoteTemplateRepo

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
