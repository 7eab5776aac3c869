"""관리자 서비스 — 대시보드 통계, 전체 사용자/회사/거래 조회와 관리.

Admin Service — Cross-tenant dashboard statistics and the user, company
and transaction listings of the administrator area.
"""

import logging
from typing import Sequence
from uuid import UUID

from app.models.company import Company
from app.models.transaction import Transaction
from app.models.user import User
from app.repositories.interfaces import Storage
from app.schemas.admin import (
    AdminCompany,
    AdminStatsResponse,
    AdminTransaction,
    AdminUser,
    AdminUserUpdate,
    CleanupResponse,
)
from app.schemas.auth import UserResponse
from app.services.auth_service import AuthService
from app.services.company_service import CompanyService
from app.utils.exceptions import DuplicateError, NotFoundError

logger = logging.getLogger(__name__)

RECENT_LIMIT: int = 5  # 대시보드 최근 항목 수 — Recent rows on the dashboard


class AdminService:
    """관리자 영역 비즈니스 로직.

    Service handling the administrator area. Deleting a user reuses the
    company cascade of ``CompanyService``.

    Attributes:
        companies: 회사 서비스 (Company cascade delete)
        auth: 인증 서비스 (Token cleanup)
    """

    def __init__(self, companies: CompanyService, auth: AuthService) -> None:
        self.companies: CompanyService = companies
        self.auth: AuthService = auth

    async def _admin_transactions(
        self, storage: Storage, transactions: Sequence[Transaction]
    ) -> list[AdminTransaction]:
        """거래에 회사명을 붙여 관리자 행으로 변환합니다.

        Map transactions to admin rows carrying the company name and a
        ``<month>/<year>`` date.
        """
        company_ids: set[UUID] = {transaction.company_id for transaction in transactions}
        companies: list[Company] = await storage.companies.get_many(list(company_ids))
        names: dict[UUID, str] = {company.id: company.name for company in companies}
        return [
            AdminTransaction(
                id=transaction.id,
                company_id=transaction.company_id,
                company_name=names.get(transaction.company_id, ""),
                description=transaction.description,
                amount=transaction.amount,
                category=transaction.category,
                date=f"{transaction.month}/{transaction.year}",
                status=transaction.status,
                created_at=transaction.created_at,
            )
            for transaction in transactions
        ]

    async def get_stats(self, storage: Storage) -> AdminStatsResponse:
        """대시보드 통계를 계산합니다.

        Counts of users, companies and transactions, paid revenue and the
        five most recent users and transactions.
        """
        recent_users: list[User] = await storage.users.list_recent(RECENT_LIMIT)
        recent_transactions: list[Transaction] = await storage.transactions.list_recent(RECENT_LIMIT)
        return AdminStatsResponse(
            total_users=await storage.users.count(),
            total_companies=await storage.companies.count(),
            total_transactions=await storage.transactions.count(),
            total_revenue=await storage.transactions.sum_paid(),
            recent_users=[UserResponse.model_validate(user) for user in recent_users],
            recent_transactions=await self._admin_transactions(storage, recent_transactions),
        )

    async def list_users(
        self, storage: Storage, search: str, page: int, limit: int
    ) -> tuple[list[AdminUser], int]:
        """사용자 목록 (이름/이메일 검색) — 회사 수 포함.

        Args:
            storage: 작업 단위 (Unit of work)
            search: 이름/이메일 검색어, 빈 문자열이면 전체 (Name/email filter)
            page: 페이지 번호 (Page number)
            limit: 페이지 크기 (Page size)

        Returns:
            tuple[list[AdminUser], int]: (사용자 목록, 전체 개수) (Rows, total)
        """
        users, total = await storage.users.search(search, page, limit)
        counts: dict[UUID, int] = await storage.companies.count_by_users([user.id for user in users])
        rows: list[AdminUser] = [
            AdminUser(
                id=user.id,
                name=user.name,
                email=user.email,
                company_count=counts.get(user.id, 0),
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
            for user in users
        ]
        return rows, total

    async def update_user(self, storage: Storage, user_id: UUID, data: AdminUserUpdate) -> User:
        """사용자 이름/이메일을 수정합니다 — 다른 사용자의 이메일이면 409.

        Update a user's name and email; an email used by another account
        yields 409.
        """
        existing: User | None = await storage.users.get_by_email(data.email)
        if existing is not None and existing.id != user_id:
            raise DuplicateError("Email ja cadastrado", "EMAIL_ALREADY_EXISTS")
        updated: User | None = await storage.users.update(user_id, {"name": data.name, "email": data.email})
        if updated is None:
            raise NotFoundError("Usuario nao encontrado", "USER_NOT_FOUND")
        logger.info("Admin updated user %s", user_id)
        return updated

    async def delete_user(self, storage: Storage, user_id: UUID) -> None:
        """사용자와 소유 회사(하위 데이터 포함), 토큰을 모두 삭제합니다.

        Delete a user with all of their companies (full company cascade),
        refresh tokens and password-reset tokens.

        Raises:
            NotFoundError: 사용자가 없을 때 (404 USER_NOT_FOUND)
        """
        user: User | None = await storage.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Usuario nao encontrado", "USER_NOT_FOUND")
        companies: list[Company] = await storage.companies.list_by_user(user_id)
        for company in companies:
            await self.companies.delete_company(storage, company.id)
        await storage.refresh_tokens.delete_for_user(user_id)
        await storage.reset_tokens.delete_for_user(user_id)
        await storage.users.delete(user_id)
        logger.info("Admin deleted user %s (companies=%d)", user_id, len(companies))

    async def list_companies(
        self, storage: Storage, search: str, page: int, limit: int
    ) -> tuple[list[AdminCompany], int]:
        """회사 목록 — 소유자 이름/이메일과 거래 수 포함.

        Companies matching ``search`` (company name or owner name/email),
        with owner details and transaction counts.
        """
        companies, total = await storage.companies.search(search, page, limit)
        owners: list[User] = await storage.users.get_many(list({company.user_id for company in companies}))
        by_id: dict[UUID, User] = {owner.id: owner for owner in owners}
        counts: dict[UUID, int] = await storage.transactions.count_by_companies([company.id for company in companies])

        rows: list[AdminCompany] = []
        for company in companies:
            owner: User | None = by_id.get(company.user_id)
            rows.append(
                AdminCompany(
                    id=company.id,
                    user_id=company.user_id,
                    user_name=owner.name if owner else "",
                    user_email=owner.email if owner else "",
                    name=company.name,
                    cnpj=company.cnpj,
                    transaction_count=counts.get(company.id, 0),
                    created_at=company.created_at,
                    updated_at=company.updated_at,
                )
            )
        return rows, total

    async def list_transactions(
        self, storage: Storage, search: str, status: str, page: int, limit: int
    ) -> tuple[list[AdminTransaction], int]:
        """전체 거래 목록 (설명 검색, 상태 필터)."""
        transactions, total = await storage.transactions.search(search, status, page, limit)
        return await self._admin_transactions(storage, transactions), total

    async def cleanup_tokens(self, storage: Storage) -> CleanupResponse:
        refresh_deleted, reset_deleted = await self.auth.cleanup_tokens(storage)
        return CleanupResponse(
            message="Limpeza concluida",
            refresh_tokens_deleted=refresh_deleted,
            reset_tokens_deleted=reset_deleted,
        )
