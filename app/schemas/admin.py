"""관리자 화면용 Pydantic 스키마 정의.

Admin area Pydantic schema definitions: dashboard statistics and the
cross-tenant user/company/transaction listings.
"""

from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from app.schemas.auth import UserResponse
from app.schemas.base import ApiModel
from app.utils.validation import check_email, check_no_script, check_required, sanitize_text


class AdminTransaction(ApiModel):
    """관리자 거래 항목 — 회사명 포함.

    Transaction row of the admin views. ``date`` is ``<month>/<year>``.
    """

    id: UUID
    company_id: UUID
    company_name: str
    description: str
    amount: float
    category: str
    date: str
    status: str
    created_at: datetime | None = None


class AdminStatsResponse(ApiModel):
    """관리자 대시보드 통계.

    Attributes:
        total_users: 전체 사용자 수 (User count)
        total_companies: 전체 회사 수 (Company count)
        total_transactions: 전체 거래 수 (Transaction count)
        total_revenue: PAGO 거래 합계 (Sum of paid transaction amounts)
        recent_users: 최근 가입 사용자 5명 (Five newest users)
        recent_transactions: 최근 거래 5건 (Five newest transactions)
    """

    total_users: int
    total_companies: int
    total_transactions: int
    total_revenue: float
    recent_users: list[UserResponse]
    recent_transactions: list[AdminTransaction]


class AdminUser(ApiModel):
    """관리자 사용자 항목 — 보유 회사 수 포함."""

    id: UUID
    name: str
    email: str
    company_count: int
    created_at: datetime
    updated_at: datetime | None = None


class AdminCompany(ApiModel):
    """관리자 회사 항목 — 소유자 정보와 거래 수 포함."""

    id: UUID
    user_id: UUID
    user_name: str
    user_email: str
    name: str
    cnpj: str | None = None
    transaction_count: int
    created_at: datetime
    updated_at: datetime | None = None


class AdminUserUpdate(ApiModel):
    """관리자 사용자 수정 요청 스키마."""

    name: str
    email: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        check_required(value, "Nome", 100)
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)


class CleanupResponse(ApiModel):
    """토큰 정리 결과 — 삭제된 토큰 수."""

    message: str
    refresh_tokens_deleted: int
    reset_tokens_deleted: int
