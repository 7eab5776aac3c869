"""거래/반복 규칙 관련 Pydantic 요청/응답 스키마 정의.

Transaction and recurring rule Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from app.schemas.base import ApiModel
from app.utils.validation import (
    VALID_TRANSACTION_STATUSES,
    check_amount,
    check_day_of_month,
    check_month,
    check_required,
    check_safe_text,
    check_year,
    sanitize_text,
)


def _validate_description(value: str) -> str:
    if len(value) > 200:
        raise ValueError("Descrição deve ter no máximo 200 caracteres")
    check_safe_text(value)
    return sanitize_text(value)


def _validate_category(value: str) -> str:
    check_required(value, "Categoria", 100)
    check_safe_text(value)
    return sanitize_text(value)


# === 거래 (Transaction) 스키마 ===


class TransactionResponse(ApiModel):
    """거래 응답 스키마."""

    id: UUID
    company_id: UUID
    description: str = ""
    amount: float
    category: str
    month: str
    year: int
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TransactionFields(ApiModel):
    """거래 생성/수정 공통 필드.

    Fields shared by transaction create and update requests.

    Attributes:
        month: 월 이름 (Portuguese month name or "Acumulado")
        year: 연도 (2000-2100)
        amount: 금액 (> 0, max 999.999.999,99, 2 decimals)
        category: 카테고리 이름 또는 ID (Category name or id)
        status: 상태 (PAGO | ABERTO, defaults to ABERTO)
        description: 설명 (Optional, max 200)
    """

    month: str
    year: int
    amount: float
    category: str
    status: str = "ABERTO"
    description: str = ""

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str) -> str:
        return check_month(value)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value: int) -> int:
        return check_year(value)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: float) -> float:
        return check_amount(value, "Valor")

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _validate_category(value)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: str | None) -> str:
        if not value:
            return "ABERTO"
        if value not in VALID_TRANSACTION_STATUSES:
            raise ValueError("Status deve ser 'PAGO' ou 'ABERTO'")
        return value

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return _validate_description(value)


class TransactionCreate(TransactionFields):
    """거래 생성 요청 — 소속 회사 ID 포함."""

    company_id: UUID


class TransactionUpdate(TransactionFields):
    """거래 수정 요청 — 회사는 변경할 수 없음."""


class StatsResponse(ApiModel):
    """거래 통계 응답 — 지급/미결/합계.

    Transaction totals: ``paid`` sums PAGO amounts, ``open`` everything else.
    """

    paid: float
    open: float
    total: float


# === 반복 규칙 (Recurring) 스키마 ===


class RecurringResponse(ApiModel):
    """반복 규칙 응답 스키마."""

    id: UUID
    company_id: UUID
    description: str
    amount: float
    category: str
    day_of_month: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecurringCreate(ApiModel):
    """반복 규칙 생성 요청 스키마.

    Attributes:
        company_id: 소속 회사 ID (Parent company)
        description: 설명 (Required, max 200; dedup key when processing)
        amount: 금액 (> 0)
        category: 카테고리 (Category copied to generated transactions)
        day_of_month: 발생일 (1-31)
    """

    company_id: UUID
    description: str
    amount: float
    category: str
    day_of_month: int

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        check_required(value, "Descrição", 200)
        return _validate_description(value)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: float) -> float:
        return check_amount(value, "Valor")

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _validate_category(value)

    @field_validator("day_of_month")
    @classmethod
    def validate_day(cls, value: int) -> int:
        return check_day_of_month(value)


class ProcessRecurringResponse(ApiModel):
    """반복 규칙 처리 결과 — {"message": "Processed", "created": n}."""

    message: str
    created: int
