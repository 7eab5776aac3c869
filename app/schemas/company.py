"""회사/카테고리 관련 Pydantic 요청/응답 스키마 정의.

Company and category Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import ApiModel
from app.utils.validation import (
    VALID_CATEGORY_TYPES,
    check_hex_color,
    check_no_script,
    check_no_sql_injection,
    check_non_negative_amount,
    check_required,
    check_safe_text,
    sanitize_text,
)


# === 회사 (Company) 스키마 ===


class CompanyResponse(ApiModel):
    """회사 응답 스키마.

    Company response schema including the optional registry fields.
    """

    id: UUID
    user_id: UUID
    name: str
    cnpj: str | None = None
    legal_name: str | None = None
    trade_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    logo_url: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class CompanyDetailsMixin(ApiModel):
    """회사 등록 정보 필드 (모두 선택).

    Optional registry fields shared by create and update requests. Values are
    stripped of markup; script content is rejected.
    """

    cnpj: str | None = Field(default=None, max_length=18)
    legal_name: str | None = Field(default=None, max_length=200)
    trade_name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=300)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=2)
    zip_code: str | None = Field(default=None, max_length=10)
    logo_url: str | None = None

    @field_validator(
        "cnpj", "legal_name", "trade_name", "email", "phone",
        "address", "city", "state", "zip_code",
    )
    @classmethod
    def validate_detail(cls, value: str | None) -> str | None:
        if value is None:
            return None
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, value: str | None) -> str | None:
        # data URL 허용 — data: URLs allowed, script URLs rejected
        if value is not None:
            check_no_script(value)
        return value


class CompanyCreate(CompanyDetailsMixin):
    """회사 생성 요청 스키마.

    Company creation request. The name is required (max 100).
    """

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        check_required(value, "Nome", 100)
        check_no_script(value)
        check_no_sql_injection(value)
        return sanitize_text(value)


class CompanyUpdate(CompanyCreate):
    """회사 수정 요청 스키마 — 전달된 필드만 변경.

    Company update request; only fields present in the body are changed.
    """


# === 카테고리 (Category) 스키마 ===


class CategoryResponse(ApiModel):
    """카테고리 응답 스키마."""

    id: UUID
    company_id: UUID
    name: str
    type: str
    color: str
    budget: float
    created_at: datetime
    updated_at: datetime | None = None


class CategoryCreate(ApiModel):
    """카테고리 생성/수정 요청 스키마.

    Category create/update request.

    Attributes:
        name: 카테고리명 (Required, max 50)
        type: 유형 (EXPENSE | INCOME, defaults to EXPENSE)
        color: 색상 (#RRGGBB, defaults to #78716c)
        budget: 예산 (Budget, >= 0)
    """

    name: str
    type: str = "EXPENSE"
    color: str = "#78716c"
    budget: float = 0.0

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        check_required(value, "Nome", 50)
        check_safe_text(value)
        return sanitize_text(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: str | None) -> str:
        # 빈 값은 EXPENSE — Empty type falls back to EXPENSE
        if not value:
            return "EXPENSE"
        if value not in VALID_CATEGORY_TYPES:
            raise ValueError("Tipo deve ser 'EXPENSE' ou 'INCOME'")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return check_hex_color(value)

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, value: float) -> float:
        return check_non_negative_amount(value, "Orçamento")


class CategoryUpdate(CategoryCreate):
    """카테고리 수정 요청 스키마 — 생성과 동일한 규칙."""
