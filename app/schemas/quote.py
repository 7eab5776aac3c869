"""견적/견적 양식 관련 Pydantic 요청/응답 스키마 정의.

Quote (orçamento) and quote template Pydantic request/response schema
definitions, including the budget comparison report.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from app.schemas.base import ApiModel
from app.utils.validation import (
    VALID_DISCOUNT_TYPES,
    VALID_QUOTE_STATUSES,
    check_discount,
    check_hex_color,
    check_no_operators,
    check_no_script,
    check_non_negative_amount,
    check_quantity,
    check_required,
    sanitize_text,
)


def _empty_to_none(value: object) -> object:
    # 빈 문자열은 미지정 — Empty strings mean "not provided"
    if isinstance(value, str) and not value.strip():
        return None
    return value


# === 견적 항목 (Quote item) 스키마 ===


class QuoteItemResponse(ApiModel):
    """견적 항목 응답 스키마."""

    id: UUID
    quote_id: UUID
    description: str
    quantity: float
    unit_price: float
    total: float
    category_id: UUID | None = None
    sort_order: int = 0


class QuoteItemCreate(ApiModel):
    """견적 항목 요청 스키마.

    Attributes:
        description: 항목 설명 (Required, max 500)
        quantity: 수량 (> 0, max 999.999,9999, 4 decimals)
        unit_price: 단가 (>= 0, 2 decimals)
        category_id: 비교용 카테고리 (Optional category for the comparison)
    """

    description: str
    quantity: float
    unit_price: float
    category_id: UUID | None = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        check_required(value, "Descrição do item", 500)
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: float) -> float:
        return check_quantity(value)

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, value: float) -> float:
        return check_non_negative_amount(value, "Preço unitário")

    @field_validator("category_id", mode="before")
    @classmethod
    def empty_category(cls, value: object) -> object:
        return _empty_to_none(value)


# === 견적 (Quote) 스키마 ===


class QuoteResponse(ApiModel):
    """견적 응답 스키마 — 항목 포함."""

    id: UUID
    company_id: UUID
    number: str
    client_name: str
    client_email: str = ""
    client_phone: str = ""
    client_document: str = ""
    client_address: str = ""
    client_city: str = ""
    client_state: str = ""
    client_zip_code: str = ""
    title: str
    description: str = ""
    items: list[QuoteItemResponse] = []
    subtotal: float
    discount: float
    discount_type: str
    total: float
    status: str
    valid_until: date
    notes: str = ""
    template_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuoteCreate(ApiModel):
    """견적 생성/수정 요청 스키마.

    Quote create/update request. Totals are always computed by the server
    from the items and the discount.

    Attributes:
        client_name: 고객명 (Required, max 100)
        title: 제목 (Required, max 200)
        items: 항목 목록 (At least one item)
        discount_type: 할인 유형 (PERCENT | VALUE, defaults to VALUE)
        discount: 할인 값 (PERCENT: 0-100, VALUE: >= 0)
        valid_until: 유효 기한 (YYYY-MM-DD, defaults to today + 30 days)
        template_id: 양식 ID (Optional template used for the PDF)
    """

    client_name: str
    client_email: str = Field(default="", max_length=255)
    client_phone: str = Field(default="", max_length=30)
    client_document: str = Field(default="", max_length=20)
    client_address: str = Field(default="", max_length=300)
    client_city: str = Field(default="", max_length=100)
    client_state: str = Field(default="", max_length=2)
    client_zip_code: str = Field(default="", max_length=10)
    title: str
    description: str = Field(default="", max_length=1000)
    items: list[QuoteItemCreate] = Field(default_factory=list, validate_default=True)
    discount_type: str = "VALUE"
    discount: float = 0.0
    valid_until: date | None = None
    notes: str = Field(default="", max_length=2000)
    template_id: UUID | None = None

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, value: str) -> str:
        check_required(value, "Nome do cliente", 100)
        check_no_script(value)
        check_no_operators(value)
        return sanitize_text(value)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        check_required(value, "Título", 200)
        check_no_script(value)
        check_no_operators(value)
        return sanitize_text(value)

    @field_validator(
        "client_email", "client_phone", "client_document", "client_address",
        "client_city", "client_state", "client_zip_code", "description", "notes",
    )
    @classmethod
    def clean_text(cls, value: str) -> str:
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("items")
    @classmethod
    def validate_items(cls, value: list[QuoteItemCreate]) -> list[QuoteItemCreate]:
        if not value:
            raise ValueError("O orcamento deve ter pelo menos um item")
        return value

    @field_validator("discount_type", mode="before")
    @classmethod
    def validate_discount_type(cls, value: str | None) -> str:
        if not value:
            return "VALUE"
        if value not in VALID_DISCOUNT_TYPES:
            raise ValueError("Tipo de desconto deve ser 'PERCENT' ou 'VALUE'")
        return value

    @field_validator("discount")
    @classmethod
    def validate_discount(cls, value: float, info: ValidationInfo) -> float:
        # discount_type은 discount보다 먼저 선언되어 info.data에 존재
        return check_discount(value, info.data.get("discount_type", "VALUE"))

    @field_validator("valid_until", "template_id", mode="before")
    @classmethod
    def empty_optional(cls, value: object) -> object:
        return _empty_to_none(value)


class QuoteUpdate(QuoteCreate):
    """견적 수정 요청 — 생성과 동일한 규칙, 실행된 견적은 수정 불가."""


class QuoteStatusUpdate(ApiModel):
    """견적 상태 변경 요청 스키마."""

    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        if value not in VALID_QUOTE_STATUSES:
            raise ValueError("Status invalido")
        return value


class ComparisonItem(ApiModel):
    """견적 대비 실행 비교 항목."""

    description: str
    category_id: str | None = None
    quoted: float
    executed: float
    variance: float


class QuoteComparisonResponse(ApiModel):
    """견적 대비 실행 비교 응답.

    Quoted vs executed comparison. ``variance = quotedTotal - executedTotal``
    and ``variancePercent`` is relative to the quoted total.
    """

    quote_id: UUID
    quoted_total: float
    executed_total: float
    variance: float
    variance_percent: float
    items: list[ComparisonItem]


# === 견적 양식 (Quote template) 스키마 ===


class QuoteTemplateResponse(ApiModel):
    """견적 양식 응답 스키마."""

    id: UUID
    company_id: UUID
    name: str
    header_text: str = ""
    footer_text: str = ""
    terms_text: str = ""
    primary_color: str
    logo_url: str | None = None
    is_default: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuoteTemplateCreate(ApiModel):
    """견적 양식 생성/수정 요청 스키마.

    Attributes:
        name: 양식 이름 (Required, max 100)
        header_text: 머리글 (Max 500)
        footer_text: 바닥글 (Max 500)
        terms_text: 약관 (Max 2000)
        primary_color: 주 색상 (#RRGGBB, defaults to #78716c)
        is_default: 기본 양식 여부 (Clears the flag on the other templates)
    """

    name: str
    header_text: str = ""
    footer_text: str = ""
    terms_text: str = ""
    primary_color: str = "#78716c"
    logo_url: str | None = None
    is_default: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        check_required(value, "Nome", 100)
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("header_text", "footer_text")
    @classmethod
    def validate_short_text(cls, value: str) -> str:
        if len(value) > 500:
            raise ValueError("Texto deve ter no máximo 500 caracteres")
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("terms_text")
    @classmethod
    def validate_terms(cls, value: str) -> str:
        if len(value) > 2000:
            raise ValueError("Termos devem ter no máximo 2000 caracteres")
        check_no_script(value)
        return sanitize_text(value)

    @field_validator("primary_color", mode="before")
    @classmethod
    def validate_color(cls, value: str | None) -> str:
        if not value:
            return "#78716c"
        return check_hex_color(value)

    @field_validator("logo_url", mode="before")
    @classmethod
    def validate_logo_url(cls, value: object) -> object:
        value = _empty_to_none(value)
        if isinstance(value, str):
            check_no_script(value)
        return value


class QuoteTemplateUpdate(QuoteTemplateCreate):
    """견적 양식 수정 요청 — 생성과 동일한 규칙."""
