"""견적 관련 SQLAlchemy ORM 모델 정의.

Quote (orçamento) SQLAlchemy ORM model definitions.

Tables:
    - quote_templates: 견적서 양식 (Branding and legal text for PDF output)
    - quotes: 견적서 (Quotes with client data, discount and status)
    - quote_items: 견적 항목 (Line items of a quote)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class QuoteTemplate(Base):
    """견적서 양식 모델.

    Quote template model — Header/footer/terms text and primary colour used
    when rendering a quote to PDF. At most one template per company is the
    default.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        name: 양식 이름 (Template name)
        header_text: 머리글 (Subtitle printed under the company name)
        footer_text: 바닥글 (Footer line text)
        terms_text: 약관 (Terms and conditions block)
        primary_color: 주 색상 (#RRGGBB primary colour)
        logo_url: 로고 URL (Optional logo)
        is_default: 기본 양식 여부 (Default template flag)
    """

    __tablename__ = "quote_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    header_text: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    footer_text: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    terms_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#78716c")
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class Quote(Base):
    """견적서 모델.

    Quote model — Client data, computed totals and lifecycle status.
    Numbers follow ORC-<year>-<NNN> and are unique per company.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        number: 견적 번호 (Sequential number, e.g. ORC-2024-001)
        subtotal: 소계 (Sum of item totals)
        discount: 할인 값 (Discount value; percent or absolute)
        discount_type: 할인 유형 (PERCENT | VALUE)
        total: 합계 (Subtotal minus discount)
        status: 상태 (DRAFT | SENT | APPROVED | REJECTED | EXECUTED)
        valid_until: 유효 기한 (Validity date)
        template_id: 사용 양식 FK (Template used for PDF, SET NULL on delete)
    """

    __tablename__ = "quotes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    number: Mapped[str] = mapped_column(String(20), nullable=False)
    # 고객 정보 — Client details
    client_name: Mapped[str] = mapped_column(String(100), nullable=False)
    client_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    client_phone: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    client_document: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    client_address: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    client_city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    client_state: Mapped[str] = mapped_column(String(2), nullable=False, default="")
    client_zip_code: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    # 견적 내용 — Quote content
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount_type: Mapped[str] = mapped_column(String(10), nullable=False, default="VALUE")
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="DRAFT")
    valid_until: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # 양식 FK — Template (SET NULL: 양식 삭제 시 참조 해제)
    template_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("quote_templates.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("company_id", "number", name="uq_quote_company_number"),
    )


class QuoteItem(Base):
    """견적 항목 모델.

    Quote line item. total is always quantity × unit_price.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        quote_id: 소속 견적 FK (Parent quote foreign key)
        description: 항목 설명 (Item description)
        quantity: 수량 (Quantity, up to 4 decimals)
        unit_price: 단가 (Unit price)
        total: 항목 합계 (quantity × unit_price)
        category_id: 연결 카테고리 (Category used by the budget comparison)
        sort_order: 정렬 순서 (Display order)
    """

    __tablename__ = "quote_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quote_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total: Mapped[float] = mapped_column(Float, nullable=False)
    category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
