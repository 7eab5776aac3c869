"""회사 및 카테고리 SQLAlchemy ORM 모델 정의.

Company and Category SQLAlchemy ORM model definitions.
Every financial record is scoped to a company, and every company belongs
to exactly one user.

Tables:
    - companies: 회사 (Companies owned by a user)
    - categories: 지출/수입 카테고리 (Expense/income categories per company)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Company(Base):
    """회사 모델 — 사용자가 관리하는 사업체.

    Company model — A business managed by a user.
    Optional registry fields (CNPJ, legal name, address) are filled in by
    the user or from a CNPJ lookup and are printed on quotes.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 소유 사용자 FK (Owner user foreign key)
        name: 회사명 (Company display name)
        cnpj: 사업자 등록번호 (Brazilian company registry number, optional)
        legal_name: 법인명 (Razão social, optional)
        trade_name: 상호 (Nome fantasia, optional)
        logo_url: 로고 URL 또는 data URL (Logo URL or data URL, optional)
    """

    __tablename__ = "companies"

    # 회사 고유 식별자 — Company unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소유 사용자 FK — Owner user (CASCADE: 사용자 삭제 시 회사도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 회사명 — Company display name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 등록 정보 — Registry details (모두 선택 사항, all optional)
    cnpj: Mapped[str | None] = mapped_column(String(18), nullable=True)
    legal_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    trade_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    address: Mapped[str | None] = mapped_column(String(300), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # 로고 — Logo URL (data URL 허용, data URLs allowed)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class Category(Base):
    """카테고리 모델 — 회사별 지출/수입 분류.

    Category model — Expense or income classification per company,
    with a display colour and an optional monthly budget.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        name: 카테고리명 (Category name, max 50)
        type: 유형 (EXPENSE | INCOME)
        color: 표시 색상 (#RRGGBB display colour)
        budget: 예산 (Budget, 0 when unset)
    """

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 회사 FK — Parent company (CASCADE: 회사 삭제 시 카테고리도 삭제)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    # 유형 — EXPENSE(지출) 또는 INCOME(수입)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="EXPENSE")
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#78716c")
    budget: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
