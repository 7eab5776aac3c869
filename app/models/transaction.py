"""거래 및 반복 규칙 SQLAlchemy ORM 모델 정의.

Transaction and recurring rule SQLAlchemy ORM model definitions.

Tables:
    - transactions: 월별 거래 (Monthly financial entries per company)
    - recurring: 반복 거래 규칙 (Rules materialised into monthly transactions)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Transaction(Base):
    """거래 모델 — 회사의 월별 수입/지출 항목.

    Transaction model — One monthly entry of a company.
    Month is stored as its Portuguese name ("Janeiro" … "Dezembro") or
    "Acumulado" for accumulated values.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        description: 설명 (Free-text description)
        amount: 금액 (Positive amount, two decimals)
        category: 카테고리 이름 또는 ID (Category name or category id as text)
        month: 월 이름 (Portuguese month name)
        year: 연도 (Year, 2000-2100)
        status: 상태 (PAGO = paid, ABERTO = open)
    """

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 회사 FK — Parent company (CASCADE: 회사 삭제 시 거래도 삭제)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    month: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    # 상태 — PAGO(지급 완료) 또는 ABERTO(미결)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="ABERTO")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class RecurringRule(Base):
    """반복 규칙 모델 — 매월 거래를 생성하는 규칙.

    Recurring rule model — Materialised into one open transaction per
    (description, month, year) when processed.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        description: 설명 (Description, also the dedup key)
        amount: 금액 (Amount of each generated transaction)
        category: 카테고리 (Category copied to generated transactions)
        day_of_month: 발생일 (Day of month, 1-31)
    """

    __tablename__ = "recurring"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
