"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
schema creation. The same classes double as the entity type returned by
the MongoDB repositories (as transient, session-less instances).

Modules:
    user: 사용자 (User accounts)
    token: 리프레시 토큰, 비밀번호 재설정 토큰 (Refresh and password reset tokens)
    company: 회사, 카테고리 (Company, Category)
    transaction: 거래, 반복 규칙 (Transaction, RecurringRule)
    quote: 견적 양식, 견적, 견적 항목 (QuoteTemplate, Quote, QuoteItem)
"""

from app.models.user import User
from app.models.token import PasswordResetToken, RefreshToken
from app.models.company import Category, Company
from app.models.transaction import RecurringRule, Transaction
from app.models.quote import Quote, QuoteItem, QuoteTemplate

__all__ = [
    "User",
    "RefreshToken", "PasswordResetToken",
    "Company", "Category",
    "Transaction", "RecurringRule",
    "QuoteTemplate", "Quote", "QuoteItem",
]
