"""인증 토큰 모델 — 리프레시 토큰과 비밀번호 재설정 토큰.

Authentication token models — Refresh tokens and password reset tokens.
Only the SHA-256 hash of an issued token is stored; the plaintext is
returned to the caller once and never persisted.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class RefreshToken(Base):
    """리프레시 토큰 테이블.

    Refresh token table. A token is live while it is not revoked and not
    expired. Rows are only ever mutated to set the revoked flag, and are
    deleted by the maintenance sweep.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 소유 사용자 ID (Owner user UUID)
        token_hash: 토큰 SHA-256 해시 (Hex SHA-256 of the opaque token)
        expires_at: 만료 일시 (Expiration timestamp)
        is_revoked: 폐기 여부 (Revoked flag)
        revoked_at: 폐기 일시 (Revocation timestamp)
        ip_address: 발급 요청 IP (Issuing client IP, audit only)
        user_agent: 발급 요청 UA (Issuing user agent, audit only)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


class PasswordResetToken(Base):
    """비밀번호 재설정 토큰 테이블.

    Single-use password reset token. At most one row per user exists because
    issuing a new token deletes the previous ones.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 대상 사용자 ID (Target user UUID)
        token_hash: 토큰 SHA-256 해시 (Hex SHA-256 of the opaque token)
        expires_at: 만료 일시 (Expiration timestamp, 1 hour after issue)
        used: 사용 여부 (Set once the password has been reset)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "password_reset_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
