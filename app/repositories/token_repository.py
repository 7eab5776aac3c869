"""인증 토큰 레포지토리 — 리프레시 토큰 및 비밀번호 재설정 토큰.

Token Repositories — Refresh tokens and password reset tokens.
Tokens are only ever looked up by hash. Bulk revocation and the sweep
run as single UPDATE/DELETE statements, so they are atomic per statement.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.token import PasswordResetToken, RefreshToken
from app.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """리프레시 토큰 레포지토리.

    Refresh token repository. A token is live when it is not revoked and
    ``now < expires_at``; the revoke methods only touch live rows.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RefreshToken)

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """토큰 해시로 조회합니다 — Look a token up by its SHA-256 hash."""
        result = await self.db.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def revoke(self, token_id: UUID, now: datetime) -> bool:
        """단일 토큰을 폐기 처리합니다.

        Mark one token revoked.

        Returns:
            bool: 토큰 존재 여부 (Whether the token existed)
        """
        token: RefreshToken | None = await self.get_by_id(token_id)
        if token is None:
            return False
        token.is_revoked = True
        token.revoked_at = now
        await self.db.flush()
        return True

    async def revoke_live_by_hash(self, token_hash: str, now: datetime) -> bool:
        """해시가 일치하는 유효 토큰을 폐기합니다.

        Revoke the token with ``token_hash`` only if it is currently live.

        Returns:
            bool: 폐기 여부 (Whether a live token was revoked)
        """
        result = await self.db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == token_hash,
                RefreshToken.is_revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(is_revoked=True, revoked_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) > 0

    async def revoke_all_for_user(self, user_id: UUID, now: datetime) -> int:
        """사용자의 모든 유효 토큰을 폐기합니다.

        Revoke every live token of ``user_id``.

        Returns:
            int: 폐기된 토큰 수 (Number of revoked tokens)
        """
        result = await self.db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.is_revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(is_revoked=True, revoked_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def delete_stale(self, now: datetime, revoked_before: datetime) -> int:
        """만료되었거나 보존 기간이 지난 폐기 토큰을 삭제합니다.

        Delete tokens that are expired, or revoked and created before
        ``revoked_before`` (the audit retention window).
        """
        return await self.delete_where(
            or_(
                RefreshToken.expires_at < now,
                and_(RefreshToken.is_revoked.is_(True), RefreshToken.created_at < revoked_before),
            )
        )

    async def delete_for_user(self, user_id: UUID) -> int:
        return await self.delete_where(RefreshToken.user_id == user_id)


class PasswordResetRepository(BaseRepository[PasswordResetToken]):
    """비밀번호 재설정 토큰 레포지토리."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PasswordResetToken)

    async def get_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        result = await self.db.execute(
            select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def mark_used(self, token_id: UUID) -> None:
        """토큰을 사용 완료로 표시합니다 — Mark a reset token as used."""
        token: PasswordResetToken | None = await self.get_by_id(token_id)
        if token is not None:
            token.used = True
            await self.db.flush()

    async def delete_for_user(self, user_id: UUID) -> int:
        return await self.delete_where(PasswordResetToken.user_id == user_id)

    async def delete_stale(self, now: datetime) -> int:
        """사용되었거나 만료된 재설정 토큰을 삭제합니다.

        Delete reset tokens that are used or expired.
        """
        return await self.delete_where(
            or_(PasswordResetToken.used.is_(True), PasswordResetToken.expires_at < now)
        )
