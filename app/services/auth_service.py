"""인증 서비스 — 회원가입, 로그인, 토큰 갱신/폐기, 비밀번호 재설정.

Auth Service — Business logic for registration, login, refresh token
rotation with reuse detection, logout, password reset and the expired
token sweep.

Refresh tokens are opaque random values; only their SHA-256 hash is
stored. Presenting a token that was already rotated away (revoked) is
treated as theft: every live session of the owner is revoked.
"""

import logging

import jwt

from app.config import Settings
from app.models.token import PasswordResetToken, RefreshToken
from app.models.user import User
from app.repositories.interfaces import Storage
from app.schemas.auth import LoginRequest, RegisterRequest, TokenPairResponse
from app.services.email_service import EmailService
from app.utils.audit import ClientInfo, log_security_event
from app.utils.dates import as_utc, utc_now
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    InternalError,
    UnauthorizedError,
)
from app.utils.jwt import create_access_token
from app.utils.password import hash_password, verify_password
from app.utils.tokens import generate_secure_token, hash_token

logger = logging.getLogger(__name__)

# 응답 메시지 — Client-facing messages
INVALID_CREDENTIALS: str = "Credenciais invalidas"
INVALID_TOKEN: str = "Token invalido ou expirado"
REVOKED_TOKEN: str = "Token de refresh foi revogado. Por seguranca, faca login novamente."
EXPIRED_TOKEN: str = "Token de refresh expirado"


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.

    Attributes:
        settings: 애플리케이션 설정 (Application settings, token lifetimes)
        email: 이메일 서비스 (Email service used by the forgot-password flow)
    """

    def __init__(self, settings: Settings, email: EmailService) -> None:
        self.settings: Settings = settings
        self.email: EmailService = email

    # === 토큰 발급 (Token issuance) ===

    def issue_access_token(self, user: User) -> str:
        """액세스 토큰을 발급합니다.

        Sign an access token for ``user``. Signing failures surface as
        500 TOKEN_GENERATION_FAILED.
        """
        try:
            return create_access_token({"sub": str(user.id), "email": user.email}, self.settings)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.error("Failed to sign access token for user %s: %s", user.id, exc)
            raise InternalError("Falha ao gerar token", "TOKEN_GENERATION_FAILED") from exc

    async def issue_refresh_token(self, storage: Storage, user: User, client: ClientInfo) -> str:
        """리프레시 토큰을 발급하고 해시만 저장합니다.

        Create a refresh token, store its hash with the client metadata and
        return the plaintext once.

        Args:
            storage: 작업 단위 (Unit of work)
            user: 토큰 소유자 (Token owner)
            client: 요청 클라이언트 정보 (Requesting client)

        Returns:
            str: 평문 리프레시 토큰 (Plaintext refresh token, 64 hex chars)
        """
        token: str = generate_secure_token()
        await storage.refresh_tokens.create({
            "user_id": user.id,
            "token_hash": hash_token(token),
            "expires_at": utc_now() + self.settings.refresh_token_ttl,
            "ip_address": client.ip or None,
            "user_agent": client.user_agent or None,
        })
        logger.info("[SECURITY] REFRESH_TOKEN_CREATED | userId=%s | ip=%s", user.id, client.ip)
        return token

    async def issue_token_pair(self, storage: Storage, user: User, client: ClientInfo) -> TokenPairResponse:
        access_token: str = self.issue_access_token(user)
        refresh_token: str = await self.issue_refresh_token(storage, user, client)
        return TokenPairResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self.settings.access_token_ttl.total_seconds()),
        )

    # === 회원가입 / 로그인 (Register / Login) ===

    async def register(
        self,
        storage: Storage,
        data: RegisterRequest,
        client: ClientInfo,
    ) -> tuple[User, TokenPairResponse]:
        """새 사용자를 등록하고 토큰 쌍을 발급합니다.

        Register a new user and issue a token pair.

        Args:
            storage: 작업 단위 (Unit of work)
            data: 검증된 가입 요청 (Validated registration request)
            client: 요청 클라이언트 정보 (Requesting client)

        Returns:
            tuple[User, TokenPairResponse]: (사용자, 토큰 쌍) (User, token pair)

        Raises:
            DuplicateError: 이미 등록된 이메일 (Email already registered)
        """
        if await storage.users.get_by_email(data.email) is not None:
            log_security_event("REGISTER_FAILED", client, data.email, "email_exists")
            raise DuplicateError("Email ja cadastrado", "EMAIL_ALREADY_EXISTS")

        user: User = await storage.users.create({
            "name": data.name,
            "email": data.email,
            "password_hash": hash_password(data.password),
        })
        try:
            tokens: TokenPairResponse = await self.issue_token_pair(storage, user, client)
        except InternalError:
            log_security_event("REGISTER_FAILED", client, data.email, "token_error")
            raise
        log_security_event("REGISTER_SUCCESS", client, data.email, "success")
        return user, tokens

    async def login(
        self,
        storage: Storage,
        data: LoginRequest,
        client: ClientInfo,
    ) -> tuple[User, TokenPairResponse]:
        """이메일/비밀번호로 로그인합니다.

        Authenticate with email and password. Unknown emails and wrong
        passwords produce the same 401 INVALID_CREDENTIALS response.

        Raises:
            UnauthorizedError: 자격 증명 불일치 (Invalid credentials)
        """
        user: User | None = await storage.users.get_by_email(data.email)
        if user is None:
            log_security_event("LOGIN_FAILED", client, data.email, "user_not_found")
            raise UnauthorizedError(INVALID_CREDENTIALS, "INVALID_CREDENTIALS")
        if not verify_password(data.password, user.password_hash):
            log_security_event("LOGIN_FAILED", client, data.email, "invalid_password")
            raise UnauthorizedError(INVALID_CREDENTIALS, "INVALID_CREDENTIALS")

        try:
            tokens: TokenPairResponse = await self.issue_token_pair(storage, user, client)
        except InternalError:
            log_security_event("LOGIN_FAILED", client, data.email, "token_error")
            raise
        log_security_event("LOGIN_SUCCESS", client, data.email, "success")
        return user, tokens

    # === 토큰 갱신 (Refresh with rotation) ===

    async def refresh(self, storage: Storage, refresh_token: str, client: ClientInfo) -> TokenPairResponse:
        """리프레시 토큰을 회전시켜 새 토큰 쌍을 발급합니다.

        Rotate a refresh token:

        1. Unknown token: 401 INVALID_TOKEN.
        2. Revoked token (reuse): revoke every live token of the owner,
           commit, then 401 INVALID_TOKEN.
        3. Expired token: mark revoked, commit, then 401 INVALID_TOKEN.
        4. Otherwise issue and commit a new pair, then revoke the presented
           token. A failed revoke is rolled back and logged, and the new
           pair is still returned.

        Args:
            storage: 작업 단위 (Unit of work)
            refresh_token: 평문 리프레시 토큰 (Plaintext refresh token)
            client: 요청 클라이언트 정보 (Requesting client)

        Returns:
            TokenPairResponse: 새 토큰 쌍 (New token pair)

        Raises:
            BadRequestError: 토큰 누락 (Empty token)
            UnauthorizedError: 사용할 수 없는 토큰 (Unusable token)
        """
        if not refresh_token:
            raise BadRequestError("Token de refresh e obrigatorio")

        stored: RefreshToken | None = await storage.refresh_tokens.get_by_hash(hash_token(refresh_token))
        if stored is None:
            log_security_event("REFRESH_FAILED", client, "", "token_not_found")
            raise UnauthorizedError(INVALID_TOKEN, "INVALID_TOKEN")

        now = utc_now()
        if stored.is_revoked:
            # 재사용 감지 — 소유자의 모든 세션 폐기 후 커밋
            # Reuse detected: revoke every session of the owner and persist it
            revoked: int = await storage.refresh_tokens.revoke_all_for_user(stored.user_id, now)
            await storage.commit()
            log_security_event(
                "REFRESH_REUSE_DETECTED", client, "", f"user={stored.user_id} revoked={revoked}"
            )
            raise UnauthorizedError(REVOKED_TOKEN, "INVALID_TOKEN")

        if now > as_utc(stored.expires_at):
            await storage.refresh_tokens.revoke(stored.id, now)
            await storage.commit()
            log_security_event("REFRESH_FAILED", client, "", "token_expired")
            raise UnauthorizedError(EXPIRED_TOKEN, "INVALID_TOKEN")

        user: User | None = await storage.users.get_by_id(stored.user_id)
        if user is None:
            log_security_event("REFRESH_FAILED", client, "", "user_not_found")
            raise UnauthorizedError(INVALID_TOKEN, "INVALID_TOKEN")

        tokens: TokenPairResponse = await self.issue_token_pair(storage, user, client)
        email: str = user.email
        token_id = stored.id
        # 새 토큰 쌍을 먼저 저장 — The new pair is persisted before the revoke
        await storage.commit()
        try:
            await storage.refresh_tokens.revoke(token_id, now)
            await storage.commit()
        except Exception as exc:
            # 실패한 작업 단위 복구 — Roll back so the session stays usable
            await storage.rollback()
            logger.warning("Failed to revoke rotated refresh token %s: %s", token_id, exc)

        log_security_event("REFRESH_SUCCESS", client, email, "success")
        return tokens

    # === 로그아웃 (Logout) ===

    async def logout(self, storage: Storage, refresh_token: str, client: ClientInfo) -> None:
        """리프레시 토큰을 폐기합니다 — 유효한 경우에만, 항상 성공 응답.

        Revoke the token if it is currently live. Unknown, revoked or
        expired tokens are ignored silently.
        """
        if refresh_token:
            try:
                await storage.refresh_tokens.revoke_live_by_hash(hash_token(refresh_token), utc_now())
            except Exception as exc:
                await storage.rollback()
                logger.warning("Failed to revoke refresh token on logout: %s", exc)
        log_security_event("LOGOUT_SUCCESS", client, "", "success")

    async def logout_all(self, storage: Storage, user: User, client: ClientInfo) -> int:
        """사용자의 모든 유효 리프레시 토큰을 폐기합니다.

        Revoke every live refresh token of ``user``.

        Returns:
            int: 폐기된 토큰 수 (Number of revoked tokens)
        """
        count: int = await storage.refresh_tokens.revoke_all_for_user(user.id, utc_now())
        logger.info("[SECURITY] TOKENS_REVOKED | userId=%s | count=%d", user.id, count)
        log_security_event("LOGOUT_ALL_SUCCESS", client, user.email, f"revoked={count}")
        return count

    # === 비밀번호 재설정 (Password reset) ===

    async def forgot_password(self, storage: Storage, email: str, client: ClientInfo) -> None:
        """비밀번호 재설정 메일을 발송합니다 — 가입 여부와 무관하게 동일 응답.

        Issue a reset token and email the link when the account exists.
        The caller always answers with the same message, so nothing here
        reveals whether the email is registered. The token is committed
        before the email goes out so the link is valid on arrival.
        """
        user: User | None = await storage.users.get_by_email(email)
        if user is None:
            log_security_event("FORGOT_PASSWORD", client, email, "user_not_found")
            return

        token: str = generate_secure_token()
        await storage.reset_tokens.delete_for_user(user.id)
        await storage.reset_tokens.create({
            "user_id": user.id,
            "token_hash": hash_token(token),
            "expires_at": utc_now() + self.settings.password_reset_ttl,
        })
        await storage.commit()

        try:
            sent: bool = await self.email.send_password_reset(user.email, user.name, token)
        except Exception as exc:
            logger.error("Failed to send password reset email to %s: %s", user.email, exc)
            sent = False
        log_security_event("FORGOT_PASSWORD", client, email, "email_sent" if sent else "email_not_sent")

    async def reset_password(
        self,
        storage: Storage,
        token: str,
        new_password: str,
        client: ClientInfo,
    ) -> None:
        """재설정 토큰으로 비밀번호를 변경합니다.

        Reset the password with a single-use token, then revoke every refresh
        token of the user.

        Raises:
            BadRequestError: 토큰 누락, 미존재, 사용됨 또는 만료
                             (Missing, unknown, used or expired token)
        """
        if not token:
            raise BadRequestError("Token e obrigatorio")

        stored: PasswordResetToken | None = await storage.reset_tokens.get_by_hash(hash_token(token))
        if stored is None or stored.used or utc_now() >= as_utc(stored.expires_at):
            log_security_event("RESET_PASSWORD_FAILED", client, "", "invalid_token")
            raise BadRequestError(INVALID_TOKEN, "INVALID_TOKEN")

        user: User | None = await storage.users.update(
            stored.user_id, {"password_hash": hash_password(new_password)}
        )
        if user is None:
            log_security_event("RESET_PASSWORD_FAILED", client, "", "user_not_found")
            raise BadRequestError(INVALID_TOKEN, "INVALID_TOKEN")

        await storage.reset_tokens.mark_used(stored.id)
        count: int = await storage.refresh_tokens.revoke_all_for_user(user.id, utc_now())
        logger.info("[SECURITY] TOKENS_REVOKED | userId=%s | count=%d", user.id, count)
        log_security_event("RESET_PASSWORD", client, user.email, "success")

    # === 정리 (Sweep) ===

    async def cleanup_tokens(self, storage: Storage) -> tuple[int, int]:
        """만료/폐기된 토큰을 삭제합니다.

        Delete expired refresh tokens, revoked ones past the audit retention
        window, and used or expired reset tokens.

        Returns:
            tuple[int, int]: (삭제된 리프레시 토큰 수, 삭제된 재설정 토큰 수)
                             (Deleted refresh tokens, deleted reset tokens)
        """
        now = utc_now()
        refresh_deleted: int = await storage.refresh_tokens.delete_stale(
            now, now - self.settings.revoked_token_retention
        )
        reset_deleted: int = await storage.reset_tokens.delete_stale(now)
        logger.info("[SECURITY] CLEANUP_TOKENS | deleted=%d", refresh_deleted)
        return refresh_deleted, reset_deleted
