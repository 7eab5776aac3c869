"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token refresh/rotation, logout, password reset,
and current user info. Email and password are never sanitised, only
validated; the display name is validated and then stripped of markup.
"""

from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from app.schemas.base import ApiModel
from app.utils.validation import (
    PASSWORD_MAX_LENGTH,
    check_email,
    check_no_script,
    check_no_sql_injection,
    check_password,
    check_required,
    sanitize_text,
)


class UserResponse(ApiModel):
    """사용자 정보 응답 스키마 — 비밀번호 해시는 포함하지 않음.

    Public user representation; the password hash is never serialised.
    """

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime | None = None


class RegisterRequest(ApiModel):
    """회원가입 요청 스키마.

    Registration request schema.

    Attributes:
        name: 표시 이름 (Display name, required, max 100)
        email: 이메일 (Email, trimmed and lower-cased)
        password: 비밀번호 (Plain text, 6-72 chars, bcrypt-hashed on server)
    """

    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        check_required(value, "Nome", 100)
        check_no_script(value)
        check_no_sql_injection(value)
        return sanitize_text(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password(value)


class LoginRequest(ApiModel):
    """로그인 요청 스키마.

    Login request schema. Email is normalised the same way as at registration.
    """

    email: str  # 이메일 — 소문자 정규화 (Lower-cased before lookup)
    password: str  # 비밀번호 — 평문, bcrypt 해시와 비교 (Compared to bcrypt hash)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Senha não pode ser vazio")
        if len(value) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"Senha deve ter no máximo {PASSWORD_MAX_LENGTH} caracteres")
        return value


class RefreshRequest(ApiModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Refresh and logout request schema. An empty token is accepted by the
    schema; the refresh flow rejects it with 400 and logout ignores it.

    Attributes:
        refresh_token: 불투명 리프레시 토큰 (Opaque refresh token)
    """

    refresh_token: str = ""


class TokenPairResponse(ApiModel):
    """토큰 쌍 응답 스키마.

    Token pair returned by the refresh endpoint.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived signed access token)
        refresh_token: 불투명 리프레시 토큰 (Opaque rotating refresh token)
        expires_in: 액세스 토큰 유효 기간(초) (Access token lifetime in seconds)
    """

    access_token: str
    refresh_token: str
    expires_in: int


class AuthResponse(TokenPairResponse):
    """회원가입/로그인 응답 — 토큰 쌍과 사용자 정보.

    Register/login response: token pair plus the user.
    """

    user: UserResponse


class MeResponse(ApiModel):
    """현재 사용자 응답 (GET /me) — {"user": {...}}."""

    user: UserResponse


class LogoutAllResponse(ApiModel):
    """전체 로그아웃 응답 — 폐기된 토큰 수 포함."""

    message: str
    tokens_revoked: int


class ForgotPasswordRequest(ApiModel):
    """비밀번호 찾기 요청 스키마."""

    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)


class ResetPasswordRequest(ApiModel):
    """비밀번호 재설정 요청 스키마.

    Attributes:
        token: 메일로 받은 재설정 토큰 (Reset token from the email link)
        new_password: 새 비밀번호 (New password, 6-72 chars)
    """

    token: str = ""
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return check_password(value)
