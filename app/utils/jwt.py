"""JWT 액세스 토큰 생성 및 검증 유틸리티 모듈.

JWT access token creation and verification utility module.
Access tokens are stateless: nothing is stored server-side. Refresh tokens
are opaque random values (see app.utils.tokens), not JWTs.

JWT Payload Structure:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "email": "a@b.com",         # 사용자 이메일 (User email, used by the admin gate)
        "iat": 1234567800,          # 발급 시간 UNIX timestamp (Issued at)
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"            # 토큰 유형 (Token type discriminator)
    }
"""

from datetime import datetime, timezone
from typing import Any
import jwt

from app.config import Settings


def create_access_token(data: dict[str, Any], settings: Settings) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a signed JWT access token with the given payload data.
    Lifetime is Settings.access_token_ttl (30 minutes, longer in development).

    Args:
        data: JWT 페이로드 데이터. 일반적으로 {"sub": user_id, "email": email}
              (JWT payload data, typically user id and email)
        settings: 애플리케이션 설정 (Application settings holding the secret)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)

    Example:
        token = create_access_token({"sub": str(user.id), "email": user.email}, settings)
    """
    to_encode: dict[str, Any] = data.copy()
    # 발급/만료 시간 설정 — 현재 UTC 시간 기준 (Issue and expiry from current UTC)
    now: datetime = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + settings.access_token_ttl, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.
    Raises jwt.ExpiredSignatureError if the token has expired,
    and jwt.InvalidTokenError for any other validation failure.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)
        settings: 애플리케이션 설정 (Application settings holding the secret)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
