"""불투명 토큰 생성 및 해싱 유틸리티.

Opaque token generation and hashing utilities.
Refresh and password reset tokens are 256 bits of secure randomness,
hex-encoded. Only their SHA-256 digest is ever persisted.
"""

import hashlib
import secrets


def generate_secure_token() -> str:
    """32바이트 무작위 토큰을 16진수 문자열로 생성합니다.

    Return 32 cryptographically secure random bytes, hex-encoded (64 chars).
    """
    return secrets.token_bytes(32).hex()


def hash_token(token: str) -> str:
    """토큰의 SHA-256 해시(16진수)를 반환합니다.

    Return the hex SHA-256 digest of a token; this is the stored lookup key.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
