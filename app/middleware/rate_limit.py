"""요청 속도 제한 (slowapi).

Rate limiting with slowapi. The limiter is module level so routes can be
decorated with ``@limiter.limit(auth_limit)``; the limit strings are read
from the Settings installed by ``configure_limiter`` at application start.

    - 전역 기본 제한: RATE_LIMIT_DEFAULT (e.g. 100/minute per IP)
    - 인증 경로 제한: RATE_LIMIT_AUTH (register/login/refresh/forgot/reset)
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.config import Settings
from app.utils.exceptions import error_body

# 현재 적용 중인 제한 값 — Active limit strings (replaced by configure_limiter)
_limits: dict[str, str] = {"default": "100/minute", "auth": "20/minute"}


def default_limit() -> str:
    return _limits["default"]


def auth_limit() -> str:
    return _limits["auth"]


limiter: Limiter = Limiter(key_func=get_remote_address, default_limits=[default_limit])


def configure_limiter(settings: Settings) -> Limiter:
    """설정값으로 제한 값과 활성화 여부를 적용합니다.

    Apply the configured limits; ``RATE_LIMIT_ENABLED=false`` turns the
    limiter off entirely.
    """
    _limits["default"] = settings.RATE_LIMIT_DEFAULT
    _limits["auth"] = settings.RATE_LIMIT_AUTH
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    return limiter


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 응답 — 공통 오류 본문 형식으로 반환."""
    return JSONResponse(
        status_code=429,
        content=error_body(
            "RATE_LIMITED",
            "Muitas requisicoes. Tente novamente mais tarde.",
            getattr(request.state, "request_id", None),
        ),
    )
