"""요청 컨텍스트 미들웨어 — 요청 ID, 보안 헤더, 요청 타임아웃.

Request context middleware. Assigns ``X-Request-ID`` (an incoming value is
kept), applies the security headers and bounds every request by
``REQUEST_TIMEOUT_SECONDS``; an expired request is answered with
504 ``REQUEST_TIMEOUT``.
"""

import asyncio
import logging
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import Settings
from app.utils.exceptions import error_body

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER: str = "X-Request-ID"

# 공통 보안 헤더 — Headers set on every response
_SECURITY_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

_CSP_PRODUCTION: str = "default-src 'self'; frame-ancestors 'none'; base-uri 'self'; form-action 'self'"
# /docs 화면을 위해 개발 환경에서는 CDN 스크립트 허용 — Swagger UI assets in development
_CSP_DEVELOPMENT: str = (
    "default-src 'self'; script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; img-src 'self' data: https:"
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """요청 ID 부여, 보안 헤더 설정, 타임아웃 적용.

    Middleware handling the request id, security headers and the
    per-request timeout.
    """

    def __init__(self, app: Any, settings: Settings) -> None:
        super().__init__(app)
        self.timeout: float = settings.REQUEST_TIMEOUT_SECONDS
        self.production: bool = settings.ENVIRONMENT == "production"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id: str = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            async with asyncio.timeout(self.timeout):
                response: Response = await call_next(request)
        except TimeoutError:
            logger.error("Request timed out after %.1fs: %s %s", self.timeout, request.method, request.url.path)
            response = JSONResponse(
                status_code=504,
                content=error_body("REQUEST_TIMEOUT", "Tempo limite da requisicao excedido", request_id),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        for name, value in _SECURITY_HEADERS.items():
            response.headers[name] = value
        if self.production:
            response.headers["Content-Security-Policy"] = _CSP_PRODUCTION
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        else:
            response.headers["Content-Security-Policy"] = _CSP_DEVELOPMENT
        return response
