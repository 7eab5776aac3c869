"""보안 감사 로그 헬퍼.

Security audit logging helpers. Every authentication event is written as a
single ``[SECURITY]`` line through the standard logging module so that the
lines can be grepped or shipped by the log collector.

Format:
    [SECURITY] LOGIN_FAILED | requestId=... | email=... | ip=... | ua=... | result=...
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger("app.security")


@dataclass(frozen=True)
class ClientInfo:
    """요청 클라이언트 정보 — 감사 로그와 토큰 발급 기록에 사용.

    Client metadata of the current request, used for audit lines and stored
    on issued refresh tokens.

    Attributes:
        request_id: 요청 ID (X-Request-ID)
        ip: 클라이언트 IP (Client IP address)
        user_agent: 클라이언트 UA (User-Agent header)
    """

    request_id: str = ""
    ip: str = ""
    user_agent: str = ""


def log_security_event(event: str, client: ClientInfo, email: str, result: str) -> None:
    """인증 관련 보안 이벤트를 기록합니다.

    Log one authentication event (REGISTER_SUCCESS, LOGIN_FAILED, ...).

    Args:
        event: 이벤트 이름 (Event name)
        client: 요청 클라이언트 정보 (Request client metadata)
        email: 관련 이메일, 없으면 빈 문자열 (Related email or "")
        result: 결과 설명 (Short outcome, e.g. "invalid_credentials")
    """
    logger.info(
        "[SECURITY] %s | requestId=%s | email=%s | ip=%s | ua=%s | result=%s",
        event,
        client.request_id,
        email,
        client.ip,
        client.user_agent,
        result,
    )
