"""FastAPI 의존성 주입 모듈 — 설정, 작업 단위, 인증 및 관리자 검사.

FastAPI dependency injection module — Settings, the per-request unit of
work, authentication and the administrator gate.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 저장소에서 사용자를 조회
       (User is fetched from storage using payload "sub" field)

Admin Flow (require_admin):
    1. get_current_user로 사용자 인증 (User authenticated via get_current_user)
    2. 사용자 이메일이 ADMIN_EMAIL과 같은지 확인 (Email compared to ADMIN_EMAIL)
    3. 다르면 403 Forbidden 반환 (Returns 403 otherwise)
"""

from typing import Annotated, AsyncIterator
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import Settings
from app.models.user import User
from app.repositories.interfaces import Storage
from app.services.container import Services
from app.utils.audit import ClientInfo
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더 누락 시 직접 401 응답
# (Extracts the bearer token; a missing header is answered with our own 401)
security: HTTPBearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> Services:
    return request.app.state.services


async def get_storage(request: Request) -> AsyncIterator[Storage]:
    """요청 단위 작업 단위를 엽니다.

    Open the per-request unit of work. Routers commit explicitly; anything
    left uncommitted when the request fails is rolled back.
    """
    async with request.app.state.storage_factory() as storage:
        yield storage


def get_client_info(request: Request) -> ClientInfo:
    """감사 로그용 클라이언트 정보 — Request id, client IP and user agent."""
    return ClientInfo(
        request_id=getattr(request.state, "request_id", ""),
        ip=request.client.host if request.client else "",
        user_agent=request.headers.get("user-agent", ""),
    )


SettingsDep = Annotated[Settings, Depends(get_settings)]
ServicesDep = Annotated[Services, Depends(get_services)]
StorageDep = Annotated[Storage, Depends(get_storage)]
ClientDep = Annotated[ClientInfo, Depends(get_client_info)]


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    storage: StorageDep,
    settings: SettingsDep,
) -> User:
    """JWT 액세스 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the access token from the Authorization header and return the
    authenticated user.

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료, 사용자 없음
                           (Missing, invalid or expired token; unknown user)
    """
    if credentials is None:
        raise UnauthorizedError("Token nao fornecido", "MISSING_TOKEN")
    try:
        payload: dict = decode_token(credentials.credentials, settings)
        # 토큰 타입 검증 — Only access tokens authenticate requests
        if payload.get("type") != "access":
            raise UnauthorizedError("Tipo de token invalido", "INVALID_TOKEN")
        user_id: UUID = UUID(str(payload["sub"]))
    except UnauthorizedError:
        raise
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expirado", "TOKEN_EXPIRED")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Token invalido", "INVALID_TOKEN")

    user: User | None = await storage.users.get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("Usuario nao encontrado", "INVALID_TOKEN")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(current_user: CurrentUser, settings: SettingsDep) -> User:
    """관리자 이메일 계정만 허용합니다.

    Allow only the account whose email equals ``ADMIN_EMAIL``. An empty
    ``ADMIN_EMAIL`` disables the admin area.
    """
    admin_email: str = settings.ADMIN_EMAIL.strip().lower()
    if not admin_email or current_user.email.lower() != admin_email:
        raise ForbiddenError("Acesso restrito ao administrador", "ADMIN_ONLY")
    return current_user


AdminUser = Annotated[User, Depends(require_admin)]
