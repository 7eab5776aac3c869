"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 비밀번호 재설정.

Auth Router — Registration, login, refresh token rotation, logout, password
reset and current user endpoints. Credential endpoints carry the stricter
auth rate limit.
"""

from fastapi import APIRouter, Request

from app.api.deps import ClientDep, CurrentUser, ServicesDep, StorageDep
from app.middleware.rate_limit import auth_limit, limiter
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LogoutAllResponse,
    MeResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenPairResponse,
    UserResponse,
)
from app.schemas.base import MessageResponse

router: APIRouter = APIRouter()

# 비밀번호 찾기 응답 — 가입 여부와 무관하게 동일 (Same answer for every email)
FORGOT_PASSWORD_MESSAGE: str = "Se o email estiver cadastrado, voce recebera um link para redefinir sua senha"


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(auth_limit)
async def register(
    request: Request,
    data: RegisterRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> AuthResponse:
    """회원가입 — 사용자 생성 후 토큰 쌍 발급.

    Register a new account and sign it in.
    """
    user, tokens = await services.auth.register(storage, data, client)
    await storage.commit()
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_limit)
async def login(
    request: Request,
    data: LoginRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> AuthResponse:
    """로그인 — 이메일/비밀번호 확인 후 토큰 쌍 발급.

    Authenticate with email and password.
    """
    user, tokens = await services.auth.login(storage, data, client)
    await storage.commit()
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post("/refresh", response_model=TokenPairResponse)
@limiter.limit(auth_limit)
async def refresh_token(
    request: Request,
    data: RefreshRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> TokenPairResponse:
    """토큰 갱신 — 리프레시 토큰 회전.

    Rotate a refresh token into a new token pair.
    """
    result: TokenPairResponse = await services.auth.refresh(storage, data.refresh_token, client)
    await storage.commit()
    return result


@router.post("/logout", response_model=MessageResponse)
async def logout(
    data: RefreshRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> MessageResponse:
    """로그아웃 — 리프레시 토큰 폐기 (알 수 없는 토큰도 성공 응답).

    Revoke the presented refresh token. Always succeeds.
    """
    await services.auth.logout(storage, data.refresh_token, client)
    await storage.commit()
    return MessageResponse(message="Logout realizado com sucesso")


@router.post("/logout-all", response_model=LogoutAllResponse)
async def logout_all(
    current_user: CurrentUser,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> LogoutAllResponse:
    """모든 세션 로그아웃 — Revoke every live refresh token of the caller."""
    count: int = await services.auth.logout_all(storage, current_user, client)
    await storage.commit()
    return LogoutAllResponse(message="Logout realizado em todos os dispositivos", tokens_revoked=count)


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(auth_limit)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> MessageResponse:
    """비밀번호 찾기 — 재설정 링크 메일 발송.

    Email a password reset link when the account exists.
    """
    await services.auth.forgot_password(storage, data.email, client)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(auth_limit)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    storage: StorageDep,
    services: ServicesDep,
    client: ClientDep,
) -> MessageResponse:
    """비밀번호 재설정 — 토큰 확인 후 새 비밀번호 저장.

    Set a new password with a reset token.
    """
    await services.auth.reset_password(storage, data.token, data.new_password, client)
    await storage.commit()
    return MessageResponse(message="Senha redefinida com sucesso")


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUser) -> MeResponse:
    """현재 사용자 정보 조회 — Profile of the authenticated user."""
    return MeResponse(user=UserResponse.model_validate(current_user))
