"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and router
registration. ``create_app(settings)`` builds a fully wired application;
the module-level ``app`` is what uvicorn serves:

    uvicorn app.main:app --host 0.0.0.0 --port 8080
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.admin import admin_router
from app.api.app import app_router
from app.config import Settings, get_settings
from app.database import create_engine, create_mongo_client, create_session_factory
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.rate_limit import configure_limiter, rate_limit_exceeded_handler
from app.middleware.request_context import RequestContextMiddleware
from app.repositories.mongo import MongoStorageFactory, ensure_indexes
from app.repositories.storage import SqlStorageFactory
from app.services.container import build_services
from app.utils.exceptions import AppError, DatabaseError, ValidationFailedError, error_body

logger = logging.getLogger(__name__)

# HTTP 상태별 기본 오류 코드 — Default error codes for framework-raised errors
_STATUS_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Pydantic 오류를 {field, message} 목록으로 변환합니다.

    Flatten pydantic errors into ``{"field", "message"}`` pairs. The field
    is the last location element (``body.email`` → ``email``).
    """
    errors: list[dict[str, str]] = []
    for error in exc.errors():
        location: tuple = tuple(error.get("loc", ()))
        field: str = str(location[-1]) if location else ""
        message: str = str(error.get("msg", "Valor invalido")).removeprefix("Value error, ")
        errors.append({"field": field, "message": message})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """공통 오류 본문 ``{detail, code, requestId}``을 사용하는 예외 처리기 등록.

    Register handlers rendering every error as
    ``{"detail", "code", "requestId"}`` (plus ``errors`` for validation).
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        content: dict[str, Any] = error_body(exc.code, exc.detail, _request_id(request))
        if isinstance(exc, ValidationFailedError):
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code: str = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(code, exc.detail, _request_id(request)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        content: dict[str, Any] = error_body("VALIDATION_FAILED", "Dados invalidos", _request_id(request))
        content["errors"] = _validation_errors(exc)
        return JSONResponse(status_code=400, content=content)

    async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # 내부 오류 내용은 로그에만 기록 — Internal detail goes to the log only
        route = request.scope.get("route")
        wrapped = DatabaseError(f"{request.method} {getattr(route, 'path', request.url.path)}")
        logger.error(
            "Database error during %s (requestId=%s): %s",
            wrapped.operation, _request_id(request), exc, exc_info=exc,
        )
        return JSONResponse(
            status_code=wrapped.status_code,
            content=error_body(wrapped.code, wrapped.detail, _request_id(request)),
        )

    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(PyMongoError, storage_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def create_app(settings: Settings | None = None) -> FastAPI:
    """설정으로 애플리케이션을 조립합니다.

    Build the application: storage backend, services, middleware, exception
    handlers and routers.

    Args:
        settings: 애플리케이션 설정, 없으면 환경 변수에서 생성
                  (Application settings; read from the environment when omitted)

    Returns:
        FastAPI: 구성된 애플리케이션 (Configured application)
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )

    http_client: httpx.AsyncClient = httpx.AsyncClient(follow_redirects=True)
    if settings.STORAGE_BACKEND == "mongo":
        mongo_client = create_mongo_client(settings)
        storage_factory: Any = MongoStorageFactory(mongo_client, settings.MONGO_DATABASE)
    else:
        mongo_client = None
        engine = create_engine(settings)
        storage_factory = SqlStorageFactory(create_session_factory(engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if isinstance(storage_factory, MongoStorageFactory):
            await ensure_indexes(storage_factory.db)
        logger.info("%s started (storage=%s, environment=%s)", settings.APP_NAME, settings.STORAGE_BACKEND, settings.ENVIRONMENT)
        yield
        await http_client.aclose()
        if mongo_client is not None:
            await mongo_client.close()
        else:
            await engine.dispose()

    app: FastAPI = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage_factory = storage_factory
    app.state.http_client = http_client
    app.state.services = build_services(settings, http_client)
    app.state.limiter = configure_limiter(settings)

    register_exception_handlers(app)

    # 미들웨어 — 마지막에 등록한 것이 가장 바깥 (Last added runs outermost)
    app.add_middleware(SlowAPIMiddleware)
    # Axiom API 로깅 — Axiom request/response logging
    app.add_middleware(AxiomLoggingMiddleware, settings=settings)
    app.add_middleware(RequestContextMiddleware, settings=settings)
    # CORS 미들웨어 — Cross-Origin Resource Sharing middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """서버 상태 확인 엔드포인트.

        Health check endpoint for load balancers and monitoring.
        """
        return {"status": "ok", "service": "mypila-backend"}

    app.include_router(app_router, prefix="/api")
    app.include_router(admin_router, prefix="/api/admin")
    return app


app: FastAPI = create_app()
