"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns.
Each exception carries a machine-readable ``code`` that the application
error handler renders next to the human-readable ``detail``.

Usage:
    from app.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Empresa nao encontrada", code="COMPANY_NOT_FOUND")
    raise DuplicateError("Email ja cadastrado", code="EMAIL_ALREADY_EXISTS")
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """애플리케이션 오류 기반 클래스 — 상태 코드와 오류 코드를 함께 보관.

    Base class for application errors. Adds a machine-readable error code
    to FastAPI's HTTPException.

    Args:
        status_code: HTTP 상태 코드 (HTTP status code)
        detail: 오류 메시지 (Human-readable message)
        code: 오류 코드 (Machine-readable error code)
    """

    def __init__(self, status_code: int, detail: str, code: str) -> None:
        super().__init__(status_code=status_code, detail=detail)
        self.code: str = code


class NotFoundError(AppError):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (company, quote, template, etc.) does not exist.
    """

    def __init__(self, detail: str = "Recurso nao encontrado", code: str = "NOT_FOUND") -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, detail, code)


class DuplicateError(AppError):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness
    constraint (e.g. a second account with the same email).
    """

    def __init__(self, detail: str = "Recurso ja existe", code: str = "CONFLICT") -> None:
        super().__init__(status.HTTP_409_CONFLICT, detail, code)


class ForbiddenError(AppError):
    """403 Forbidden 예외 — 소유권 불일치 또는 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user does not own the referenced company,
    or is not the administrator.
    """

    def __init__(self, detail: str = "Acesso negado", code: str = "FORBIDDEN") -> None:
        super().__init__(status.HTTP_403_FORBIDDEN, detail, code)


class UnauthorizedError(AppError):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired
    (e.g. missing JWT, invalid credentials, unusable refresh token).
    """

    def __init__(self, detail: str = "Nao autorizado", code: str = "UNAUTHORIZED") -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, code)


class BadRequestError(AppError):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation catches
    (e.g. editing an executed quote, unusable reset token).
    """

    def __init__(self, detail: str = "Requisicao invalida", code: str = "BAD_REQUEST") -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, code)


class ValidationFailedError(AppError):
    """400 검증 실패 예외 — 필드 단위 오류 목록을 포함.

    400 validation exception carrying a list of field-level errors,
    rendered as ``{"errors": [{"field": ..., "message": ...}]}``.

    Args:
        errors: 필드 오류 목록 (List of {"field", "message"} dicts)
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, "Dados invalidos", "VALIDATION_FAILED")
        self.errors: list[dict[str, str]] = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailedError":
        return cls([{"field": field, "message": message}])


class DatabaseError(AppError):
    """500 데이터베이스 오류 — 정적 작업 라벨만 노출.

    500 database error. Only a static operation label is exposed to the
    client; the underlying exception is logged by the error handler.

    Args:
        operation: 실패한 작업 라벨 (Static label of the failed operation)
    """

    def __init__(self, operation: str) -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro no banco de dados", "DATABASE_ERROR")
        self.operation: str = operation


class InternalError(AppError):
    """500 내부 오류 — 토큰 서명 실패 등.

    500 internal error for unexpected failures such as token signing.
    """

    def __init__(self, detail: str = "Erro interno do servidor", code: str = "INTERNAL_ERROR") -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, code)


class UpstreamError(AppError):
    """502 외부 서비스 오류 — CNPJ 조회 등 외부 API 실패.

    502 error raised when an external API (e.g. the CNPJ registry) fails.
    """

    def __init__(self, detail: str = "Falha ao consultar servico externo", code: str = "UPSTREAM_ERROR") -> None:
        super().__init__(status.HTTP_502_BAD_GATEWAY, detail, code)


def error_body(code: str, detail: Any, request_id: str | None) -> dict[str, Any]:
    """오류 응답 본문을 생성합니다.

    Build the JSON error body shared by every error handler.
    """
    return {"detail": detail, "code": code, "requestId": request_id}
