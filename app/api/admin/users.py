"""관리자 사용자 라우터 — 전체 사용자 조회/수정/삭제.

Admin User Router — List, update and delete any user account.
Deleting a user removes their companies (with everything under them)
and their tokens.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.deps import AdminUser, ServicesDep, StorageDep
from app.models.user import User
from app.schemas.admin import AdminUser as AdminUserRow
from app.schemas.admin import AdminUserUpdate
from app.schemas.auth import UserResponse
from app.schemas.base import MessageResponse
from app.utils.pagination import Page, build_page, parse_limit, parse_page

router: APIRouter = APIRouter()


@router.get("", response_model=Page[AdminUserRow])
async def list_users(
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
    search: Annotated[str, Query()] = "",
) -> dict:
    """사용자 목록 (이름/이메일 검색, 회사 수 포함).

    Paginated users matching ``search`` in name or email, newest first.
    """
    page_number: int = parse_page(page)
    page_size: int = parse_limit(limit)
    rows, total = await services.admin.list_users(storage, search.strip(), page_number, page_size)
    return build_page(rows, total, page_number, page_size)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
) -> User:
    """사용자 이름/이메일 수정 — Update a user's name and email."""
    user: User = await services.admin.update_user(storage, user_id, data)
    await storage.commit()
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    admin: AdminUser,
    storage: StorageDep,
    services: ServicesDep,
) -> MessageResponse:
    """사용자와 소유 회사 전체, 토큰을 삭제합니다.

    Delete a user with all of their companies and tokens.
    """
    await services.admin.delete_user(storage, user_id)
    await storage.commit()
    return MessageResponse(message="Usuario excluido com sucesso")
