"""회사/카테고리 서비스 — 회사 CRUD, 기본 카테고리 생성, 연쇄 삭제.

Company and Category Service — Company CRUD for the owner, default
categories for new companies, and the company cascade delete.
"""

import logging
from typing import Any
from uuid import UUID

from app.models.company import Category, Company
from app.repositories.interfaces import Storage
from app.schemas.company import CategoryCreate, CategoryUpdate, CompanyCreate, CompanyUpdate
from app.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# 새 회사의 기본 카테고리 — Categories seeded for every new company
DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {"name": "Salario", "type": "INCOME", "color": "#22c55e", "budget": 0.0},
    {"name": "Alimentacao", "type": "EXPENSE", "color": "#f59e0b", "budget": 1000.0},
    {"name": "Transporte", "type": "EXPENSE", "color": "#3b82f6", "budget": 500.0},
    {"name": "Moradia", "type": "EXPENSE", "color": "#8b5cf6", "budget": 2000.0},
    {"name": "Lazer", "type": "EXPENSE", "color": "#ec4899", "budget": 300.0},
]


class CompanyService:
    """회사 관련 비즈니스 로직을 처리하는 서비스.

    Service handling company business logic.
    """

    async def list_companies(self, storage: Storage, user_id: UUID) -> list[Company]:
        """사용자의 회사 목록 (이름순) — The user's companies ordered by name."""
        return await storage.companies.list_by_user(user_id)

    async def create_company(self, storage: Storage, user_id: UUID, data: CompanyCreate) -> Company:
        """회사를 생성하고 기본 카테고리를 추가합니다.

        Create a company owned by ``user_id`` and seed its default
        categories.

        Args:
            storage: 작업 단위 (Unit of work)
            user_id: 소유자 ID (Owner user UUID)
            data: 회사 생성 요청 (Company create request)

        Returns:
            Company: 생성된 회사 (The created company)
        """
        company: Company = await storage.companies.create({"user_id": user_id, **data.model_dump()})
        await self.seed_default_categories(storage, company.id)
        logger.info("Company created: %s (user=%s)", company.id, user_id)
        return company

    async def seed_default_categories(self, storage: Storage, company_id: UUID) -> list[Category]:
        return await storage.categories.create_many(
            [{"company_id": company_id, **category} for category in DEFAULT_CATEGORIES]
        )

    async def update_company(self, storage: Storage, company: Company, data: CompanyUpdate) -> Company:
        """회사 정보를 수정합니다 — 이름은 필수, 나머지는 전달된 필드만.

        Update a company. ``name`` is always applied; registry fields only
        when present in the request.
        """
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        fields["name"] = data.name
        updated: Company | None = await storage.companies.update(company.id, fields)
        if updated is None:
            raise NotFoundError("Empresa nao encontrada", "COMPANY_NOT_FOUND")
        return updated

    async def delete_company(self, storage: Storage, company_id: UUID) -> None:
        """회사와 모든 하위 데이터를 삭제합니다.

        Delete a company and everything under it, children first:
        transactions, categories, recurring rules, quotes with their items,
        quote templates, then the company itself.
        """
        transactions: int = await storage.transactions.delete_by_company(company_id)
        categories: int = await storage.categories.delete_by_company(company_id)
        recurring: int = await storage.recurring.delete_by_company(company_id)
        quotes: int = await storage.quotes.delete_by_company(company_id)
        templates: int = await storage.quote_templates.delete_by_company(company_id)
        await storage.companies.delete(company_id)
        logger.info(
            "Company %s deleted (transactions=%d categories=%d recurring=%d quotes=%d templates=%d)",
            company_id, transactions, categories, recurring, quotes, templates,
        )


class CategoryService:
    """카테고리 관련 비즈니스 로직을 처리하는 서비스."""

    async def list_categories(self, storage: Storage, company_id: UUID) -> list[Category]:
        return await storage.categories.list_by_company(company_id)

    async def create_category(self, storage: Storage, company_id: UUID, data: CategoryCreate) -> Category:
        return await storage.categories.create({"company_id": company_id, **data.model_dump()})

    async def update_category(self, storage: Storage, category: Category, data: CategoryUpdate) -> Category:
        """카테고리를 수정합니다 — Replace a category's editable fields."""
        updated: Category | None = await storage.categories.update(category.id, data.model_dump())
        if updated is None:
            raise NotFoundError("Categoria nao encontrada", "CATEGORY_NOT_FOUND")
        return updated

    async def delete_category(self, storage: Storage, category_id: UUID) -> None:
        if not await storage.categories.delete(category_id):
            raise NotFoundError("Categoria nao encontrada", "CATEGORY_NOT_FOUND")
