"""소유권 검사 헬퍼 — 리소스와 상위 회사를 조회하고 소유자를 확인.

Ownership checks. Each helper loads a resource, then its company, and
verifies the company belongs to the caller before anything is changed.

    - 리소스 없음 → 404 ``<RESOURCE>_NOT_FOUND``
    - 다른 사용자의 회사 → 403 ``FORBIDDEN``
"""

from uuid import UUID

from app.models.company import Category, Company
from app.models.quote import Quote, QuoteTemplate
from app.models.transaction import RecurringRule, Transaction
from app.models.user import User
from app.repositories.interfaces import Storage
from app.utils.exceptions import ForbiddenError, NotFoundError


async def require_company(storage: Storage, user: User, company_id: UUID) -> Company:
    """회사를 조회하고 호출자 소유인지 확인합니다.

    Args:
        storage: 작업 단위 (Unit of work)
        user: 현재 사용자 (Authenticated user)
        company_id: 회사 ID (Company UUID)

    Returns:
        Company: 호출자 소유 회사 (The caller's company)

    Raises:
        NotFoundError: 회사 없음 (404 COMPANY_NOT_FOUND)
        ForbiddenError: 다른 사용자 소유 (403 FORBIDDEN)
    """
    company: Company | None = await storage.companies.get_by_id(company_id)
    if company is None:
        raise NotFoundError("Empresa nao encontrada", "COMPANY_NOT_FOUND")
    if company.user_id != user.id:
        raise ForbiddenError("Voce nao tem permissao para acessar esta empresa", "FORBIDDEN")
    return company


async def require_transaction(storage: Storage, user: User, transaction_id: UUID) -> Transaction:
    transaction: Transaction | None = await storage.transactions.get_by_id(transaction_id)
    if transaction is None:
        raise NotFoundError("Transacao nao encontrada", "TRANSACTION_NOT_FOUND")
    await require_company(storage, user, transaction.company_id)
    return transaction


async def require_category(storage: Storage, user: User, category_id: UUID) -> Category:
    category: Category | None = await storage.categories.get_by_id(category_id)
    if category is None:
        raise NotFoundError("Categoria nao encontrada", "CATEGORY_NOT_FOUND")
    await require_company(storage, user, category.company_id)
    return category


async def require_recurring(storage: Storage, user: User, rule_id: UUID) -> RecurringRule:
    rule: RecurringRule | None = await storage.recurring.get_by_id(rule_id)
    if rule is None:
        raise NotFoundError("Regra recorrente nao encontrada", "RECURRING_NOT_FOUND")
    await require_company(storage, user, rule.company_id)
    return rule


async def require_quote(storage: Storage, user: User, quote_id: UUID) -> tuple[Quote, Company]:
    """견적과 소속 회사를 함께 반환합니다 — PDF 렌더링에 회사 정보가 필요."""
    quote: Quote | None = await storage.quotes.get_by_id(quote_id)
    if quote is None:
        raise NotFoundError("Orcamento nao encontrado", "QUOTE_NOT_FOUND")
    company: Company = await require_company(storage, user, quote.company_id)
    return quote, company


async def require_template(storage: Storage, user: User, template_id: UUID) -> QuoteTemplate:
    template: QuoteTemplate | None = await storage.quote_templates.get_by_id(template_id)
    if template is None:
        raise NotFoundError("Template de orcamento nao encontrado", "QUOTE_TEMPLATE_NOT_FOUND")
    await require_company(storage, user, template.company_id)
    return template
