"""사용자 API 라우터 패키지 — 모든 사용자 엔드포인트 통합.

User-facing API Router package — Aggregates the authenticated user's
endpoints into a single router mounted under ``/api``.

Included routers:
    - auth: 인증 (Registration, login, tokens, password reset)
    - companies: 회사 관리 (Company management)
    - transactions: 거래 관리 + /stats (Transactions and totals)
    - categories: 카테고리 관리 (Category management)
    - recurring: 반복 규칙 (Recurring rules and month processing)
    - quotes: 견적 관리 (Quotes, PDF, comparison)
    - quote_templates: 견적 양식 (Quote templates)
    - cnpj: CNPJ 조회 (Registry lookup)
"""

from fastapi import APIRouter

from app.api.app.auth import router as auth_router
from app.api.app.categories import router as categories_router
from app.api.app.cnpj import router as cnpj_router
from app.api.app.companies import router as companies_router
from app.api.app.quote_templates import router as quote_templates_router
from app.api.app.quotes import router as quotes_router
from app.api.app.recurring import router as recurring_router
from app.api.app.transactions import router as transactions_router
from app.api.app.transactions import stats_router

app_router: APIRouter = APIRouter()

app_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
app_router.include_router(companies_router, prefix="/companies", tags=["Companies"])
app_router.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])
app_router.include_router(stats_router, tags=["Transactions"])
app_router.include_router(categories_router, prefix="/categories", tags=["Categories"])
app_router.include_router(recurring_router, prefix="/recurring", tags=["Recurring"])
app_router.include_router(quotes_router, prefix="/quotes", tags=["Quotes"])
app_router.include_router(quote_templates_router, prefix="/quote-templates", tags=["Quote Templates"])
app_router.include_router(cnpj_router, prefix="/cnpj", tags=["CNPJ"])
