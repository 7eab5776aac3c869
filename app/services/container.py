"""서비스 컨테이너 — 애플리케이션 시작 시 모든 서비스를 한 번 생성.

Service container — Every service is built once by the application factory
from the Settings and the shared httpx client, and stored on
``app.state.services``.
"""

from dataclasses import dataclass

import httpx

from app.config import Settings
from app.services.admin_service import AdminService
from app.services.auth_service import AuthService
from app.services.cnpj_service import CnpjService
from app.services.company_service import CategoryService, CompanyService
from app.services.email_service import EmailService
from app.services.quote_pdf_service import QuotePdfService
from app.services.quote_service import QuoteService, QuoteTemplateService
from app.services.transaction_service import RecurringService, TransactionService


@dataclass
class Services:
    """애플리케이션 서비스 묶음 — Application-wide service instances."""

    email: EmailService
    auth: AuthService
    companies: CompanyService
    categories: CategoryService
    transactions: TransactionService
    recurring: RecurringService
    quotes: QuoteService
    quote_templates: QuoteTemplateService
    quote_pdf: QuotePdfService
    admin: AdminService
    cnpj: CnpjService


def build_services(settings: Settings, http_client: httpx.AsyncClient) -> Services:
    """설정과 HTTP 클라이언트로 서비스를 조립합니다.

    Wire every service. The quote service owns the numbering lock, so one
    container must be shared by all requests of the process.
    """
    email = EmailService(settings)
    auth = AuthService(settings, email)
    companies = CompanyService()
    return Services(
        email=email,
        auth=auth,
        companies=companies,
        categories=CategoryService(),
        transactions=TransactionService(),
        recurring=RecurringService(),
        quotes=QuoteService(),
        quote_templates=QuoteTemplateService(),
        quote_pdf=QuotePdfService(http_client),
        admin=AdminService(companies, auth),
        cnpj=CnpjService(http_client, settings.CNPJ_API_URL),
    )
