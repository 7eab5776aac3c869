"""거래/반복 규칙 서비스 — 거래 CRUD, 통계, 상태 토글, 반복 거래 생성.

Transaction and Recurring Service — Transaction CRUD, status totals,
status toggling, and materialising recurring rules into open transactions.
"""

import logging
from datetime import date
from typing import Sequence
from uuid import UUID

from app.models.transaction import RecurringRule, Transaction
from app.repositories.interfaces import Storage
from app.schemas.transaction import RecurringCreate, StatsResponse, TransactionCreate, TransactionUpdate
from app.utils.exceptions import NotFoundError
from app.utils.validation import month_name

logger = logging.getLogger(__name__)

STATUS_PAID: str = "PAGO"
STATUS_OPEN: str = "ABERTO"


class TransactionService:
    """거래 관련 비즈니스 로직을 처리하는 서비스.

    Service handling transaction business logic.
    """

    async def list_transactions(
        self,
        storage: Storage,
        company_ids: Sequence[UUID],
        page: int,
        limit: int,
    ) -> tuple[list[Transaction], int]:
        """회사들의 거래를 페이지 조회합니다 — Paginated transactions of ``company_ids``."""
        return await storage.transactions.list_page(company_ids, page, limit)

    async def create_transaction(self, storage: Storage, data: TransactionCreate) -> Transaction:
        return await storage.transactions.create(data.model_dump())

    async def update_transaction(
        self,
        storage: Storage,
        transaction: Transaction,
        data: TransactionUpdate,
    ) -> Transaction:
        """거래를 수정합니다 — 소속 회사는 유지.

        Replace a transaction's fields; the company never changes.
        """
        updated: Transaction | None = await storage.transactions.update(transaction.id, data.model_dump())
        if updated is None:
            raise NotFoundError("Transacao nao encontrada", "TRANSACTION_NOT_FOUND")
        return updated

    async def delete_transaction(self, storage: Storage, transaction_id: UUID) -> None:
        if not await storage.transactions.delete(transaction_id):
            raise NotFoundError("Transacao nao encontrada", "TRANSACTION_NOT_FOUND")

    async def toggle_status(self, storage: Storage, transaction: Transaction) -> Transaction:
        """PAGO ⇄ ABERTO 상태를 전환합니다 — Flip between paid and open."""
        new_status: str = STATUS_OPEN if transaction.status == STATUS_PAID else STATUS_PAID
        updated: Transaction | None = await storage.transactions.update(transaction.id, {"status": new_status})
        if updated is None:
            raise NotFoundError("Transacao nao encontrada", "TRANSACTION_NOT_FOUND")
        return updated

    async def get_stats(self, storage: Storage, company_ids: Sequence[UUID]) -> StatsResponse:
        """지급/미결/합계 통계를 계산합니다.

        Compute ``{paid, open, total}``: PAGO amounts are paid, every other
        status counts as open.
        """
        totals: dict[str, float] = await storage.transactions.totals_by_status(company_ids)
        paid: float = totals.get(STATUS_PAID, 0.0)
        open_total: float = sum(amount for status, amount in totals.items() if status != STATUS_PAID)
        return StatsResponse(paid=paid, open=open_total, total=paid + open_total)


class RecurringService:
    """반복 규칙 관련 비즈니스 로직을 처리하는 서비스."""

    async def list_rules(self, storage: Storage, company_id: UUID) -> list[RecurringRule]:
        return await storage.recurring.list_by_company(company_id)

    async def create_rule(self, storage: Storage, data: RecurringCreate) -> RecurringRule:
        return await storage.recurring.create(data.model_dump())

    async def delete_rule(self, storage: Storage, rule_id: UUID) -> None:
        if not await storage.recurring.delete(rule_id):
            raise NotFoundError("Regra recorrente nao encontrada", "RECURRING_NOT_FOUND")

    async def apply_rules(
        self,
        storage: Storage,
        rules: Sequence[RecurringRule],
        month: str,
        year: int,
    ) -> int:
        """규칙마다 해당 월의 미결 거래를 생성합니다 (중복 생성 없음).

        Create one ABERTO transaction per rule for ``month``/``year`` unless
        the company already has a transaction with the rule's description
        in that period. Running it twice creates nothing the second time.

        Returns:
            int: 생성된 거래 수 (Number of created transactions)
        """
        created: int = 0
        for rule in rules:
            if await storage.transactions.exists_for_period(rule.company_id, rule.description, month, year):
                continue
            await storage.transactions.create({
                "company_id": rule.company_id,
                "description": rule.description,
                "amount": rule.amount,
                "category": rule.category,
                "month": month,
                "year": year,
                "status": STATUS_OPEN,
            })
            created += 1
        return created

    async def process(self, storage: Storage, company_id: UUID, month: str, year: int) -> int:
        """회사의 모든 규칙을 지정 월에 적용합니다.

        Apply every rule of a company to the given month and year.
        """
        rules: list[RecurringRule] = await storage.recurring.list_by_company(company_id)
        created: int = await self.apply_rules(storage, rules, month, year)
        logger.info("Recurring processed for company %s %s/%d: created=%d", company_id, month, year, created)
        return created

    async def process_due_today(self, storage: Storage, today: date | None = None) -> int:
        """오늘이 발생일인 전체 회사의 규칙을 이번 달에 적용합니다.

        Apply, across all companies, the rules whose ``day_of_month`` is
        today, for the current month.
        """
        today = today or date.today()
        rules: list[RecurringRule] = await storage.recurring.list_by_day(today.day)
        created: int = await self.apply_rules(storage, rules, month_name(today.month), today.year)
        logger.info("Recurring due on day %d processed: rules=%d created=%d", today.day, len(rules), created)
        return created
