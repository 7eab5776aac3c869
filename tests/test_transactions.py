"""거래/통계 API 테스트 — CRUD, 페이지네이션, 상태 토글, 통계, 소유권 검사.

Transaction API tests — CRUD, pagination, status toggle, stats and
ownership checks.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import transaction_payload

TRANSACTIONS = "/api/transactions"


async def create(client: AsyncClient, headers: dict, company, **overrides) -> dict:
    res = await client.post(TRANSACTIONS, json=transaction_payload(company, **overrides), headers=headers)
    assert res.status_code == 201
    return res.json()


class TestCreateTransaction:
    """거래 생성 테스트."""

    async def test_create_transaction(self, client: AsyncClient, company, user_headers):
        """거래 생성 — 상태 기본값 ABERTO."""
        payload = transaction_payload(company)
        payload.pop("status")
        res = await client.post(TRANSACTIONS, json=payload, headers=user_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["companyId"] == str(company.id)
        assert data["status"] == "ABERTO"
        assert data["month"] == "Janeiro"

    async def test_create_accumulated_month(self, client: AsyncClient, company, user_headers):
        """"Acumulado" 월 허용."""
        data = await create(client, user_headers, company, month="Acumulado")
        assert data["month"] == "Acumulado"

    async def test_invalid_month(self, client: AsyncClient, company, user_headers):
        """잘못된 월 이름은 400."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(company, month="January"), headers=user_headers)
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "month"

    async def test_invalid_year(self, client: AsyncClient, company, user_headers):
        """범위 밖의 연도는 400."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(company, year=1999), headers=user_headers)
        assert res.status_code == 400

    async def test_non_positive_amount(self, client: AsyncClient, company, user_headers):
        """0 이하 금액은 400."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(company, amount=0), headers=user_headers)
        assert res.status_code == 400

    async def test_amount_with_three_decimals(self, client: AsyncClient, company, user_headers):
        """소수점 세 자리 금액은 400."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(company, amount=10.123), headers=user_headers)
        assert res.status_code == 400

    async def test_invalid_status(self, client: AsyncClient, company, user_headers):
        """PAGO/ABERTO 외 상태는 400."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(company, status="PAID"), headers=user_headers)
        assert res.status_code == 400

    async def test_sql_injection_in_description(self, client: AsyncClient, company, user_headers):
        """SQL 인젝션 패턴은 거부."""
        res = await client.post(
            TRANSACTIONS,
            json=transaction_payload(company, description="x'; DROP TABLE users; --"),
            headers=user_headers,
        )
        assert res.status_code == 400

    async def test_create_in_other_users_company(self, client: AsyncClient, other_company, user_headers):
        """다른 사용자의 회사에는 생성 불가 (403)."""
        res = await client.post(TRANSACTIONS, json=transaction_payload(other_company), headers=user_headers)
        assert res.status_code == 403


class TestListTransactions:
    """거래 목록/페이지네이션 테스트."""

    async def test_list_paginated(self, client: AsyncClient, company, user_headers):
        """limit/page에 따른 페이지 분할."""
        for year in (2021, 2022, 2023):
            await create(client, user_headers, company, year=year)

        res = await client.get(
            TRANSACTIONS, params={"companyId": str(company.id), "limit": "2", "page": "1"}, headers=user_headers,
        )
        assert res.status_code == 200
        body = res.json()
        assert [item["year"] for item in body["data"]] == [2023, 2022]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

        res = await client.get(
            TRANSACTIONS, params={"companyId": str(company.id), "limit": "2", "page": "2"}, headers=user_headers,
        )
        assert [item["year"] for item in res.json()["data"]] == [2021]

    async def test_list_invalid_paging_is_normalised(self, client: AsyncClient, company, user_headers):
        """잘못된 page/limit은 기본값으로 정규화."""
        await create(client, user_headers, company)
        res = await client.get(
            TRANSACTIONS, params={"companyId": str(company.id), "limit": "abc", "page": "-1"}, headers=user_headers,
        )
        assert res.status_code == 200
        assert res.json()["pagination"]["page"] == 1
        assert res.json()["pagination"]["limit"] == 50

    async def test_list_without_company_covers_all_own(
        self, client: AsyncClient, storage, user, company, other_company, user_headers, other_headers,
    ):
        """companyId 없이 조회하면 본인 회사 전체."""
        from tests.conftest import make_company

        second = await make_company(storage, user, "Segunda")
        await create(client, user_headers, company)
        await create(client, user_headers, second)
        await create(client, other_headers, other_company)

        res = await client.get(TRANSACTIONS, headers=user_headers)
        assert res.status_code == 200
        assert res.json()["pagination"]["total"] == 2

    async def test_list_other_users_company(self, client: AsyncClient, other_company, user_headers):
        """다른 사용자의 회사 거래 조회는 403."""
        res = await client.get(TRANSACTIONS, params={"companyId": str(other_company.id)}, headers=user_headers)
        assert res.status_code == 403


class TestUpdateTransaction:
    """거래 수정/삭제/토글 테스트."""

    async def test_get_transaction(self, client: AsyncClient, company, user_headers):
        created = await create(client, user_headers, company)
        res = await client.get(f"{TRANSACTIONS}/{created['id']}", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["id"] == created["id"]

    async def test_update_transaction(self, client: AsyncClient, company, user_headers):
        """거래 수정 — 회사는 유지."""
        created = await create(client, user_headers, company)
        payload = transaction_payload(company, amount=250.75, month="Fevereiro", status="PAGO")
        payload.pop("companyId")
        res = await client.put(f"{TRANSACTIONS}/{created['id']}", json=payload, headers=user_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["amount"] == 250.75
        assert data["month"] == "Fevereiro"
        assert data["companyId"] == str(company.id)

    async def test_toggle_status(self, client: AsyncClient, company, user_headers):
        """PAGO ⇄ ABERTO 전환."""
        created = await create(client, user_headers, company, status="ABERTO")
        res = await client.patch(f"{TRANSACTIONS}/{created['id']}/toggle-status", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["status"] == "PAGO"
        res = await client.patch(f"{TRANSACTIONS}/{created['id']}/toggle-status", headers=user_headers)
        assert res.json()["status"] == "ABERTO"

    async def test_delete_transaction(self, client: AsyncClient, company, user_headers):
        created = await create(client, user_headers, company)
        res = await client.delete(f"{TRANSACTIONS}/{created['id']}", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Transacao excluida com sucesso"
        res = await client.get(f"{TRANSACTIONS}/{created['id']}", headers=user_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "TRANSACTION_NOT_FOUND"

    async def test_other_user_cannot_modify(self, client: AsyncClient, company, user_headers, other_headers):
        """다른 사용자의 거래 수정/삭제는 403."""
        created = await create(client, user_headers, company)
        res = await client.patch(f"{TRANSACTIONS}/{created['id']}/toggle-status", headers=other_headers)
        assert res.status_code == 403
        res = await client.delete(f"{TRANSACTIONS}/{created['id']}", headers=other_headers)
        assert res.status_code == 403

    async def test_missing_transaction(self, client: AsyncClient, user_headers):
        res = await client.delete(f"{TRANSACTIONS}/{uuid.uuid4()}", headers=user_headers)
        assert res.status_code == 404


class TestStats:
    """통계 테스트."""

    async def test_stats(self, client: AsyncClient, company, user_headers):
        """지급/미결/합계."""
        await create(client, user_headers, company, amount=100.5, status="PAGO")
        await create(client, user_headers, company, amount=200, status="PAGO")
        await create(client, user_headers, company, amount=50.25, status="ABERTO")

        res = await client.get("/api/stats", params={"companyId": str(company.id)}, headers=user_headers)
        assert res.status_code == 200
        assert res.json() == {"paid": 300.5, "open": 50.25, "total": 350.75}

    async def test_stats_empty(self, client: AsyncClient, company, user_headers):
        """거래가 없으면 0."""
        res = await client.get("/api/stats", params={"companyId": str(company.id)}, headers=user_headers)
        assert res.json() == {"paid": 0.0, "open": 0.0, "total": 0.0}

    async def test_stats_without_company(
        self, client: AsyncClient, company, other_company, user_headers, other_headers,
    ):
        """companyId 없으면 본인 회사 전체 합계만."""
        await create(client, user_headers, company, amount=10, status="PAGO")
        await create(client, other_headers, other_company, amount=99, status="PAGO")
        res = await client.get("/api/stats", headers=user_headers)
        assert res.json()["paid"] == 10.0
