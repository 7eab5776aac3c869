"""관리자 API 테스트 — 접근 제한, 통계, 사용자/회사/거래 조회, 토큰 정리.

Admin API tests — ADMIN_EMAIL gate, dashboard statistics, the cross-tenant
listings, user management and the token sweep.
"""

import uuid
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from app.utils.tokens import hash_token
from tests.conftest import transaction_payload

ADMIN = "/api/admin"


class TestAdminAccess:
    """관리자 접근 제한 테스트."""

    async def test_non_admin_forbidden(self, client: AsyncClient, user_headers):
        """일반 사용자는 403 ADMIN_ONLY."""
        res = await client.get(f"{ADMIN}/stats", headers=user_headers)
        assert res.status_code == 403
        assert res.json()["code"] == "ADMIN_ONLY"

    async def test_requires_token(self, client: AsyncClient):
        res = await client.get(f"{ADMIN}/stats")
        assert res.status_code == 401

    async def test_admin_disabled_without_email(self, client: AsyncClient, app, admin_headers):
        """ADMIN_EMAIL이 비어 있으면 관리자 영역 비활성."""
        app.state.settings = app.state.settings.model_copy(update={"ADMIN_EMAIL": ""})
        res = await client.get(f"{ADMIN}/stats", headers=admin_headers)
        assert res.status_code == 403


class TestAdminStats:
    """관리자 대시보드 통계 테스트."""

    async def test_stats(self, client: AsyncClient, company, user_headers, admin_headers):
        """개수와 PAGO 합계."""
        await client.post("/api/transactions", json=transaction_payload(company, amount=200, status="PAGO"), headers=user_headers)
        await client.post("/api/transactions", json=transaction_payload(company, amount=50), headers=user_headers)

        res = await client.get(f"{ADMIN}/stats", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["totalUsers"] == 2
        assert data["totalCompanies"] == 1
        assert data["totalTransactions"] == 2
        assert data["totalRevenue"] == 200.0
        assert len(data["recentUsers"]) == 2
        assert {row["companyName"] for row in data["recentTransactions"]} == {"Acme Ltda"}
        assert data["recentTransactions"][0]["date"] == "Janeiro/2024"


class TestAdminUsers:
    """관리자 사용자 관리 테스트."""

    async def test_list_users_with_company_count(self, client: AsyncClient, company, admin_headers):
        res = await client.get(f"{ADMIN}/users", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["pagination"]["total"] == 2
        counts = {row["email"]: row["companyCount"] for row in data["data"]}
        assert counts == {"maria@example.com": 1, "admin@mypila.com": 0}

    async def test_search_users(self, client: AsyncClient, user, other_user, admin_headers):
        """이름/이메일 검색."""
        res = await client.get(f"{ADMIN}/users", params={"search": "joao"}, headers=admin_headers)
        assert [row["email"] for row in res.json()["data"]] == ["joao@example.com"]

    async def test_update_user(self, client: AsyncClient, user, admin_headers):
        res = await client.put(f"{ADMIN}/users/{user.id}", json={
            "name": "Maria Souza",
            "email": "Maria.Souza@example.com",
        }, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Maria Souza"
        assert res.json()["email"] == "maria.souza@example.com"

    async def test_update_user_duplicate_email(self, client: AsyncClient, user, other_user, admin_headers):
        """다른 사용자의 이메일이면 409."""
        res = await client.put(f"{ADMIN}/users/{user.id}", json={
            "name": "Maria",
            "email": "joao@example.com",
        }, headers=admin_headers)
        assert res.status_code == 409
        assert res.json()["code"] == "EMAIL_ALREADY_EXISTS"

    async def test_update_missing_user(self, client: AsyncClient, admin_headers):
        res = await client.put(f"{ADMIN}/users/{uuid.uuid4()}", json={
            "name": "Ninguem",
            "email": "ninguem@example.com",
        }, headers=admin_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "USER_NOT_FOUND"

    async def test_delete_user_cascades(self, client: AsyncClient, storage, user, company, user_headers, admin_headers):
        """사용자 삭제 시 회사와 하위 데이터 모두 삭제."""
        await client.post("/api/transactions", json=transaction_payload(company), headers=user_headers)

        res = await client.delete(f"{ADMIN}/users/{user.id}", headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Usuario excluido com sucesso"

        assert await storage.users.get_by_id(user.id) is None
        assert await storage.companies.get_by_id(company.id) is None
        assert await storage.categories.list_by_company(company.id) == []
        assert await storage.transactions.count() == 0

    async def test_delete_missing_user(self, client: AsyncClient, admin_headers):
        res = await client.delete(f"{ADMIN}/users/{uuid.uuid4()}", headers=admin_headers)
        assert res.status_code == 404


class TestAdminCompaniesAndTransactions:
    """관리자 회사/거래 조회 테스트."""

    async def test_list_companies(self, client: AsyncClient, company, other_company, user_headers, admin_headers):
        """소유자 정보와 거래 수 포함."""
        await client.post("/api/transactions", json=transaction_payload(company), headers=user_headers)

        res = await client.get(f"{ADMIN}/companies", headers=admin_headers)
        assert res.status_code == 200
        rows = {row["name"]: row for row in res.json()["data"]}
        assert rows["Acme Ltda"]["userEmail"] == "maria@example.com"
        assert rows["Acme Ltda"]["transactionCount"] == 1
        assert rows["Outra Empresa"]["userName"] == "Joao Souza"
        assert rows["Outra Empresa"]["transactionCount"] == 0

    async def test_search_companies_by_owner(self, client: AsyncClient, company, other_company, admin_headers):
        res = await client.get(f"{ADMIN}/companies", params={"search": "joao@"}, headers=admin_headers)
        assert [row["name"] for row in res.json()["data"]] == ["Outra Empresa"]

    async def test_list_transactions_filters(self, client: AsyncClient, company, user_headers, admin_headers):
        """설명 검색과 상태 필터."""
        await client.post("/api/transactions", json=transaction_payload(company, description="Aluguel", status="PAGO"), headers=user_headers)
        await client.post("/api/transactions", json=transaction_payload(company, description="Mercado"), headers=user_headers)

        res = await client.get(f"{ADMIN}/transactions", headers=admin_headers)
        assert res.json()["pagination"]["total"] == 2

        res = await client.get(f"{ADMIN}/transactions", params={"search": "alug"}, headers=admin_headers)
        assert [row["description"] for row in res.json()["data"]] == ["Aluguel"]

        res = await client.get(f"{ADMIN}/transactions", params={"status": "ABERTO"}, headers=admin_headers)
        rows = res.json()["data"]
        assert [row["description"] for row in rows] == ["Mercado"]
        assert rows[0]["companyName"] == "Acme Ltda"


class TestAdminMaintenance:
    """관리자 토큰 정리 테스트."""

    async def test_cleanup_tokens(self, client: AsyncClient, storage, user, admin_headers):
        """만료된 리프레시 토큰과 사용된 재설정 토큰 삭제."""
        past = datetime.now(timezone.utc) - timedelta(days=1)
        await storage.refresh_tokens.create({
            "user_id": user.id,
            "token_hash": hash_token("expirado"),
            "expires_at": past,
        })
        await storage.reset_tokens.create({
            "user_id": user.id,
            "token_hash": hash_token("usado"),
            "expires_at": datetime.now(timezone.utc) + timedelta(hours=1),
            "used": True,
        })
        await storage.commit()

        res = await client.post(f"{ADMIN}/maintenance/cleanup-tokens", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Limpeza concluida"
        assert data["refreshTokensDeleted"] == 1
        assert data["resetTokensDeleted"] == 1
        assert await storage.refresh_tokens.get_by_hash(hash_token("expirado")) is None
