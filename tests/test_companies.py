"""회사/카테고리 API 테스트 — CRUD, 기본 카테고리, 연쇄 삭제, 소유권 검사.

Company and category API tests — CRUD, default categories, the cascade
delete and ownership checks.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import quote_payload, transaction_payload

COMPANIES = "/api/companies"
CATEGORIES = "/api/categories"


class TestCompanies:
    """회사 CRUD 테스트."""

    async def test_create_company_seeds_categories(self, client: AsyncClient, user_headers):
        """회사 생성 시 기본 카테고리 5개 생성."""
        res = await client.post(COMPANIES, json={"name": "Padaria Central"}, headers=user_headers)
        assert res.status_code == 201
        company = res.json()
        assert company["name"] == "Padaria Central"

        res = await client.get(CATEGORIES, params={"companyId": company["id"]}, headers=user_headers)
        assert res.status_code == 200
        names = [category["name"] for category in res.json()]
        assert len(names) == 5
        assert names == sorted(names)

    async def test_create_company_blank_name(self, client: AsyncClient, user_headers):
        """빈 이름은 400."""
        res = await client.post(COMPANIES, json={"name": "   "}, headers=user_headers)
        assert res.status_code == 400

    async def test_create_company_with_details(self, client: AsyncClient, user_headers):
        """등록 정보 필드는 camelCase로 저장/반환."""
        res = await client.post(COMPANIES, json={
            "name": "Loja",
            "cnpj": "12.345.678/0001-90",
            "legalName": "Loja Comercio Ltda",
            "city": "Sao Paulo",
            "state": "SP",
        }, headers=user_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["legalName"] == "Loja Comercio Ltda"
        assert data["state"] == "SP"

    async def test_list_companies_only_own(self, client: AsyncClient, company, other_company, user_headers):
        """본인 회사만 조회."""
        res = await client.get(COMPANIES, headers=user_headers)
        assert res.status_code == 200
        ids = [item["id"] for item in res.json()]
        assert ids == [str(company.id)]

    async def test_update_company(self, client: AsyncClient, company, user_headers):
        """회사 이름 수정."""
        res = await client.put(f"{COMPANIES}/{company.id}", json={"name": "Novo Nome"}, headers=user_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Novo Nome"

    async def test_update_other_users_company(self, client: AsyncClient, other_company, user_headers):
        """다른 사용자의 회사는 403."""
        res = await client.put(f"{COMPANIES}/{other_company.id}", json={"name": "X"}, headers=user_headers)
        assert res.status_code == 403
        assert res.json()["code"] == "FORBIDDEN"

    async def test_update_missing_company(self, client: AsyncClient, user_headers):
        """없는 회사는 404."""
        res = await client.put(f"{COMPANIES}/{uuid.uuid4()}", json={"name": "X"}, headers=user_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "COMPANY_NOT_FOUND"

    async def test_invalid_company_id(self, client: AsyncClient, user_headers):
        """UUID 형식이 아니면 400."""
        res = await client.put(f"{COMPANIES}/not-a-uuid", json={"name": "X"}, headers=user_headers)
        assert res.status_code == 400

    async def test_requires_auth(self, client: AsyncClient):
        """인증 없으면 401."""
        res = await client.get(COMPANIES)
        assert res.status_code == 401


class TestCompanyCascade:
    """회사 연쇄 삭제 테스트."""

    async def test_delete_company_removes_children(self, client: AsyncClient, storage, company, user_headers):
        """거래, 카테고리, 반복 규칙, 견적, 양식 모두 삭제."""
        res = await client.post("/api/transactions", json=transaction_payload(company), headers=user_headers)
        assert res.status_code == 201
        res = await client.post("/api/recurring", json={
            "companyId": str(company.id),
            "description": "Aluguel",
            "amount": 1500,
            "category": "Moradia",
            "dayOfMonth": 5,
        }, headers=user_headers)
        assert res.status_code == 201
        res = await client.post(
            "/api/quote-templates", params={"companyId": str(company.id)},
            json={"name": "Padrao"}, headers=user_headers,
        )
        assert res.status_code == 201
        res = await client.post(
            "/api/quotes", params={"companyId": str(company.id)},
            json=quote_payload(), headers=user_headers,
        )
        assert res.status_code == 201
        quote_id = uuid.UUID(res.json()["id"])

        res = await client.delete(f"{COMPANIES}/{company.id}", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Empresa excluida com sucesso"

        assert await storage.companies.get_by_id(company.id) is None
        assert await storage.categories.list_by_company(company.id) == []
        assert await storage.recurring.list_by_company(company.id) == []
        assert await storage.quote_templates.list_by_company(company.id) == []
        assert await storage.quotes.get_by_id(quote_id) is None
        assert await storage.quotes.get_items(quote_id) == []
        items, total = await storage.transactions.list_page([company.id], 1, 50)
        assert total == 0

    async def test_delete_other_users_company(self, client: AsyncClient, other_company, user_headers):
        """다른 사용자의 회사 삭제는 403."""
        res = await client.delete(f"{COMPANIES}/{other_company.id}", headers=user_headers)
        assert res.status_code == 403


class TestCategories:
    """카테고리 CRUD 테스트."""

    async def test_create_category(self, client: AsyncClient, company, user_headers):
        """카테고리 생성 — 기본값 적용."""
        res = await client.post(
            CATEGORIES, params={"companyId": str(company.id)},
            json={"name": "Marketing", "budget": 250.5}, headers=user_headers,
        )
        assert res.status_code == 201
        data = res.json()
        assert data["type"] == "EXPENSE"
        assert data["color"] == "#78716c"
        assert data["budget"] == 250.5

    async def test_create_category_invalid_color(self, client: AsyncClient, company, user_headers):
        """잘못된 색상은 400."""
        res = await client.post(
            CATEGORIES, params={"companyId": str(company.id)},
            json={"name": "Marketing", "color": "red"}, headers=user_headers,
        )
        assert res.status_code == 400

    async def test_create_category_invalid_type(self, client: AsyncClient, company, user_headers):
        """잘못된 유형은 400."""
        res = await client.post(
            CATEGORIES, params={"companyId": str(company.id)},
            json={"name": "Marketing", "type": "OTHER"}, headers=user_headers,
        )
        assert res.status_code == 400

    async def test_create_category_in_other_company(self, client: AsyncClient, other_company, user_headers):
        """다른 사용자의 회사에는 생성 불가."""
        res = await client.post(
            CATEGORIES, params={"companyId": str(other_company.id)},
            json={"name": "Marketing"}, headers=user_headers,
        )
        assert res.status_code == 403

    async def test_list_requires_company_id(self, client: AsyncClient, company, user_headers):
        """companyId 누락은 400."""
        res = await client.get(CATEGORIES, headers=user_headers)
        assert res.status_code == 400

    async def test_update_and_delete_category(self, client: AsyncClient, storage, company, user_headers):
        """카테고리 수정 후 삭제 (204)."""
        categories = await storage.categories.list_by_company(company.id)
        category = categories[0]
        res = await client.put(f"{CATEGORIES}/{category.id}", json={
            "name": "Renomeada", "type": "INCOME", "color": "#112233", "budget": 10,
        }, headers=user_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Renomeada"
        assert res.json()["type"] == "INCOME"

        res = await client.delete(f"{CATEGORIES}/{category.id}", headers=user_headers)
        assert res.status_code == 204
        res = await client.delete(f"{CATEGORIES}/{category.id}", headers=user_headers)
        assert res.status_code == 404

    async def test_other_user_cannot_touch_category(self, client: AsyncClient, storage, company, other_headers):
        """다른 사용자는 카테고리 수정 불가 (403)."""
        categories = await storage.categories.list_by_company(company.id)
        res = await client.delete(f"{CATEGORIES}/{categories[0].id}", headers=other_headers)
        assert res.status_code == 403
