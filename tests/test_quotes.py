"""견적/견적 양식 API 테스트 — 합계, 번호 발급, 수정 제한, 복제, PDF, 비교.

Quote and quote template API tests — server-side totals, numbering,
executed-quote protection, duplication, PDF download and the
quoted-versus-executed comparison.
"""

import uuid
from datetime import date, timedelta

from httpx import AsyncClient

from tests.conftest import quote_payload, transaction_payload

QUOTES = "/api/quotes"
TEMPLATES = "/api/quote-templates"


async def create_quote(client: AsyncClient, headers: dict, company, **overrides) -> dict:
    res = await client.post(
        QUOTES, params={"companyId": str(company.id)}, json=quote_payload(**overrides), headers=headers,
    )
    assert res.status_code == 201
    return res.json()


class TestCreateQuote:
    """견적 생성 테스트."""

    async def test_totals_are_computed(self, client: AsyncClient, company, user_headers):
        """항목 합계/소계/총계는 서버에서 계산."""
        data = await create_quote(client, user_headers, company)
        assert [item["total"] for item in data["items"]] == [300.0, 200.0]
        assert data["subtotal"] == 500.0
        assert data["total"] == 500.0
        assert data["status"] == "DRAFT"
        assert data["validUntil"] == (date.today() + timedelta(days=30)).isoformat()

    async def test_percent_discount(self, client: AsyncClient, company, user_headers):
        """PERCENT 할인 적용."""
        data = await create_quote(client, user_headers, company, discountType="PERCENT", discount=10)
        assert data["total"] == 450.0

    async def test_value_discount(self, client: AsyncClient, company, user_headers):
        """VALUE 할인 적용."""
        data = await create_quote(client, user_headers, company, discountType="VALUE", discount=50)
        assert data["total"] == 450.0

    async def test_percent_discount_above_100(self, client: AsyncClient, company, user_headers):
        """100% 초과 할인은 400."""
        res = await client.post(
            QUOTES, params={"companyId": str(company.id)},
            json=quote_payload(discountType="PERCENT", discount=150), headers=user_headers,
        )
        assert res.status_code == 400

    async def test_requires_items(self, client: AsyncClient, company, user_headers):
        """항목이 없으면 400."""
        res = await client.post(
            QUOTES, params={"companyId": str(company.id)}, json=quote_payload(items=[]), headers=user_headers,
        )
        assert res.status_code == 400

    async def test_sequential_numbers(self, client: AsyncClient, company, other_company, user_headers, other_headers):
        """번호는 회사별로 연도 내 순차 발급."""
        year = date.today().year
        first = await create_quote(client, user_headers, company)
        second = await create_quote(client, user_headers, company)
        other = await create_quote(client, other_headers, other_company)
        assert first["number"] == f"ORC-{year}-001"
        assert second["number"] == f"ORC-{year}-002"
        assert other["number"] == f"ORC-{year}-001"

    async def test_template_from_other_company(self, client: AsyncClient, company, other_company, other_headers, user_headers):
        """다른 회사의 양식은 404 QUOTE_TEMPLATE_NOT_FOUND."""
        res = await client.post(
            TEMPLATES, params={"companyId": str(other_company.id)}, json={"name": "Outro"}, headers=other_headers,
        )
        template_id = res.json()["id"]
        res = await client.post(
            QUOTES, params={"companyId": str(company.id)},
            json=quote_payload(templateId=template_id), headers=user_headers,
        )
        assert res.status_code == 404
        assert res.json()["code"] == "QUOTE_TEMPLATE_NOT_FOUND"

    async def test_create_in_other_users_company(self, client: AsyncClient, other_company, user_headers):
        res = await client.post(
            QUOTES, params={"companyId": str(other_company.id)}, json=quote_payload(), headers=user_headers,
        )
        assert res.status_code == 403


class TestQuoteLifecycle:
    """견적 조회/수정/상태/삭제 테스트."""

    async def test_list_with_status_filter(self, client: AsyncClient, company, user_headers):
        """상태 필터 목록."""
        draft = await create_quote(client, user_headers, company)
        sent = await create_quote(client, user_headers, company)
        await client.patch(f"{QUOTES}/{sent['id']}/status", json={"status": "SENT"}, headers=user_headers)

        res = await client.get(QUOTES, params={"companyId": str(company.id)}, headers=user_headers)
        assert len(res.json()) == 2
        res = await client.get(QUOTES, params={"companyId": str(company.id), "status": "DRAFT"}, headers=user_headers)
        assert [quote["id"] for quote in res.json()] == [draft["id"]]

    async def test_update_replaces_items(self, client: AsyncClient, company, user_headers):
        """수정 시 항목 교체와 합계 재계산, 유효 기한 유지."""
        created = await create_quote(client, user_headers, company)
        payload = quote_payload(items=[{"description": "Unico", "quantity": 3, "unitPrice": 10}])
        res = await client.put(f"{QUOTES}/{created['id']}", json=payload, headers=user_headers)
        assert res.status_code == 200
        data = res.json()
        assert len(data["items"]) == 1
        assert data["total"] == 30.0
        assert data["number"] == created["number"]
        assert data["validUntil"] == created["validUntil"]

    async def test_executed_quote_cannot_be_edited(self, client: AsyncClient, company, user_headers):
        """실행된 견적은 수정 불가 (400 QUOTE_ALREADY_EXECUTED)."""
        created = await create_quote(client, user_headers, company)
        res = await client.patch(f"{QUOTES}/{created['id']}/status", json={"status": "EXECUTED"}, headers=user_headers)
        assert res.status_code == 200
        res = await client.put(f"{QUOTES}/{created['id']}", json=quote_payload(), headers=user_headers)
        assert res.status_code == 400
        assert res.json()["code"] == "QUOTE_ALREADY_EXECUTED"

    async def test_invalid_status(self, client: AsyncClient, company, user_headers):
        created = await create_quote(client, user_headers, company)
        res = await client.patch(f"{QUOTES}/{created['id']}/status", json={"status": "DONE"}, headers=user_headers)
        assert res.status_code == 400

    async def test_duplicate(self, client: AsyncClient, company, user_headers):
        """복제 — 새 번호, DRAFT, 제목 + (Copia)."""
        created = await create_quote(client, user_headers, company, discountType="PERCENT", discount=10)
        await client.patch(f"{QUOTES}/{created['id']}/status", json={"status": "APPROVED"}, headers=user_headers)

        res = await client.post(f"{QUOTES}/{created['id']}/duplicate", headers=user_headers)
        assert res.status_code == 201
        copy = res.json()
        assert copy["id"] != created["id"]
        assert copy["number"] != created["number"]
        assert copy["status"] == "DRAFT"
        assert copy["title"] == "Reforma do escritorio (Copia)"
        assert copy["total"] == created["total"]
        assert len(copy["items"]) == 2

    async def test_delete(self, client: AsyncClient, company, user_headers):
        created = await create_quote(client, user_headers, company)
        res = await client.delete(f"{QUOTES}/{created['id']}", headers=user_headers)
        assert res.status_code == 204
        res = await client.get(f"{QUOTES}/{created['id']}", headers=user_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "QUOTE_NOT_FOUND"

    async def test_other_user_cannot_read(self, client: AsyncClient, company, user_headers, other_headers):
        created = await create_quote(client, user_headers, company)
        res = await client.get(f"{QUOTES}/{created['id']}", headers=other_headers)
        assert res.status_code == 403

    async def test_missing_quote(self, client: AsyncClient, user_headers):
        res = await client.get(f"{QUOTES}/{uuid.uuid4()}", headers=user_headers)
        assert res.status_code == 404


class TestQuotePdf:
    """견적서 PDF 테스트."""

    async def test_pdf_download(self, client: AsyncClient, company, user_headers):
        """PDF 첨부 파일 반환."""
        created = await create_quote(client, user_headers, company, notes="Pagamento em 2x")
        res = await client.get(f"{QUOTES}/{created['id']}/pdf", headers=user_headers)
        assert res.status_code == 200
        assert res.headers["content-type"] == "application/pdf"
        assert created["number"] in res.headers["content-disposition"]
        assert res.content.startswith(b"%PDF")

    async def test_pdf_with_template(self, client: AsyncClient, company, user_headers):
        """양식(색상, 머리말, 조건)을 적용한 PDF."""
        res = await client.post(TEMPLATES, params={"companyId": str(company.id)}, json={
            "name": "Azul",
            "headerText": "Obrigado pela preferencia",
            "footerText": "Acme Ltda",
            "termsText": "Validade de 30 dias",
            "primaryColor": "#1d4ed8",
        }, headers=user_headers)
        created = await create_quote(client, user_headers, company, templateId=res.json()["id"])
        res = await client.get(f"{QUOTES}/{created['id']}/pdf", headers=user_headers)
        assert res.status_code == 200
        assert res.content.startswith(b"%PDF")


class TestQuoteComparison:
    """견적 대비 실행 비교 테스트."""

    async def test_comparison_matches_category_id_and_name(self, client: AsyncClient, storage, company, user_headers):
        """카테고리 ID 또는 이름으로 기록된 거래를 실행 금액으로 집계."""
        categories = {category.name: category for category in await storage.categories.list_by_company(company.id)}
        moradia = categories["Moradia"]
        created = await create_quote(client, user_headers, company, items=[
            {"description": "Obra", "quantity": 1, "unitPrice": 1000, "categoryId": str(moradia.id)},
            {"description": "Extra", "quantity": 1, "unitPrice": 100},
        ])
        await client.post("/api/transactions", json=transaction_payload(
            company, category="Moradia", amount=400,
        ), headers=user_headers)
        await client.post("/api/transactions", json=transaction_payload(
            company, category=str(moradia.id), amount=200,
        ), headers=user_headers)

        res = await client.get(f"{QUOTES}/{created['id']}/comparison", headers=user_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["quotedTotal"] == 1100.0
        assert data["executedTotal"] == 600.0
        assert data["variance"] == 500.0
        assert round(data["variancePercent"], 2) == 45.45
        assert data["items"][0]["executed"] == 600.0
        assert data["items"][1]["categoryId"] is None
        assert data["items"][1]["executed"] == 0.0


class TestQuoteTemplates:
    """견적 양식 CRUD 테스트."""

    async def test_single_default_template(self, client: AsyncClient, company, user_headers):
        """기본 양식은 회사당 하나."""
        params = {"companyId": str(company.id)}
        first = await client.post(TEMPLATES, params=params, json={"name": "A", "isDefault": True}, headers=user_headers)
        assert first.status_code == 201
        second = await client.post(TEMPLATES, params=params, json={"name": "B", "isDefault": True}, headers=user_headers)

        res = await client.get(TEMPLATES, params=params, headers=user_headers)
        defaults = {template["id"]: template["isDefault"] for template in res.json()}
        assert defaults[first.json()["id"]] is False
        assert defaults[second.json()["id"]] is True

    async def test_invalid_color(self, client: AsyncClient, company, user_headers):
        res = await client.post(
            TEMPLATES, params={"companyId": str(company.id)},
            json={"name": "A", "primaryColor": "azul"}, headers=user_headers,
        )
        assert res.status_code == 400

    async def test_update_template(self, client: AsyncClient, company, user_headers):
        res = await client.post(TEMPLATES, params={"companyId": str(company.id)}, json={"name": "A"}, headers=user_headers)
        template_id = res.json()["id"]
        res = await client.put(f"{TEMPLATES}/{template_id}", json={
            "name": "Renomeado", "primaryColor": "#000000",
        }, headers=user_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Renomeado"
        assert res.json()["primaryColor"] == "#000000"

    async def test_delete_template_detaches_quotes(self, client: AsyncClient, company, user_headers):
        """양식 삭제 시 견적의 templateId 해제."""
        res = await client.post(TEMPLATES, params={"companyId": str(company.id)}, json={"name": "A"}, headers=user_headers)
        template_id = res.json()["id"]
        quote = await create_quote(client, user_headers, company, templateId=template_id)

        res = await client.delete(f"{TEMPLATES}/{template_id}", headers=user_headers)
        assert res.status_code == 204
        res = await client.get(f"{QUOTES}/{quote['id']}", headers=user_headers)
        assert res.json()["templateId"] is None

    async def test_other_user_cannot_read_template(self, client: AsyncClient, company, user_headers, other_headers):
        res = await client.post(TEMPLATES, params={"companyId": str(company.id)}, json={"name": "A"}, headers=user_headers)
        res = await client.get(f"{TEMPLATES}/{res.json()['id']}", headers=other_headers)
        assert res.status_code == 403
