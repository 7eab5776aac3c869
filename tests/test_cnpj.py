"""CNPJ 조회 API 테스트 — 외부 API는 httpx.MockTransport로 대체.

CNPJ lookup tests. The registry API is replaced by an
``httpx.MockTransport`` on the service's shared client.
"""

import httpx
from httpx import AsyncClient

from app.services.cnpj_service import clean_cnpj, format_cnpj

CNPJ = "/api/cnpj"

BRASILAPI_PAYLOAD = {
    "cnpj": "12345678000190",
    "razao_social": "ACME COMERCIO LTDA",
    "nome_fantasia": "ACME",
    "logradouro": "RUA DAS FLORES",
    "numero": "100",
    "complemento": "SALA 2",
    "bairro": "CENTRO",
    "municipio": "SAO PAULO",
    "uf": "SP",
    "cep": "01001000",
    "ddd_telefone_1": "1133334444",
    "descricao_situacao_cadastral": "ATIVA",
    "cnae_fiscal_descricao": "Comercio varejista",
}


def use_transport(app, handler) -> list[httpx.Request]:
    """CNPJ 서비스의 HTTP 클라이언트를 목 전송으로 교체하고 요청 기록을 반환."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    app.state.services.cnpj.http_client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return seen


class TestCnpjHelpers:
    def test_clean_and_format(self):
        assert clean_cnpj("12.345.678/0001-90") == "12345678000190"
        assert format_cnpj("12345678000190") == "12.345.678/0001-90"
        assert format_cnpj("123") == "123"


class TestCnpjLookup:
    """CNPJ 조회 테스트."""

    async def test_lookup_success(self, client: AsyncClient, app, user_headers):
        """정규화된 등록 정보 반환, 주소는 번호/보충/구역 결합."""
        seen = use_transport(app, lambda request: httpx.Response(200, json=BRASILAPI_PAYLOAD))
        res = await client.get(f"{CNPJ}/12345678000190", headers=user_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["cnpj"] == "12.345.678/0001-90"
        assert data["razaoSocial"] == "ACME COMERCIO LTDA"
        assert data["nomeFantasia"] == "ACME"
        assert data["logradouro"] == "RUA DAS FLORES, 100 - SALA 2, CENTRO"
        assert data["telefone"] == "1133334444"
        assert data["situacao"] == "ATIVA"
        assert seen[0].url.path.endswith("/12345678000190")

    async def test_lookup_not_found(self, client: AsyncClient, app, user_headers):
        use_transport(app, lambda request: httpx.Response(404, json={"message": "not found"}))
        res = await client.get(f"{CNPJ}/12345678000190", headers=user_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "CNPJ_NOT_FOUND"

    async def test_lookup_upstream_error(self, client: AsyncClient, app, user_headers):
        """외부 API 오류는 502."""
        use_transport(app, lambda request: httpx.Response(500))
        res = await client.get(f"{CNPJ}/12345678000190", headers=user_headers)
        assert res.status_code == 502
        assert res.json()["code"] == "CNPJ_LOOKUP_FAILED"

    async def test_lookup_connection_error(self, client: AsyncClient, app, user_headers):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        use_transport(app, fail)
        res = await client.get(f"{CNPJ}/12345678000190", headers=user_headers)
        assert res.status_code == 502

    async def test_invalid_length(self, client: AsyncClient, app, user_headers):
        """14자리가 아니면 외부 호출 없이 400."""
        seen = use_transport(app, lambda request: httpx.Response(200, json=BRASILAPI_PAYLOAD))
        res = await client.get(f"{CNPJ}/123456", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_FAILED"
        assert seen == []

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.get(f"{CNPJ}/12345678000190")
        assert res.status_code == 401
