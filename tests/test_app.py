"""애플리케이션 공통 동작 테스트 — 헬스 체크, 요청 ID, 보안 헤더, 오류 본문.

Application-level tests: health check, request id propagation, security
headers and the common error body.
"""

from httpx import AsyncClient


class TestHealth:
    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok", "service": "mypila-backend"}


class TestRequestContext:
    """요청 ID와 보안 헤더 테스트."""

    async def test_request_id_generated(self, client: AsyncClient):
        """요청 ID가 없으면 생성."""
        res = await client.get("/health")
        assert res.headers["X-Request-ID"]

    async def test_request_id_kept(self, client: AsyncClient):
        """들어온 요청 ID 유지."""
        res = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert res.headers["X-Request-ID"] == "req-123"

    async def test_security_headers(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.headers["X-Frame-Options"] == "DENY"
        assert res.headers["X-Content-Type-Options"] == "nosniff"


class TestErrorBody:
    """공통 오류 본문 테스트."""

    async def test_error_body_carries_request_id(self, client: AsyncClient):
        """{detail, code, requestId} 형식."""
        res = await client.get("/api/companies", headers={"X-Request-ID": "req-456"})
        assert res.status_code == 401
        body = res.json()
        assert body["code"] == "MISSING_TOKEN"
        assert body["detail"]
        assert body["requestId"] == "req-456"

    async def test_unknown_route(self, client: AsyncClient):
        res = await client.get("/api/nao-existe")
        assert res.status_code == 404
        assert res.json()["code"] == "NOT_FOUND"

    async def test_malformed_id(self, client: AsyncClient, user_headers):
        """잘못된 UUID 경로 파라미터는 400."""
        res = await client.delete("/api/companies/nao-e-uuid", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_FAILED"
