"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신/재사용 감지, 로그아웃, 비밀번호 재설정.

Auth API tests — Registration, login, refresh token rotation and reuse
detection, logout, password reset and the /me endpoint.
"""

import hashlib
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from app.models.token import RefreshToken
from app.repositories.token_repository import RefreshTokenRepository
from app.utils.jwt import create_access_token
from app.utils.tokens import hash_token
from tests.conftest import TEST_PASSWORD, auth_header

AUTH = "/api/auth"


async def register(client: AsyncClient, email: str = "nova@example.com") -> dict:
    res = await client.post(f"{AUTH}/register", json={
        "name": "Nova Conta",
        "email": email,
        "password": "segredo1",
    })
    assert res.status_code == 201
    return res.json()


class TestRegister:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient):
        """가입 성공 시 토큰 쌍과 사용자 반환."""
        data = await register(client)
        assert data["accessToken"]
        assert len(data["refreshToken"]) == 64
        assert data["expiresIn"] == 30 * 60
        assert data["user"]["email"] == "nova@example.com"
        assert "passwordHash" not in data["user"]

    async def test_register_normalises_email(self, client: AsyncClient):
        """이메일은 소문자로 저장."""
        data = await register(client, "  Nova@Example.COM ")
        assert data["user"]["email"] == "nova@example.com"

    async def test_register_duplicate_email(self, client: AsyncClient, user):
        """이미 등록된 이메일은 409."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Outra",
            "email": "MARIA@example.com",
            "password": "segredo1",
        })
        assert res.status_code == 409
        assert res.json()["code"] == "EMAIL_ALREADY_EXISTS"

    async def test_register_short_password(self, client: AsyncClient):
        """6자 미만 비밀번호는 400 VALIDATION_FAILED."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Curta",
            "email": "curta@example.com",
            "password": "123",
        })
        assert res.status_code == 400
        body = res.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert any(error["field"] == "password" for error in body["errors"])

    async def test_register_invalid_email(self, client: AsyncClient):
        """잘못된 이메일 형식은 400."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Sem Email",
            "email": "not-an-email",
            "password": "segredo1",
        })
        assert res.status_code == 400

    async def test_register_rejects_script_in_name(self, client: AsyncClient):
        """이름에 스크립트가 있으면 거부."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "<script>alert(1)</script>",
            "email": "xss@example.com",
            "password": "segredo1",
        })
        assert res.status_code == 400


class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, user):
        """올바른 자격 증명으로 로그인."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 200
        data = res.json()
        assert data["user"]["id"] == str(user.id)
        assert data["refreshToken"]

    async def test_login_wrong_password(self, client: AsyncClient, user):
        """잘못된 비밀번호는 401 INVALID_CREDENTIALS."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": "errada123",
        })
        assert res.status_code == 401
        assert res.json()["code"] == "INVALID_CREDENTIALS"

    async def test_login_unknown_email_same_answer(self, client: AsyncClient, user):
        """없는 이메일도 동일한 401 응답."""
        wrong = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": "errada123",
        })
        unknown = await client.post(f"{AUTH}/login", json={
            "email": "ninguem@example.com",
            "password": "errada123",
        })
        assert unknown.status_code == 401
        assert unknown.json()["detail"] == wrong.json()["detail"]

    async def test_two_logins_are_independent_sessions(self, client: AsyncClient, user):
        """두 번 로그인하면 각각 독립적으로 갱신 가능한 토큰 발급."""
        credentials = {"email": "maria@example.com", "password": TEST_PASSWORD}
        first = (await client.post(f"{AUTH}/login", json=credentials)).json()["refreshToken"]
        second = (await client.post(f"{AUTH}/login", json=credentials)).json()["refreshToken"]
        assert first != second

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": first})
        assert res.status_code == 200
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": second})
        assert res.status_code == 200

    async def test_only_token_hash_is_stored(self, client: AsyncClient, storage, user):
        """저장소에는 SHA-256 해시만 존재, 평문으로는 조회 불가."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": TEST_PASSWORD,
        })
        plaintext = res.json()["refreshToken"]

        stored = await storage.refresh_tokens.get_by_hash(hashlib.sha256(plaintext.encode()).hexdigest())
        assert stored is not None
        assert stored.token_hash != plaintext
        assert plaintext not in {str(getattr(stored, column.key)) for column in RefreshToken.__table__.columns}
        assert await storage.refresh_tokens.get_by_hash(plaintext) is None


class TestRefresh:
    """리프레시 토큰 회전 테스트."""

    async def test_refresh_rotates_token(self, client: AsyncClient):
        """갱신 시 새 토큰 쌍 발급, 이전 토큰은 폐기."""
        data = await register(client)
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 200
        rotated = res.json()
        assert rotated["refreshToken"] != data["refreshToken"]
        assert rotated["accessToken"]

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": rotated["refreshToken"]})
        assert res.status_code == 200

    async def test_refresh_reuse_revokes_all_sessions(self, client: AsyncClient):
        """폐기된 토큰 재사용 시 모든 세션 폐기."""
        data = await register(client)
        first = data["refreshToken"]
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": first})
        second = res.json()["refreshToken"]

        # 이미 회전된 토큰 재사용 — Replay the rotated token
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": first})
        assert res.status_code == 401
        assert res.json()["code"] == "INVALID_TOKEN"

        # 정상 토큰도 폐기됨 — The live token is now revoked too
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": second})
        assert res.status_code == 401

    async def test_refresh_unknown_token(self, client: AsyncClient):
        """알 수 없는 토큰은 401."""
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": "f" * 64})
        assert res.status_code == 401

    async def test_refresh_empty_token(self, client: AsyncClient):
        """빈 토큰은 400."""
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": ""})
        assert res.status_code == 400

    async def test_refresh_expired_token(self, client: AsyncClient, storage):
        """만료된 토큰은 401, 이후 폐기 상태."""
        data = await register(client)
        stored = await storage.refresh_tokens.get_by_hash(hash_token(data["refreshToken"]))
        stored.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        await storage.commit()

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 401
        stored = await storage.refresh_tokens.get_by_hash(hash_token(data["refreshToken"]))
        assert stored.is_revoked is True

    async def test_refresh_at_expiry_instant_still_valid(self, client: AsyncClient, storage, monkeypatch):
        """만료 시각과 정확히 같은 시점에는 아직 만료 아님."""
        data = await register(client)
        instant = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        stored = await storage.refresh_tokens.get_by_hash(hash_token(data["refreshToken"]))
        stored.expires_at = instant
        await storage.commit()

        monkeypatch.setattr("app.services.auth_service.utc_now", lambda: instant)
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 200

    async def test_refresh_survives_failed_revoke(self, client: AsyncClient, storage, monkeypatch):
        """이전 토큰 폐기가 실패해도 새 토큰 쌍은 저장되고 반환됨."""
        data = await register(client)

        async def failing_revoke(repo, token_id, now):
            # NOT NULL 위반으로 flush 실패 — Flush fails on a NOT NULL column
            repo.db.add(RefreshToken(user_id=token_id, token_hash=None, expires_at=now))
            await repo.db.flush()

        monkeypatch.setattr(RefreshTokenRepository, "revoke", failing_revoke)
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 200
        rotated = res.json()["refreshToken"]
        monkeypatch.undo()

        stored = await storage.refresh_tokens.get_by_hash(hash_token(rotated))
        assert stored is not None
        assert stored.is_revoked is False
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": rotated})
        assert res.status_code == 200


class TestLogout:
    """로그아웃 테스트."""

    async def test_logout_revokes_token(self, client: AsyncClient):
        """로그아웃 후 해당 토큰으로 갱신 불가."""
        data = await register(client)
        res = await client.post(f"{AUTH}/logout", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 200
        assert res.json()["message"] == "Logout realizado com sucesso"

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": data["refreshToken"]})
        assert res.status_code == 401

    async def test_logout_unknown_token_succeeds(self, client: AsyncClient):
        """알 수 없는 토큰도 성공 응답."""
        res = await client.post(f"{AUTH}/logout", json={"refreshToken": "nao-existe"})
        assert res.status_code == 200

    async def test_logout_all(self, client: AsyncClient):
        """모든 세션 폐기 — 폐기 수 반환."""
        data = await register(client)
        login = await client.post(f"{AUTH}/login", json={
            "email": "nova@example.com",
            "password": "segredo1",
        })
        assert login.status_code == 200

        res = await client.post(f"{AUTH}/logout-all", headers=auth_header(data["accessToken"]))
        assert res.status_code == 200
        assert res.json()["tokensRevoked"] == 2

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": login.json()["refreshToken"]})
        assert res.status_code == 401

    async def test_logout_all_requires_auth(self, client: AsyncClient):
        """인증 없이 호출하면 401 MISSING_TOKEN."""
        res = await client.post(f"{AUTH}/logout-all")
        assert res.status_code == 401
        assert res.json()["code"] == "MISSING_TOKEN"


class TestPasswordReset:
    """비밀번호 재설정 테스트."""

    async def test_forgot_password_same_message(self, client: AsyncClient, user):
        """가입 여부와 무관하게 같은 메시지."""
        known = await client.post(f"{AUTH}/forgot-password", json={"email": "maria@example.com"})
        unknown = await client.post(f"{AUTH}/forgot-password", json={"email": "ninguem@example.com"})
        assert known.status_code == 200
        assert unknown.status_code == 200
        assert known.json() == unknown.json()

    async def test_reset_password_flow(self, client: AsyncClient, app, user):
        """메일 토큰으로 비밀번호 변경 후 새 비밀번호로 로그인."""
        sent: dict[str, str] = {}

        async def capture(to: str, name: str, token: str) -> bool:
            sent["token"] = token
            return True

        app.state.services.email.send_password_reset = capture
        login = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": TEST_PASSWORD,
        })
        await client.post(f"{AUTH}/forgot-password", json={"email": "maria@example.com"})
        assert "token" in sent

        res = await client.post(f"{AUTH}/reset-password", json={
            "token": sent["token"],
            "newPassword": "novasenha1",
        })
        assert res.status_code == 200

        # 기존 세션 폐기 — Existing sessions were revoked
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": login.json()["refreshToken"]})
        assert res.status_code == 401

        res = await client.post(f"{AUTH}/login", json={
            "email": "maria@example.com",
            "password": "novasenha1",
        })
        assert res.status_code == 200

        # 토큰은 한 번만 사용 — Single use
        res = await client.post(f"{AUTH}/reset-password", json={
            "token": sent["token"],
            "newPassword": "outrasenha1",
        })
        assert res.status_code == 400

    async def test_new_reset_token_replaces_previous(self, client: AsyncClient, app, storage, user):
        """재설정 요청을 다시 하면 이전 토큰은 삭제되고 해시만 저장."""
        sent: list[str] = []

        async def capture(to: str, name: str, token: str) -> bool:
            sent.append(token)
            return True

        app.state.services.email.send_password_reset = capture
        await client.post(f"{AUTH}/forgot-password", json={"email": "maria@example.com"})
        await client.post(f"{AUTH}/forgot-password", json={"email": "maria@example.com"})
        first, second = sent

        assert await storage.reset_tokens.count() == 1
        assert await storage.reset_tokens.get_by_hash(first) is None
        assert await storage.reset_tokens.get_by_hash(second) is None
        assert await storage.reset_tokens.get_by_hash(hash_token(second)) is not None

        res = await client.post(f"{AUTH}/reset-password", json={"token": first, "newPassword": "novasenha1"})
        assert res.status_code == 400
        res = await client.post(f"{AUTH}/reset-password", json={"token": second, "newPassword": "novasenha1"})
        assert res.status_code == 200

    async def test_reset_password_invalid_token(self, client: AsyncClient):
        """알 수 없는 토큰은 400."""
        res = await client.post(f"{AUTH}/reset-password", json={
            "token": "a" * 64,
            "newPassword": "novasenha1",
        })
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_TOKEN"


class TestMe:
    """현재 사용자 조회 테스트."""

    async def test_me(self, client: AsyncClient, user, user_headers):
        """토큰의 사용자 정보 반환."""
        res = await client.get(f"{AUTH}/me", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["user"]["email"] == "maria@example.com"

    async def test_me_invalid_token(self, client: AsyncClient):
        """서명이 잘못된 토큰은 401 INVALID_TOKEN."""
        res = await client.get(f"{AUTH}/me", headers=auth_header("not.a.jwt"))
        assert res.status_code == 401
        assert res.json()["code"] == "INVALID_TOKEN"

    async def test_me_expired_token(self, client: AsyncClient, user, settings):
        """만료된 토큰은 401 TOKEN_EXPIRED."""
        expired = settings.model_copy(update={"JWT_ACCESS_TOKEN_EXPIRE_MINUTES": -1})
        token = create_access_token({"sub": str(user.id), "email": user.email}, expired)
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["code"] == "TOKEN_EXPIRED"
