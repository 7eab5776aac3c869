"""시드 데이터 테스트 — 데모 계정, 회사, 거래 생성과 멱등성."""

from app.seed import DEMO_EMAIL, seed_storage


class TestSeed:
    async def test_seed_creates_demo_data(self, storage):
        """데모 사용자, 기본 카테고리가 있는 회사, 샘플 거래 생성."""
        assert await seed_storage(storage) is True

        user = await storage.users.get_by_email(DEMO_EMAIL)
        assert user is not None
        companies = await storage.companies.list_by_user(user.id)
        assert [company.name for company in companies] == ["M2M Financeiro"]
        assert len(await storage.categories.list_by_company(companies[0].id)) == 5
        assert await storage.transactions.count() == 12 + 18

    async def test_seed_is_idempotent(self, storage):
        assert await seed_storage(storage) is True
        assert await seed_storage(storage) is False
        assert await storage.users.count() == 1
