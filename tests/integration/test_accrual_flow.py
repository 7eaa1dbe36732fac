"""Integration tests for purchase + daily accrual (requires running PG + Redis).

Pre-condition: alembic upgrade head

Uses the session-scoped client fixture from tests/integration/conftest.py.
All tests share one event loop to avoid asyncpg pool cross-loop errors.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from src.yp_common.database import async_session_factory
from src.yp_common.datetime_utils import utc_today
from src.yp_common.errors import PositionNotEligibleError
from src.yp_earnings.infrastructure.earnings_repository import EarningsRepository
from src.yp_product.domain.models import Position
from src.yp_product.infrastructure.position_repository import PositionRepository

pytestmark = pytest.mark.asyncio(loop_scope="session")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _purchase(client: AsyncClient, headers: dict[str, str], product_id: str) -> dict:
    resp = await client.post(f"/api/v1/products/{product_id}/purchase", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


async def _earning_rows(position_id: str) -> int:
    async with async_session_factory() as db:
        count = await db.scalar(
            text("SELECT COUNT(*) FROM daily_earnings WHERE user_product_id = :id"),
            {"id": position_id},
        )
    return int(count)


async def _load_position(position_id: str, user_id: str) -> Position:
    async with async_session_factory() as db:
        positions = await PositionRepository().list_by_user(db, user_id, active_only=False)
    return next(p for p in positions if p.id == position_id)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestPurchase:
    async def test_purchase_opens_position_and_debits(
        self, client: AsyncClient, funded_user, product_id: str
    ) -> None:
        _, headers = funded_user
        data = await _purchase(client, headers, product_id)

        position = data["position"]
        assert data["balance_after_cents"] == 90_000
        assert position["days_remaining"] == 3
        assert position["total_earned_cents"] == 0
        assert position["is_active"] is True
        assert position["expires_at"] is not None

        resp = await client.get("/api/v1/wallet/transactions?type=purchase", headers=headers)
        items = resp.json()["data"]["items"]
        assert [i["amount_cents"] for i in items] == [-10_000]
        assert items[0]["reference_id"] == position["id"]

    async def test_insufficient_balance_rolls_back(
        self, client: AsyncClient, funded_user, product_id: str
    ) -> None:
        user_id, headers = funded_user
        async with async_session_factory() as db:
            await db.execute(
                text("UPDATE wallets SET balance = 500, withdrawable_balance = 500 WHERE user_id = :u"),
                {"u": user_id},
            )
            await db.commit()

        resp = await client.post(f"/api/v1/products/{product_id}/purchase", headers=headers)

        assert resp.status_code == 422
        assert resp.json()["code"] == 2001
        positions = await client.get("/api/v1/positions", headers=headers)
        assert positions.json()["data"]["items"] == []

    async def test_malformed_product_id_is_404(self, client: AsyncClient, funded_user) -> None:
        _, headers = funded_user
        resp = await client.post("/api/v1/products/abc/purchase", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001


class TestDailyAccrual:
    async def test_second_run_same_day_credits_nothing(
        self, client: AsyncClient, funded_user, product_id: str, admin_headers
    ) -> None:
        _, headers = funded_user
        position_id = (await _purchase(client, headers, product_id))["position"]["id"]

        first = await client.post("/api/v1/admin/earnings/run", headers=admin_headers)
        assert first.status_code == 200, first.text
        assert first.json()["data"]["processed"] >= 1

        second = await client.post("/api/v1/admin/earnings/run", headers=admin_headers)
        assert second.status_code == 200, second.text
        assert second.json()["data"]["processed"] == 0
        assert second.json()["data"]["errors"] == []

        assert await _earning_rows(position_id) == 1

        positions = (await client.get("/api/v1/positions", headers=headers)).json()["data"]["items"]
        mine = next(p for p in positions if p["id"] == position_id)
        assert mine["days_remaining"] == 2
        assert mine["total_earned_cents"] == 500
        assert mine["last_earning_date"] == utc_today().isoformat()

        balance = (await client.get("/api/v1/wallet/balance", headers=headers)).json()["data"]
        assert balance["balance_cents"] == 90_500
        assert balance["total_earnings_cents"] == 500

        txs = await client.get("/api/v1/wallet/transactions?type=earning", headers=headers)
        earning_txs = txs.json()["data"]["items"]
        assert [(t["amount_cents"], t["balance_after_cents"]) for t in earning_txs] == [
            (500, 90_500)
        ]

        earnings = (await client.get("/api/v1/earnings", headers=headers)).json()["data"]
        assert [e["amount_cents"] for e in earnings["items"]] == [500]
        summary = (await client.get("/api/v1/earnings/summary", headers=headers)).json()["data"]
        assert summary["total_cents"] == 500
        assert summary["days_credited"] == 1

    async def test_admin_daily_summary(self, client: AsyncClient, admin_headers) -> None:
        resp = await client.get("/api/v1/admin/earnings/summary", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["earning_date"] == utc_today().isoformat()

    async def test_non_admin_cannot_trigger(self, client: AsyncClient, funded_user) -> None:
        _, headers = funded_user
        resp = await client.post("/api/v1/admin/earnings/run", headers=headers)
        assert resp.status_code == 403


class TestLedgerGuards:
    async def test_guarded_update_rejects_same_day(
        self, client: AsyncClient, funded_user, product_id: str
    ) -> None:
        user_id, headers = funded_user
        position_id = (await _purchase(client, headers, product_id))["position"]["id"]
        position = await _load_position(position_id, user_id)
        transition = position.accrue(utc_today())
        repo = PositionRepository()

        async with async_session_factory() as db:
            eligible = await repo.select_eligible(db, utc_today())
            assert position_id in {p.id for p in eligible}
            await repo.update_after_accrual(db, transition)
            await db.commit()

            with pytest.raises(PositionNotEligibleError):
                await repo.update_after_accrual(db, transition)
            await db.rollback()

            eligible = await repo.select_eligible(db, utc_today())
            assert position_id not in {p.id for p in eligible}

    async def test_one_earning_row_per_position_per_day(
        self, client: AsyncClient, funded_user, product_id: str
    ) -> None:
        user_id, headers = funded_user
        position_id = (await _purchase(client, headers, product_id))["position"]["id"]
        repo = EarningsRepository()

        async with async_session_factory() as db:
            await repo.insert_earning(db, user_id, position_id, 500, utc_today())
            await db.commit()
            with pytest.raises(IntegrityError):
                await repo.insert_earning(db, user_id, position_id, 500, utc_today())
            await db.rollback()

        assert await _earning_rows(position_id) == 1
