"""Integration-test fixtures (requires running PG + Redis, migrated schema).

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

When PostgreSQL or Redis is unreachable, or `alembic upgrade head` has not
been run, every test here is skipped.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.yp_common.database import async_session_factory, engine
from src.yp_common.enums import UserRole
from src.yp_common.redis_client import get_redis
from src.yp_gateway.auth.jwt_handler import create_access_token


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def backend_ready() -> None:
    try:
        async with engine.connect() as conn:
            table = await conn.scalar(text("SELECT to_regclass('public.daily_earnings')"))
        redis = await get_redis()
        await redis.ping()
    except Exception as e:
        pytest.skip(f"PostgreSQL/Redis not available: {e}")
    if table is None:
        pytest.skip("Schema not migrated: run `alembic upgrade head`")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(backend_ready: None) -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(scope="session")
def admin_headers() -> dict[str, str]:
    token = create_access_token(f"admin_{uuid.uuid4().hex[:8]}", UserRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(loop_scope="session")
async def funded_user(backend_ready: None) -> tuple[str, dict[str, str]]:
    """A fresh wallet holding $1,000.00; returns (user_id, auth headers)."""
    user_id = f"it_{uuid.uuid4().hex[:12]}"
    async with async_session_factory() as db:
        await db.execute(
            text("""
                INSERT INTO wallets (user_id, balance, withdrawable_balance)
                VALUES (:user_id, 100000, 100000)
            """),
            {"user_id": user_id},
        )
        await db.commit()
    token = create_access_token(user_id)
    return user_id, {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(loop_scope="session")
async def product_id(backend_ready: None) -> str:
    """An active product: $100.00 price, $5.00 a day for 3 days."""
    async with async_session_factory() as db:
        new_id = await db.scalar(
            text("""
                INSERT INTO products (name, price, daily_earning, contract_days)
                VALUES (:name, 10000, 500, 3)
                RETURNING id
            """),
            {"name": f"IT product {uuid.uuid4().hex[:6]}"},
        )
        await db.commit()
    return str(new_id)
