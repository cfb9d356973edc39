import sys
from pathlib import Path

import fakeredis.aioredis
import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from config import Settings, TransitionPolicy  # noqa: E402
from api.app.db import get_engine  # noqa: E402
from api.app.main import create_app  # noqa: E402
from api.app.repos_sqlalchemy import SqlOrderLedger  # noqa: E402
from api.app.services.order_lifecycle import OrderLifecycle  # noqa: E402

LEDGER_URL = "http://ledger.test/ledger"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def ledger(engine):
    return SqlOrderLedger(engine)


@pytest.fixture
def lifecycle(ledger):
    return OrderLifecycle(ledger, timezone="Asia/Jakarta")


@pytest.fixture
def redis():
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def settings():
    return Settings(
        ledger_url=LEDGER_URL,
        cache_ttl_seconds=3.0,
        public_base_url="https://order.hapiyo.test",
        transition_policy=TransitionPolicy.TERMINAL_LOCKED,
        allowed_origins="*",
    )


@pytest.fixture
async def app(settings, engine, redis):
    application = create_app(settings, redis=redis, engine=engine)
    # the gateway forwards to this same app's /ledger route
    await application.state.gateway.client.aclose()
    application.state.gateway.client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=application)
    )
    yield application
    await application.state.gateway.client.aclose()


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
