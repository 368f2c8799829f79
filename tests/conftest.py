from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from workrules.core.rate_limit import limiter
from workrules.main import app

# Rate limiting has its own test; keep it out of the way elsewhere
limiter.enabled = False


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
