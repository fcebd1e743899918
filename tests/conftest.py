import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DEBUG", "false")


@pytest.fixture(autouse=True)
def fresh_point_service():
    """Each test gets its own stores behind the cached dependency."""
    from pointledger.deps import get_point_service
    get_point_service.cache_clear()
    yield
    get_point_service.cache_clear()


@pytest.fixture
def service():
    from pointledger.services.points import PointService
    from pointledger.storage.memory import InMemoryAccountStore, InMemoryHistoryLedger
    return PointService(InMemoryAccountStore(), InMemoryHistoryLedger())


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    from pointledger.main import app
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
