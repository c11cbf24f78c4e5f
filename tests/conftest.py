from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from actionapi.main import create_app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as ac:
        yield ac
