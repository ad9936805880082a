"""Shared pytest fixtures for the inequality engine test suite.

Provides:
- anyio_backend: run async tests on asyncio only
- client: AsyncClient bound to the FastAPI app over ASGI
"""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def client():
    """AsyncClient talking to the app in-process."""
    from src.api.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
