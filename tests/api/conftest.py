"""API test fixtures — in-process FastAPI client.

Design Decisions:
    - httpx ASGITransport: no socket, no uvicorn; lifespan is not run
"""

import pytest
from httpx import ASGITransport, AsyncClient

from healthd.main import create_app


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
