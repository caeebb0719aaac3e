from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.main import create_app


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    public = tmp_path / "public"
    (public / "images").mkdir(parents=True)
    (public / "images" / "sample.svg").write_text('<svg xmlns="http://www.w3.org/2000/svg"></svg>')
    (public / "index.html").write_text("<html><body>Lessons</body></html>")

    monkeypatch.setenv("PUBLIC_DIR", str(public))
    monkeypatch.setenv("MAX_LOGS", "200")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    return create_app(get_settings())


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
