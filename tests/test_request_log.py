import asyncio
import logging
from datetime import datetime, timedelta, timezone

from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.main import create_app


async def test_logs_record_completed_requests_newest_first(api_client) -> None:
    await api_client.get("/api/lessons")
    await api_client.put("/api/lessons/2/spaces", json={"delta": -1})

    resp = await api_client.get("/api/logs")
    assert resp.status_code == 200
    logs = resp.json()
    assert [entry["url"] for entry in logs] == ["/api/lessons/2/spaces", "/api/lessons"]

    newest = logs[0]
    assert newest["method"] == "PUT"
    assert newest["status"] == 200
    assert newest["durationMs"] >= 0
    assert newest["requestBody"] == {"delta": -1}
    assert newest["ip"] == "127.0.0.1"
    assert logs[1]["requestBody"] is None


async def test_log_entry_lookup_by_request_id(api_client) -> None:
    resp = await api_client.put("/api/lessons/999/spaces", json={"delta": -1})
    request_id = resp.headers["x-request-id"]

    entry = await api_client.get(f"/api/logs/{request_id}")
    assert entry.status_code == 200
    assert entry.json()["id"] == request_id
    assert entry.json()["status"] == 404


async def test_log_lookup_unknown_id_is_404(api_client) -> None:
    resp = await api_client.get("/api/logs/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Log not found"}


async def test_logs_limit_and_query_string(api_client) -> None:
    for _ in range(3):
        await api_client.get("/api/lessons", params={"page": "1"})

    logs = (await api_client.get("/api/logs", params={"limit": "2"})).json()
    assert len(logs) == 2
    assert logs[0]["url"] == "/api/lessons?page=1"

    # Unparseable limits fall back to the default.
    logs = (await api_client.get("/api/logs", params={"limit": "lots"})).json()
    assert len(logs) == 4


async def test_forwarded_for_header_is_recorded(api_client) -> None:
    await api_client.get("/health", headers={"X-Forwarded-For": "203.0.113.9"})
    logs = (await api_client.get("/api/logs")).json()
    assert logs[0]["ip"] == "203.0.113.9"


async def test_buffer_evicts_oldest_requests(monkeypatch) -> None:
    monkeypatch.setenv("MAX_LOGS", "5")
    get_settings.cache_clear()
    app = create_app(get_settings())

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        for n in range(1, 9):
            await client.get("/health", params={"n": str(n)})
        logs = (await client.get("/api/logs", params={"limit": "100"})).json()

    assert [entry["url"] for entry in logs] == [f"/health?n={n}" for n in range(8, 3, -1)]
    assert len(app.state.history) == 5


async def test_unhandled_errors_are_recorded_as_500(monkeypatch, tmp_path) -> None:
    # Without a public dir there is no catch-all static mount ahead of /boom.
    monkeypatch.setenv("PUBLIC_DIR", str(tmp_path / "missing"))
    get_settings.cache_clear()
    app = create_app(get_settings())

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/boom")
    assert resp.status_code == 500
    # ServerErrorMiddleware answers from outside the request logger.
    assert "x-request-id" not in resp.headers

    entry = app.state.history.recent(1)[0]
    assert entry.url == "/boom"
    assert entry.status == 500


async def test_recording_failure_does_not_break_response(app, api_client, monkeypatch) -> None:
    def broken_append(entry) -> None:
        raise RuntimeError("history unavailable")

    monkeypatch.setattr(app.state.history, "append", broken_append)

    resp = await api_client.get("/api/lessons")
    assert resp.status_code == 200
    assert len(resp.json()) == 10


async def test_large_body_is_truncated_in_console_line(api_client, caplog) -> None:
    caplog.set_level(logging.INFO)
    resp = await api_client.post(
        "/api/checkout",
        json={"name": "Ada Lovelace", "phone": "07700900123", "items": ["x" * 600]},
    )
    assert resp.status_code == 200

    # structlog hands stdlib the event dict as the record message.
    events = [r.msg.get("event", "") if isinstance(r.msg, dict) else r.getMessage() for r in caplog.records]
    body_lines = [event for event in events if "Request body:" in event]
    assert body_lines
    assert body_lines[-1].endswith("... (truncated)")


async def test_deeply_nested_body_still_records_entry(app, api_client) -> None:
    resp = await api_client.put(
        "/api/lessons/1/spaces",
        content="[" * 5000 + "]" * 5000,
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400

    assert len(app.state.history) == 1
    entry = app.state.history.recent(1)[0]
    assert entry.status == 400
    assert entry.request_body is None


async def test_entry_time_is_request_start(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("PUBLIC_DIR", str(tmp_path / "missing"))
    get_settings.cache_clear()
    app = create_app(get_settings())

    @app.get("/slow")
    async def slow() -> dict[str, str]:
        await asyncio.sleep(0.3)
        return {"status": "ok"}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        before = datetime.now(timezone.utc)
        resp = await client.get("/slow")
        after = datetime.now(timezone.utc)
    assert resp.status_code == 200

    entry = app.state.history.recent(1)[0]
    assert entry.duration_ms >= 300
    assert before <= entry.time < before + timedelta(milliseconds=200)
    assert entry.time + timedelta(milliseconds=250) < after


async def test_json_body_recorded_when_route_never_reads_it(app, api_client) -> None:
    resp = await api_client.post("/health", json={"a": 1})
    assert resp.status_code == 405

    entry = app.state.history.recent(1)[0]
    assert entry.method == "POST"
    assert entry.request_body == {"a": 1}


async def test_replayed_body_reaches_route(api_client) -> None:
    resp = await api_client.put("/api/lessons/4/spaces", json={"delta": -2})
    assert resp.status_code == 200
    assert resp.json()["lesson"]["spaces"] == 4
