from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from app.models.schemas import LogEntry
from app.observability.history import RequestHistory, format_body_preview

# Bodies larger than this are timed and logged but not kept in the history.
_MAX_CAPTURED_BODY_BYTES = 64 * 1024

logger = logging.getLogger(__name__)


def _header(scope: dict[str, Any], name: bytes) -> str | None:
    for key, value in scope.get("headers") or []:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def _client_ip(scope: dict[str, Any]) -> str:
    forwarded = _header(scope, b"x-forwarded-for")
    if forwarded:
        return forwarded
    client = scope.get("client")
    if client and client[0]:
        return str(client[0])
    return "-"


def _original_url(scope: dict[str, Any]) -> str:
    path = scope.get("path", "")
    query = scope.get("query_string") or b""
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


def _is_json(scope: dict[str, Any]) -> bool:
    return "json" in (_header(scope, b"content-type") or "").lower()


def _decode_body(scope: dict[str, Any], raw: bytes) -> Any | None:
    if not raw or not _is_json(scope):
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None


class RequestLogMiddleware:
    """Times every HTTP request and records it in a ``RequestHistory``.

    JSON request bodies are read up front and replayed downstream, so the
    entry carries the body even when the route never reads it (404, 405).
    The history entry id doubles as the ``X-Request-ID`` response header,
    except on unhandled exceptions: Starlette's ``ServerErrorMiddleware``
    sends that 500 from outside this middleware, so it carries no id even
    though the entry is recorded.
    Nothing in the recording path is allowed to fail the request.
    """

    def __init__(self, app: Callable[..., Any], history: RequestHistory, body_preview_chars: int = 500) -> None:
        self.app = app
        self.history = history
        self.body_preview_chars = body_preview_chars

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        entry_id = uuid.uuid4()
        method = scope.get("method", "-")
        url = _original_url(scope)
        ip = _client_ip(scope)

        structlog.contextvars.bind_contextvars(request_id=str(entry_id))

        start = perf_counter()
        started_at = datetime.now(timezone.utc)
        status_code: int = 500
        pending: list[dict[str, Any]] = []
        body_chunks: list[bytes] = []
        body_size = 0

        if _is_json(scope):
            while True:
                message = await receive()
                pending.append(message)
                if message.get("type") != "http.request":
                    break
                chunk = message.get("body", b"")
                body_size += len(chunk)
                if body_size > _MAX_CAPTURED_BODY_BYTES:
                    break
                body_chunks.append(chunk)
                if not message.get("more_body", False):
                    break

        async def receive_wrapper() -> dict[str, Any]:
            if pending:
                return pending.pop(0)
            return await receive()

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = str(entry_id)

            await send(message)

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0
            try:
                raw = b"" if body_size > _MAX_CAPTURED_BODY_BYTES else b"".join(body_chunks)
                entry = LogEntry(
                    id=entry_id,
                    time=started_at,
                    method=method,
                    url=url,
                    ip=ip,
                    status=status_code,
                    duration_ms=round(elapsed_ms, 2),
                    request_body=_decode_body(scope, raw),
                )
                self.history.append(entry)
                self._emit(entry)
            except Exception:  # noqa: BLE001 - observability must not break the response
                logger.warning("request_log.failed", exc_info=True)
            finally:
                structlog.contextvars.clear_contextvars()

    def _emit(self, entry: LogEntry) -> None:
        access = structlog.get_logger("access")
        access.info(
            f"[{entry.time.isoformat()}] {entry.ip} {entry.method} {entry.url} "
            f"-> {entry.status} {entry.duration_ms}ms",
        )
        preview = format_body_preview(entry.request_body, limit=self.body_preview_chars)
        if preview is not None:
            access.info(f"  Request body: {preview}")
