from __future__ import annotations

import json
import uuid
from collections import deque
from threading import Lock
from typing import Any

from app.models.schemas import LogEntry
from app.services.errors import NotFoundError

UNSERIALIZABLE = "[unserializable]"
TRUNCATION_MARKER = "... (truncated)"


def format_body_preview(body: Any, limit: int = 500) -> str | None:
    """Render a request body for the console line.

    Returns None when there is nothing worth printing. Never raises: a body
    that cannot be serialized yields ``UNSERIALIZABLE``.
    """
    if body is None:
        return None
    if isinstance(body, (dict, list)) and not body:
        return None

    try:
        text = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return UNSERIALIZABLE

    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


class RequestHistory:
    """Bounded FIFO of completed requests, thread-safe and process-local."""

    def __init__(self, max_entries: int = 200, default_limit: int = 50) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.default_limit = default_limit
        self._lock = Lock()
        # deque(maxlen=...) drops the oldest entry as part of append.
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def clamp_limit(self, limit: int | None) -> int:
        if limit is None:
            limit = self.default_limit
        return max(1, min(int(limit), self.max_entries))

    def recent(self, limit: int | None = None) -> list[LogEntry]:
        """Newest first, at most ``limit`` entries (clamped to [1, max_entries])."""
        count = self.clamp_limit(limit)
        with self._lock:
            snapshot = list(self._entries)
        return snapshot[::-1][:count]

    def by_id(self, entry_id: str | uuid.UUID) -> LogEntry:
        try:
            wanted = entry_id if isinstance(entry_id, uuid.UUID) else uuid.UUID(str(entry_id))
        except ValueError as exc:
            raise NotFoundError("Log not found") from exc

        with self._lock:
            for entry in reversed(self._entries):
                if entry.id == wanted:
                    return entry
        raise NotFoundError("Log not found")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
