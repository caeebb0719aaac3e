from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_history
from app.models.schemas import LogEntry
from app.observability.history import RequestHistory

router = APIRouter(prefix="/api", tags=["logs"])


def _parse_limit(raw: str | None) -> int | None:
    # Anything that isn't an integer falls back to the default limit.
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


@router.get("/logs", response_model=list[LogEntry])
def recent_logs(limit: str | None = None, history: RequestHistory = Depends(get_history)) -> list[LogEntry]:
    return history.recent(_parse_limit(limit))


@router.get("/logs/{log_id}", response_model=LogEntry)
def log_by_id(log_id: str, history: RequestHistory = Depends(get_history)) -> LogEntry:
    return history.by_id(log_id)
