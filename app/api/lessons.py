from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_adjuster, get_catalog
from app.models.schemas import LessonRecord, SpacesUpdateRequest, SpacesUpdateResponse
from app.services.catalog import CatalogStore
from app.services.errors import NotFoundError
from app.services.inventory import InventoryAdjuster

router = APIRouter(prefix="/api", tags=["lessons"])


def _parse_lesson_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise NotFoundError("Lesson not found") from exc


@router.get("/lessons", response_model=list[LessonRecord])
def list_lessons(catalog: CatalogStore = Depends(get_catalog)) -> list[LessonRecord]:
    return catalog.list()


@router.put("/lessons/{lesson_id}/spaces", response_model=SpacesUpdateResponse)
def update_spaces(
    lesson_id: str,
    payload: SpacesUpdateRequest | None = None,
    adjuster: InventoryAdjuster = Depends(get_adjuster),
) -> SpacesUpdateResponse:
    delta = payload.delta if payload is not None else None
    lesson = adjuster.adjust_spaces(_parse_lesson_id(lesson_id), delta)
    return SpacesUpdateResponse(lesson=lesson)
