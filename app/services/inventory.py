from __future__ import annotations

import logging
from typing import Any

from app.models.schemas import LessonRecord
from app.services.catalog import CatalogStore
from app.services.errors import InsufficientCapacityError, InvalidInputError

logger = logging.getLogger(__name__)


def parse_delta(raw: Any) -> int:
    """Return ``raw`` as an int, or raise ``InvalidInputError``.

    JSON numbers only: bools, strings and null are rejected, and floats must be
    integral (``2.0`` is accepted, ``2.5`` is not).
    """
    if isinstance(raw, bool):
        raise InvalidInputError("Invalid delta")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    raise InvalidInputError("Invalid delta")


class InventoryAdjuster:
    """Sole mutator of ``LessonRecord.spaces``."""

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def adjust_spaces(self, lesson_id: int, delta: Any) -> LessonRecord:
        # Unknown ids are reported before the delta is looked at.
        lock = self._store.lock_for(lesson_id)
        amount = parse_delta(delta)

        with lock:
            current = self._store.find_by_id(lesson_id)
            new_spaces = current.spaces + amount
            if new_spaces < 0:
                logger.info(
                    "spaces.rejected",
                    extra={"lesson_id": lesson_id, "spaces": current.spaces, "delta": amount},
                )
                raise InsufficientCapacityError("Not enough spaces")

            updated = current.model_copy(update={"spaces": new_spaces})
            self._store._replace(updated)

        logger.info(
            "spaces.adjusted",
            extra={"lesson_id": lesson_id, "delta": amount, "spaces": new_spaces},
        )
        return updated
