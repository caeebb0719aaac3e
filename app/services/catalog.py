from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

from app.models.schemas import LessonRecord
from app.services.errors import NotFoundError

SEED_LESSONS: tuple[dict, ...] = (
    {"id": 1, "title": "Math Explorers", "location": "Room 1", "price": 12.5, "spaces": 10, "icon": "fa-calculator"},
    {"id": 2, "title": "Science Lab", "location": "Lab 3", "price": 15.0, "spaces": 8, "icon": "fa-flask"},
    {"id": 3, "title": "Creative Writing", "location": "Studio C", "price": 10.0, "spaces": 12, "icon": "fa-pen-fancy"},
    {"id": 4, "title": "Chess Club", "location": "Room 2", "price": 9.5, "spaces": 6, "icon": "fa-chess"},
    {"id": 5, "title": "Robotics", "location": "Lab 2", "price": 18.0, "spaces": 5, "icon": "fa-robot"},
    {"id": 6, "title": "Art & Design", "location": "Studio A", "price": 11.0, "spaces": 9, "icon": "fa-paint-brush"},
    {"id": 7, "title": "Drama Workshop", "location": "Theatre 2", "price": 13.0, "spaces": 7, "icon": "fa-theater-masks"},
    {"id": 8, "title": "Music Makers", "location": "Studio B", "price": 14.0, "spaces": 10, "icon": "fa-music"},
    {"id": 9, "title": "Coding for Kids", "location": "Lab 1", "price": 16.0, "spaces": 5, "icon": "fa-laptop-code"},
    {"id": 10, "title": "Language Club", "location": "Theatre 1", "price": 8.0, "spaces": 11, "icon": "fa-language"},
)


class CatalogStore:
    """In-memory, insertion-ordered lesson catalog (resets on restart).

    Records are immutable; a spaces change swaps in a new record under the
    record's lock, which only ``InventoryAdjuster`` takes.
    """

    def __init__(self, seed: Iterable[dict] = SEED_LESSONS) -> None:
        self._records: dict[int, LessonRecord] = {}
        for row in seed:
            record = LessonRecord(**row)
            if record.id in self._records:
                raise ValueError(f"Duplicate lesson id in seed: {record.id}")
            self._records[record.id] = record
        self._locks: dict[int, Lock] = {lesson_id: Lock() for lesson_id in self._records}

    def list(self) -> list[LessonRecord]:
        return list(self._records.values())

    def find_by_id(self, lesson_id: int) -> LessonRecord:
        record = self._records.get(lesson_id)
        if record is None:
            raise NotFoundError("Lesson not found")
        return record

    def lock_for(self, lesson_id: int) -> Lock:
        lock = self._locks.get(lesson_id)
        if lock is None:
            raise NotFoundError("Lesson not found")
        return lock

    def _replace(self, record: LessonRecord) -> None:
        # Ids are fixed at seed time; replacing never adds a record.
        if record.id not in self._records:
            raise NotFoundError("Lesson not found")
        self._records[record.id] = record
