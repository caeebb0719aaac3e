from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LessonRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    location: str
    price: float = Field(ge=0)
    spaces: int = Field(ge=0)
    icon: str


class SpacesUpdateRequest(BaseModel):
    # Left untyped so the adjuster decides what counts as a valid delta.
    delta: Any = None


class SpacesUpdateResponse(BaseModel):
    lesson: LessonRecord


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: uuid.UUID
    time: datetime
    method: str
    url: str
    ip: str
    status: int
    duration_ms: float = Field(ge=0, alias="durationMs")
    request_body: Any | None = Field(default=None, alias="requestBody")


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    token: str


class CheckoutRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    items: list[Any] = Field(default_factory=list)


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    order_id: str = Field(alias="orderId")
