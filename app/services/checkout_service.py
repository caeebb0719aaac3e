from __future__ import annotations

import logging
import re
import uuid
from typing import Any

from app.services.errors import InvalidInputError

_NAME_RE = re.compile(r"^[A-Za-z ]{2,}$")
_PHONE_RE = re.compile(r"^\d{7,20}$")

logger = logging.getLogger(__name__)


def is_valid_name(name: str | None) -> bool:
    return bool(_NAME_RE.match((name or "").strip()))


def is_valid_phone(phone: str | None) -> bool:
    digits = re.sub(r"\D", "", phone or "")
    return bool(_PHONE_RE.match(digits))


def place_order(name: str | None, phone: str | None, items: list[Any]) -> str:
    """Validate contact details and return a new order id. No payment, no stock change."""
    if not is_valid_name(name) or not is_valid_phone(phone):
        raise InvalidInputError("Invalid name or phone")

    order_id = f"ORD-{uuid.uuid4()}"
    logger.info("checkout.accepted", extra={"order_id": order_id, "item_count": len(items)})
    return order_id
