from __future__ import annotations

from fastapi import APIRouter

from app.models.schemas import CheckoutRequest, CheckoutResponse
from app.services.checkout_service import place_order

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/checkout", response_model=CheckoutResponse)
def checkout(payload: CheckoutRequest) -> CheckoutResponse:
    order_id = place_order(name=payload.name, phone=payload.phone, items=payload.items)
    return CheckoutResponse(order_id=order_id)
