from __future__ import annotations

from fastapi import APIRouter

from app.models.schemas import LoginRequest, LoginResponse
from app.services.auth_service import authenticate, issue_token
from app.services.errors import InvalidCredentialsError

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest) -> LoginResponse:
    if not authenticate(payload.username, payload.password):
        raise InvalidCredentialsError("Invalid credentials")
    return LoginResponse(token=issue_token(payload.username))
