"""Demo login. Not real authentication: fixed users, opaque fake tokens."""

from __future__ import annotations

import hmac

DEMO_USERS: dict[str, str] = {
    "admin": "12345",
    "user": "12345",
}


def authenticate(username: str, password: str) -> bool:
    expected = DEMO_USERS.get(username)
    if expected is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8"))


def issue_token(username: str) -> str:
    return f"token-{username}"
