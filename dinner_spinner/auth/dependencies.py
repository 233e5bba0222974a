from __future__ import annotations

import time
from typing import Any

from fastapi import Request

from ..errors import AuthError

SESSION_TTL_SECONDS = 24 * 60 * 60


def start_session(request: Request, user: dict[str, Any], now: float | None = None) -> None:
    """Re-issue the session for a freshly authenticated user."""
    request.session.clear()
    request.session["user"] = user
    request.session["issued_at"] = time.time() if now is None else now


def end_session(request: Request) -> None:
    request.session.clear()


def session_expired(session: dict[str, Any], now: float | None = None) -> bool:
    """Sessions last a fixed window from login; activity does not extend them."""
    issued_at = session.get("issued_at")
    if issued_at is None:
        return True
    current = time.time() if now is None else now
    return current - float(issued_at) >= SESSION_TTL_SECONDS


def get_current_user(request: Request) -> dict | None:
    """Return the user dict from the session, or ``None``."""
    user = request.session.get("user")
    if not user:
        return None
    if session_expired(request.session):
        request.session.clear()
        return None
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 unless the session belongs to a logged-in, unexpired admin."""
    user = get_current_user(request)
    if not user:
        raise AuthError("Authentication required")
    return user
