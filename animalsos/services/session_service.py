"""Session helpers (issue ids, cookies, current user lookup)."""
from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Request, Response

from animalsos.core.config import Settings
from animalsos.domain.entities import User
from animalsos.repositories.base import Storage

SESSION_COOKIE_NAME = "sid"


def issue_session(storage: Storage, user: User) -> str:
    """Create a new session id bound to ``user`` and persist it in the session store."""
    sid = secrets.token_urlsafe(32)
    storage.session_store.set(sid, {"userId": user.id})
    return sid


def current_user(request: Request, storage: Storage) -> Optional[User]:
    """Return the user associated with the session cookie, if any."""
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if not sid:
        return None
    data = storage.session_store.get(sid)
    if not data or data.get("userId") is None:
        return None
    return storage.get_user(int(data["userId"]))


def set_session_cookie(response: Response, sid: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        sid,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="lax",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


def end_session(request: Request, storage: Storage) -> None:
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if sid:
        storage.session_store.destroy(sid)
