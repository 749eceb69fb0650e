"""Request-scoped helpers shared by the routers."""
from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Request

from animalsos.core.config import Settings
from animalsos.domain.entities import User, UserRole
from animalsos.repositories.base import Storage
from animalsos.services.session_service import current_user


def get_storage(request: Request) -> Storage:
    storage = getattr(getattr(request.app, "state", None), "storage", None)
    if storage is None:
        raise RuntimeError("Storage not configured")
    return storage


def get_app_settings(request: Request) -> Settings:
    settings = getattr(getattr(request.app, "state", None), "settings", None)
    if settings is None:
        raise RuntimeError("Settings not configured")
    return settings


def optional_user(request: Request, storage: Storage = Depends(get_storage)) -> User | None:
    return current_user(request, storage)


def require_user(user: User | None = Depends(optional_user)) -> User:
    if user is None:
        raise HTTPException(401, "You must be logged in")
    return user


def require_role(*roles: UserRole) -> Callable[..., User]:
    allowed = {UserRole(role).value for role in roles}

    def _dependency(user: User = Depends(require_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(403, "Insufficient permissions")
        return user

    return _dependency


def not_found(entity: str) -> HTTPException:
    return HTTPException(404, f"{entity} not found")
