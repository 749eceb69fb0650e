from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from animalsos.core.config import Settings
from animalsos.domain.entities import PublicUser, User, UserCreate, public_user
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_app_settings, get_storage, require_user
from animalsos.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
)
from animalsos.services.session_service import (
    clear_session_cookie,
    end_session,
    issue_session,
    set_session_cookie,
)

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


def _login(response: Response, storage: Storage, settings: Settings, user: User) -> PublicUser:
    sid = issue_session(storage, user)
    set_session_cookie(response, sid, settings)
    return public_user(user)


@router.post("/register", status_code=201, response_model=PublicUser)
def register(
    payload: UserCreate,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user = AuthService(storage).register(payload)
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    except AccountExistsError as exc:
        raise HTTPException(409, str(exc))
    return _login(response, storage, settings, user)


@router.post("/login", response_model=PublicUser)
def login(
    payload: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user = AuthService(storage).authenticate(payload.username, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(401, str(exc))
    return _login(response, storage, settings, user)


@router.post("/logout")
def logout(request: Request, response: Response, storage: Storage = Depends(get_storage)):
    end_session(request, storage)
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/user", response_model=PublicUser)
def me(user: User = Depends(require_user)):
    return public_user(user)
