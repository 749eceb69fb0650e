from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from animalsos.domain.entities import Post, PublicUser, User, UserPatch, UserRole, public_user
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, require_role
from animalsos.services.auth_service import (
    AccountExistsError,
    AuthService,
    RegistrationError,
    UserNotFoundError,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[PublicUser])
def list_users(
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_role(UserRole.ADMIN)),
):
    return [public_user(user) for user in storage.get_all_users()]


@router.patch("/{user_id}", response_model=PublicUser)
def update_user(
    user_id: int,
    patch: UserPatch,
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_role(UserRole.ADMIN)),
):
    try:
        user = AuthService(storage).update_profile(user_id, patch)
    except UserNotFoundError:
        raise HTTPException(404, "User not found")
    except AccountExistsError as exc:
        raise HTTPException(409, str(exc))
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    return public_user(user)


@router.get("/{user_id}/posts", response_model=list[Post])
def user_posts(user_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_posts_by_user(user_id)
