from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from animalsos.domain.entities import Post, PostCreate, Schema, User
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, not_found, require_user

router = APIRouter(prefix="/api/posts", tags=["posts"])


class PostSubmission(Schema):
    title: str
    content: str
    image_url: Optional[str] = None


@router.get("", response_model=list[Post])
def list_posts(storage: Storage = Depends(get_storage)):
    return storage.get_all_posts()


@router.get("/{post_id}", response_model=Post)
def get_post(post_id: int, storage: Storage = Depends(get_storage)):
    post = storage.get_post(post_id)
    if post is None:
        raise not_found("Post")
    return post


@router.post("", status_code=201, response_model=Post)
def create_post(
    payload: PostSubmission,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    return storage.create_post(PostCreate(**payload.model_dump(), user_id=user.id))
