from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from animalsos.domain.entities import (
    Adoption,
    AdoptionCreate,
    AdoptionPatch,
    AdoptionStatus,
    User,
    UserRole,
)
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, not_found, require_role

router = APIRouter(prefix="/api/adoptions", tags=["adoptions"])

_staff = require_role(UserRole.NGO, UserRole.ADMIN)


@router.get("", response_model=list[Adoption])
def list_adoptions(
    animal_type: Optional[str] = Query(None, alias="type"),
    status: Optional[AdoptionStatus] = None,
    storage: Storage = Depends(get_storage),
):
    if animal_type:
        adoptions = storage.get_adoptions_by_type(animal_type)
        if status is not None:
            wanted = AdoptionStatus(status).value
            adoptions = [a for a in adoptions if a.status == wanted]
        return adoptions
    if status is not None:
        return storage.get_adoptions_by_status(AdoptionStatus(status).value)
    return storage.get_all_adoptions()


@router.get("/{adoption_id}", response_model=Adoption)
def get_adoption(adoption_id: int, storage: Storage = Depends(get_storage)):
    adoption = storage.get_adoption(adoption_id)
    if adoption is None:
        raise not_found("Adoption listing")
    return adoption


@router.post("", status_code=201, response_model=Adoption)
def create_adoption(
    payload: AdoptionCreate,
    storage: Storage = Depends(get_storage),
    _user: User = Depends(_staff),
):
    return storage.create_adoption(payload)


@router.patch("/{adoption_id}", response_model=Adoption)
def update_adoption(
    adoption_id: int,
    patch: AdoptionPatch,
    storage: Storage = Depends(get_storage),
    _user: User = Depends(_staff),
):
    adoption = storage.update_adoption(adoption_id, patch)
    if adoption is None:
        raise not_found("Adoption listing")
    return adoption
