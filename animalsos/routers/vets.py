from __future__ import annotations

from fastapi import APIRouter, Depends

from animalsos.domain.entities import User, UserRole, Vet, VetCreate, VetPatch
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, not_found, require_role

router = APIRouter(prefix="/api/vets", tags=["vets"])


@router.get("", response_model=list[Vet])
def list_vets(storage: Storage = Depends(get_storage)):
    return storage.get_all_vets()


@router.get("/{vet_id}", response_model=Vet)
def get_vet(vet_id: int, storage: Storage = Depends(get_storage)):
    vet = storage.get_vet(vet_id)
    if vet is None:
        raise not_found("Vet")
    return vet


@router.post("", status_code=201, response_model=Vet)
def create_vet(
    payload: VetCreate,
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_role(UserRole.ADMIN)),
):
    return storage.create_vet(payload)


@router.patch("/{vet_id}", response_model=Vet)
def update_vet(
    vet_id: int,
    patch: VetPatch,
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_role(UserRole.ADMIN)),
):
    vet = storage.update_vet(vet_id, patch)
    if vet is None:
        raise not_found("Vet")
    return vet
