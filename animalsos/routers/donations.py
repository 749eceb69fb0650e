from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import StrictInt

from animalsos.domain.entities import Donation, DonationCreate, Schema, User, UserRole
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, not_found, require_role, require_user
from animalsos.services.donation_service import (
    CampaignNotFoundError,
    DonationService,
    InvalidContributionError,
)

router = APIRouter(prefix="/api/donations", tags=["donations"])


class Contribution(Schema):
    amount: StrictInt


@router.get("", response_model=list[Donation])
def list_donations(storage: Storage = Depends(get_storage)):
    return storage.get_all_donations()


@router.get("/{donation_id}", response_model=Donation)
def get_donation(donation_id: int, storage: Storage = Depends(get_storage)):
    donation = storage.get_donation(donation_id)
    if donation is None:
        raise not_found("Donation campaign")
    return donation


@router.post("", status_code=201, response_model=Donation)
def create_donation(
    payload: DonationCreate,
    storage: Storage = Depends(get_storage),
    _staff: User = Depends(require_role(UserRole.NGO, UserRole.ADMIN)),
):
    return storage.create_donation(payload)


@router.post("/{donation_id}/contribute", response_model=Donation)
def contribute(
    donation_id: int,
    payload: Contribution,
    storage: Storage = Depends(get_storage),
    _user: User = Depends(require_user),
):
    # payment capture is mocked; the contribution is recorded as-is
    try:
        return DonationService(storage).contribute(donation_id, payload.amount)
    except InvalidContributionError as exc:
        raise HTTPException(400, str(exc))
    except CampaignNotFoundError:
        raise not_found("Donation campaign")
