"""Donation campaign use cases."""

from __future__ import annotations

from animalsos.domain.entities import Donation
from animalsos.repositories.base import Storage


class DonationError(Exception):
    """Base exception for donation workflow."""


class InvalidContributionError(DonationError):
    """Raised when the contributed amount is not a positive number."""


class CampaignNotFoundError(DonationError):
    pass


class DonationService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def contribute(self, donation_id: int, amount: int) -> Donation:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidContributionError("Contribution amount must be a positive number")
        updated = self.storage.contribute_to_donation(donation_id, amount)
        if updated is None:
            raise CampaignNotFoundError(f"Donation campaign {donation_id} not found")
        return updated
