"""
Storage contract shared by the memory and document backends.

Route handlers and services depend on ``Storage`` only; exactly one concrete
backend is built per process by ``animalsos.repositories.create_storage``.

Conventions for every entity kind:

- ``get_*`` returns ``None`` when no record matches, it never raises for a
  missing id.
- ``update_*`` merges only the fields set on the patch and returns the merged
  record, or ``None`` when the id is unknown. Reports get ``updated_at``
  refreshed on every update.
- Returned records are copies; mutating them never changes stored state.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Sequence, TypeVar

from pydantic import BaseModel

from animalsos.domain.entities import (
    Adoption,
    AdoptionCreate,
    AdoptionPatch,
    Donation,
    DonationCreate,
    DonationPatch,
    Post,
    PostCreate,
    PostPatch,
    Report,
    ReportCreate,
    ReportPatch,
    User,
    UserCreate,
    UserPatch,
    Vet,
    VetCreate,
    VetPatch,
)
from animalsos.services.session_store import SessionStore

E = TypeVar("E", bound=BaseModel)


def merge(entity: E, changes: dict[str, Any]) -> E:
    """Shallow-merge ``changes`` (keyed by Python field name) over ``entity``."""
    return type(entity).model_validate({**entity.model_dump(), **changes})


def newest_first_key(entity: Any) -> tuple[datetime, int]:
    return (entity.created_at, entity.id)


class Storage(ABC):
    """CRUD capability contract for the six entity kinds."""

    backend_name: str = "abstract"
    session_store: SessionStore

    # -------------------------- users --------------------------
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, payload: UserCreate) -> User: ...

    @abstractmethod
    def get_all_users(self) -> list[User]: ...

    @abstractmethod
    def update_user(self, user_id: int, patch: UserPatch) -> Optional[User]: ...

    # -------------------------- reports --------------------------
    @abstractmethod
    def create_report(self, payload: ReportCreate) -> Report: ...

    @abstractmethod
    def get_report(self, report_id: int) -> Optional[Report]: ...

    @abstractmethod
    def get_reports(self, limit: Optional[int] = None) -> list[Report]: ...

    @abstractmethod
    def get_reports_by_status(self, status: str) -> list[Report]: ...

    @abstractmethod
    def get_reports_by_user(self, user_id: int) -> list[Report]: ...

    @abstractmethod
    def update_report(self, report_id: int, patch: ReportPatch) -> Optional[Report]: ...

    # -------------------------- vets --------------------------
    @abstractmethod
    def create_vet(self, payload: VetCreate) -> Vet: ...

    @abstractmethod
    def get_vet(self, vet_id: int) -> Optional[Vet]: ...

    @abstractmethod
    def get_all_vets(self) -> list[Vet]: ...

    @abstractmethod
    def update_vet(self, vet_id: int, patch: VetPatch) -> Optional[Vet]: ...

    @abstractmethod
    def seed_vets(self) -> int:
        """Insert the sample vets when the collection is empty; returns the count inserted."""

    # -------------------------- adoptions --------------------------
    @abstractmethod
    def create_adoption(self, payload: AdoptionCreate) -> Adoption: ...

    @abstractmethod
    def get_adoption(self, adoption_id: int) -> Optional[Adoption]: ...

    @abstractmethod
    def get_all_adoptions(self) -> list[Adoption]: ...

    @abstractmethod
    def get_adoptions_by_type(self, animal_type: str) -> list[Adoption]: ...

    @abstractmethod
    def get_adoptions_by_status(self, status: str) -> list[Adoption]: ...

    @abstractmethod
    def update_adoption(self, adoption_id: int, patch: AdoptionPatch) -> Optional[Adoption]: ...

    # -------------------------- donations --------------------------
    @abstractmethod
    def create_donation(self, payload: DonationCreate) -> Donation: ...

    @abstractmethod
    def get_donation(self, donation_id: int) -> Optional[Donation]: ...

    @abstractmethod
    def get_all_donations(self) -> list[Donation]: ...

    @abstractmethod
    def update_donation(self, donation_id: int, patch: DonationPatch) -> Optional[Donation]: ...

    @abstractmethod
    def contribute_to_donation(self, donation_id: int, amount: int) -> Optional[Donation]:
        """Add ``amount`` to ``raised_amount``. No validation happens here."""

    # -------------------------- posts --------------------------
    @abstractmethod
    def create_post(self, payload: PostCreate) -> Post: ...

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Post]: ...

    @abstractmethod
    def get_all_posts(self) -> list[Post]: ...

    @abstractmethod
    def get_posts_by_user(self, user_id: int) -> list[Post]: ...

    @abstractmethod
    def update_post(self, post_id: int, patch: PostPatch) -> Optional[Post]: ...

    # -------------------------- lifecycle --------------------------
    def close(self) -> None:
        self.session_store.stop_pruning()


def limited(items: Sequence[E], limit: Optional[int]) -> list[E]:
    return list(items[:limit]) if limit else list(items)
