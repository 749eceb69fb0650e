"""
In-memory storage backend.

Six ordered lists plus one id counter per entity kind. Lookups and filters
are linear scans; "newest first" views are sorted copies built at query
time. Everything is lost when the process exits.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel

from animalsos.core.security import hash_password
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
    utcnow,
)
from animalsos.repositories import seed
from animalsos.repositories.base import Storage, limited, merge, newest_first_key
from animalsos.services.session_store import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)

_KINDS = ("user", "report", "vet", "adoption", "donation", "post")


class MemoryStorage(Storage):
    """Storage kept in process memory, guarded by a single lock."""

    backend_name = "memory"

    def __init__(
        self,
        *,
        seed_data: bool = True,
        admin_password: str = "admin123",
        session_store: SessionStore | None = None,
    ) -> None:
        self.session_store = session_store or MemorySessionStore()
        self.users: list[User] = []
        self.reports: list[Report] = []
        self.vets: list[Vet] = []
        self.adoptions: list[Adoption] = []
        self.donations: list[Donation] = []
        self.posts: list[Post] = []
        self._next_ids = {kind: 1 for kind in _KINDS}
        self._lock = threading.RLock()
        self._seeded = False
        if seed_data:
            self.seed_sample_data(admin_password)

    # -------------------------- internals --------------------------
    def _allocate_id(self, kind: str) -> int:
        value = self._next_ids[kind]
        self._next_ids[kind] = value + 1
        return value

    def _insert(self, kind: str, collection: list[E], build: Callable[[int], E]) -> E:
        with self._lock:
            entity = build(self._allocate_id(kind))
            collection.append(entity)
            return entity.model_copy(deep=True)

    def _find(self, collection: list[E], predicate: Callable[[E], bool]) -> Optional[E]:
        with self._lock:
            for entity in collection:
                if predicate(entity):
                    return entity.model_copy(deep=True)
        return None

    def _filter(
        self,
        collection: list[E],
        predicate: Callable[[E], bool] | None = None,
        *,
        newest_first: bool = False,
    ) -> list[E]:
        with self._lock:
            items: Iterable[E] = (e for e in collection if predicate is None or predicate(e))
            if newest_first:
                items = sorted(items, key=newest_first_key, reverse=True)
            return [e.model_copy(deep=True) for e in items]

    def _update(self, collection: list[E], entity_id: int, changes: dict[str, Any]) -> Optional[E]:
        with self._lock:
            for index, entity in enumerate(collection):
                if entity.id == entity_id:  # type: ignore[attr-defined]
                    collection[index] = merge(entity, changes)
                    return collection[index].model_copy(deep=True)
        return None

    # -------------------------- seeding --------------------------
    def seed_sample_data(self, admin_password: str) -> None:
        """Populate sample vets, an admin account, adoptions, campaigns and reports once."""
        with self._lock:
            if self._seeded:
                return
            self._seeded = True
            for vet in seed.SAMPLE_VETS:
                self.create_vet(vet)
            self.create_user(seed.admin_user(hash_password(admin_password)))
            for adoption in seed.SAMPLE_ADOPTIONS:
                self.create_adoption(adoption)
            for campaign, raised in seed.SAMPLE_DONATIONS:
                created = self.create_donation(campaign)
                self.contribute_to_donation(created.id, raised)
            for report in seed.SAMPLE_REPORTS:
                self.create_report(report)
        logger.info("Seeded in-memory storage with sample data")

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self._find(self.users, lambda u: u.id == user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._find(self.users, lambda u: u.username == username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._find(self.users, lambda u: u.email == email)

    def create_user(self, payload: UserCreate) -> User:
        return self._insert(
            "user",
            self.users,
            lambda new_id: User(**payload.model_dump(), id=new_id, created_at=utcnow()),
        )

    def get_all_users(self) -> list[User]:
        return self._filter(self.users)

    def update_user(self, user_id: int, patch: UserPatch) -> Optional[User]:
        return self._update(self.users, user_id, patch.changes())

    # -------------------------- reports --------------------------
    def create_report(self, payload: ReportCreate) -> Report:
        def build(new_id: int) -> Report:
            now = utcnow()
            return Report(**payload.model_dump(), id=new_id, created_at=now, updated_at=now)

        return self._insert("report", self.reports, build)

    def get_report(self, report_id: int) -> Optional[Report]:
        return self._find(self.reports, lambda r: r.id == report_id)

    def get_reports(self, limit: Optional[int] = None) -> list[Report]:
        return limited(self._filter(self.reports, newest_first=True), limit)

    def get_reports_by_status(self, status: str) -> list[Report]:
        return self._filter(self.reports, lambda r: r.status == status, newest_first=True)

    def get_reports_by_user(self, user_id: int) -> list[Report]:
        return self._filter(self.reports, lambda r: r.user_id == user_id, newest_first=True)

    def update_report(self, report_id: int, patch: ReportPatch) -> Optional[Report]:
        changes = patch.changes()
        changes["updated_at"] = utcnow()
        return self._update(self.reports, report_id, changes)

    # -------------------------- vets --------------------------
    def create_vet(self, payload: VetCreate) -> Vet:
        return self._insert("vet", self.vets, lambda new_id: Vet(**payload.model_dump(), id=new_id))

    def get_vet(self, vet_id: int) -> Optional[Vet]:
        return self._find(self.vets, lambda v: v.id == vet_id)

    def get_all_vets(self) -> list[Vet]:
        return self._filter(self.vets)

    def update_vet(self, vet_id: int, patch: VetPatch) -> Optional[Vet]:
        return self._update(self.vets, vet_id, patch.changes())

    def seed_vets(self) -> int:
        with self._lock:
            if self.vets:
                return 0
            for vet in seed.DIRECTORY_VETS:
                self.create_vet(vet)
            return len(seed.DIRECTORY_VETS)

    # -------------------------- adoptions --------------------------
    def create_adoption(self, payload: AdoptionCreate) -> Adoption:
        return self._insert(
            "adoption",
            self.adoptions,
            lambda new_id: Adoption(**payload.model_dump(), id=new_id, created_at=utcnow()),
        )

    def get_adoption(self, adoption_id: int) -> Optional[Adoption]:
        return self._find(self.adoptions, lambda a: a.id == adoption_id)

    def get_all_adoptions(self) -> list[Adoption]:
        return self._filter(self.adoptions, newest_first=True)

    def get_adoptions_by_type(self, animal_type: str) -> list[Adoption]:
        return self._filter(self.adoptions, lambda a: a.type == animal_type, newest_first=True)

    def get_adoptions_by_status(self, status: str) -> list[Adoption]:
        return self._filter(self.adoptions, lambda a: a.status == status, newest_first=True)

    def update_adoption(self, adoption_id: int, patch: AdoptionPatch) -> Optional[Adoption]:
        return self._update(self.adoptions, adoption_id, patch.changes())

    # -------------------------- donations --------------------------
    def create_donation(self, payload: DonationCreate) -> Donation:
        return self._insert(
            "donation",
            self.donations,
            lambda new_id: Donation(**payload.model_dump(), id=new_id, raised_amount=0, created_at=utcnow()),
        )

    def get_donation(self, donation_id: int) -> Optional[Donation]:
        return self._find(self.donations, lambda d: d.id == donation_id)

    def get_all_donations(self) -> list[Donation]:
        return self._filter(self.donations)

    def update_donation(self, donation_id: int, patch: DonationPatch) -> Optional[Donation]:
        return self._update(self.donations, donation_id, patch.changes())

    def contribute_to_donation(self, donation_id: int, amount: int) -> Optional[Donation]:
        with self._lock:
            current = self._find(self.donations, lambda d: d.id == donation_id)
            if current is None:
                return None
            return self._update(
                self.donations, donation_id, {"raised_amount": current.raised_amount + amount}
            )

    # -------------------------- posts --------------------------
    def create_post(self, payload: PostCreate) -> Post:
        return self._insert(
            "post",
            self.posts,
            lambda new_id: Post(**payload.model_dump(), id=new_id, created_at=utcnow()),
        )

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._find(self.posts, lambda p: p.id == post_id)

    def get_all_posts(self) -> list[Post]:
        return self._filter(self.posts, newest_first=True)

    def get_posts_by_user(self, user_id: int) -> list[Post]:
        return self._filter(self.posts, lambda p: p.user_id == user_id, newest_first=True)

    def update_post(self, post_id: int, patch: PostPatch) -> Optional[Post]:
        return self._update(self.posts, post_id, patch.changes())
