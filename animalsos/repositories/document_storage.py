"""
Document-store backend built on SQLAlchemy.

Each entity kind lives in its own collection table (see ``animalsos.db.models``)
as a whole JSON document. Lookups and filters query into the document; the
storage key of a row never appears in returned records.

Ids come from the ``counters`` table: the counter row is incremented inside
the same transaction that inserts the document, so two concurrent creates
can never observe the same id.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from animalsos.db.models import (
    COLLECTIONS,
    AdoptionDocument,
    Counter,
    DocumentMixin,
    DonationDocument,
    PostDocument,
    ReportDocument,
    UserDocument,
    VetDocument,
)
from animalsos.db.session import Base, create_db_engine, make_sessionmaker
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
from animalsos.repositories.base import Storage, merge
from animalsos.services.session_store import (
    DEFAULT_CHECK_PERIOD,
    DEFAULT_TTL_SECONDS,
    SessionStore,
    SQLSessionStore,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


class DocumentStorage(Storage):
    """Storage backed by JSON document collections in a SQL database."""

    backend_name = "document"

    def __init__(
        self,
        engine: Engine,
        *,
        session_store: SessionStore | None = None,
        session_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        session_check_period: float = DEFAULT_CHECK_PERIOD,
    ) -> None:
        self._engine = engine
        self._session_factory = make_sessionmaker(engine)
        self.session_store = session_store or SQLSessionStore(
            self._session_factory,
            ttl_seconds=session_ttl_seconds,
            check_period=session_check_period,
        )

    @classmethod
    def connect(cls, url: str, **kwargs: Any) -> "DocumentStorage":
        """Open the database, create missing collections and return a ready storage.

        Connection failures propagate from here; nothing retries.
        """
        engine = create_db_engine(url)
        Base.metadata.create_all(bind=engine)
        storage = cls(engine, **kwargs)
        storage._init_counters()
        logger.info("Connected document storage at %s", engine.url.render_as_string(hide_password=True))
        return storage

    def close(self) -> None:
        super().close()
        self._engine.dispose()

    # -------------------------- internals --------------------------
    @contextmanager
    def _session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def _init_counters(self) -> None:
        for model in COLLECTIONS:
            with self._session() as session:
                if session.get(Counter, model.__tablename__) is not None:
                    continue
                current = session.execute(select(func.max(model.id))).scalar() or 0
                session.add(Counter(name=model.__tablename__, value=current))
                try:
                    session.commit()
                except IntegrityError:
                    # another process initialised it first
                    session.rollback()

    def _next_id(self, session: Session, model: Type[DocumentMixin]) -> int:
        name = model.__tablename__  # type: ignore[attr-defined]
        result = session.execute(
            update(Counter).where(Counter.name == name).values(value=Counter.value + 1)
        )
        if not result.rowcount:
            current = session.execute(select(func.max(model.id))).scalar() or 0
            session.add(Counter(name=name, value=current + 1))
            session.flush()
            return current + 1
        return int(session.execute(select(Counter.value).where(Counter.name == name)).scalar_one())

    def _insert(self, model: Type[DocumentMixin], entity_cls: Type[E], fields: dict[str, Any]) -> E:
        with self._session() as session:
            new_id = self._next_id(session, model)
            entity = entity_cls.model_validate({**fields, "id": new_id})
            session.add(
                model(  # type: ignore[call-arg]
                    id=new_id,
                    data=entity.to_document(),  # type: ignore[attr-defined]
                    created_at=getattr(entity, "created_at", None),
                )
            )
            session.commit()
            return entity

    def _find_one(self, model: Type[DocumentMixin], entity_cls: Type[E], *criteria: Any) -> Optional[E]:
        with self._session() as session:
            row = session.execute(select(model).where(*criteria).limit(1)).scalars().first()
            return self._to_entity(row, entity_cls)

    def _find_all(
        self,
        model: Type[DocumentMixin],
        entity_cls: Type[E],
        *criteria: Any,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> list[E]:
        stmt = select(model).where(*criteria)
        if newest_first:
            stmt = stmt.order_by(model.created_at.desc(), model.id.desc())
        else:
            stmt = stmt.order_by(model.id.asc())
        if limit:
            stmt = stmt.limit(limit)
        with self._session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_entity(row, entity_cls) for row in rows]

    def _update(
        self,
        model: Type[DocumentMixin],
        entity_cls: Type[E],
        entity_id: int,
        changes: dict[str, Any],
    ) -> Optional[E]:
        with self._session() as session:
            row = session.execute(
                select(model).where(model.id == entity_id).with_for_update()
            ).scalars().first()
            if row is None:
                return None
            merged = merge(entity_cls.model_validate(row.data), changes)
            row.data = merged.to_document()  # type: ignore[attr-defined]
            session.commit()
            return merged

    @staticmethod
    def _to_entity(row: Optional[DocumentMixin], entity_cls: Type[E]) -> Optional[E]:
        if row is None:
            return None
        return entity_cls.model_validate(row.data)

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self._find_one(UserDocument, User, UserDocument.id == user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._find_one(UserDocument, User, UserDocument.data["username"].as_string() == username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._find_one(UserDocument, User, UserDocument.data["email"].as_string() == email)

    def create_user(self, payload: UserCreate) -> User:
        return self._insert(UserDocument, User, {**payload.model_dump(), "created_at": utcnow()})

    def get_all_users(self) -> list[User]:
        return self._find_all(UserDocument, User)

    def update_user(self, user_id: int, patch: UserPatch) -> Optional[User]:
        return self._update(UserDocument, User, user_id, patch.changes())

    # -------------------------- reports --------------------------
    def create_report(self, payload: ReportCreate) -> Report:
        now = utcnow()
        return self._insert(
            ReportDocument, Report, {**payload.model_dump(), "created_at": now, "updated_at": now}
        )

    def get_report(self, report_id: int) -> Optional[Report]:
        return self._find_one(ReportDocument, Report, ReportDocument.id == report_id)

    def get_reports(self, limit: Optional[int] = None) -> list[Report]:
        return self._find_all(ReportDocument, Report, newest_first=True, limit=limit)

    def get_reports_by_status(self, status: str) -> list[Report]:
        return self._find_all(
            ReportDocument, Report, ReportDocument.data["status"].as_string() == status, newest_first=True
        )

    def get_reports_by_user(self, user_id: int) -> list[Report]:
        return self._find_all(
            ReportDocument, Report, ReportDocument.data["userId"].as_integer() == user_id, newest_first=True
        )

    def update_report(self, report_id: int, patch: ReportPatch) -> Optional[Report]:
        changes = patch.changes()
        changes["updated_at"] = utcnow()
        return self._update(ReportDocument, Report, report_id, changes)

    # -------------------------- vets --------------------------
    def create_vet(self, payload: VetCreate) -> Vet:
        return self._insert(VetDocument, Vet, payload.model_dump())

    def get_vet(self, vet_id: int) -> Optional[Vet]:
        return self._find_one(VetDocument, Vet, VetDocument.id == vet_id)

    def get_all_vets(self) -> list[Vet]:
        return self._find_all(VetDocument, Vet)

    def update_vet(self, vet_id: int, patch: VetPatch) -> Optional[Vet]:
        return self._update(VetDocument, Vet, vet_id, patch.changes())

    def seed_vets(self) -> int:
        with self._session() as session:
            count = session.execute(select(func.count()).select_from(VetDocument)).scalar_one()
        if count:
            logger.info("Vet collection already populated (%d); skipping seed", count)
            return 0
        for vet in seed.DIRECTORY_VETS:
            self.create_vet(vet)
        logger.info("Initial vet data seeded")
        return len(seed.DIRECTORY_VETS)

    # -------------------------- adoptions --------------------------
    def create_adoption(self, payload: AdoptionCreate) -> Adoption:
        return self._insert(AdoptionDocument, Adoption, {**payload.model_dump(), "created_at": utcnow()})

    def get_adoption(self, adoption_id: int) -> Optional[Adoption]:
        return self._find_one(AdoptionDocument, Adoption, AdoptionDocument.id == adoption_id)

    def get_all_adoptions(self) -> list[Adoption]:
        return self._find_all(AdoptionDocument, Adoption, newest_first=True)

    def get_adoptions_by_type(self, animal_type: str) -> list[Adoption]:
        return self._find_all(
            AdoptionDocument, Adoption, AdoptionDocument.data["type"].as_string() == animal_type, newest_first=True
        )

    def get_adoptions_by_status(self, status: str) -> list[Adoption]:
        return self._find_all(
            AdoptionDocument, Adoption, AdoptionDocument.data["status"].as_string() == status, newest_first=True
        )

    def update_adoption(self, adoption_id: int, patch: AdoptionPatch) -> Optional[Adoption]:
        return self._update(AdoptionDocument, Adoption, adoption_id, patch.changes())

    # -------------------------- donations --------------------------
    def create_donation(self, payload: DonationCreate) -> Donation:
        return self._insert(
            DonationDocument,
            Donation,
            {**payload.model_dump(), "raised_amount": 0, "created_at": utcnow()},
        )

    def get_donation(self, donation_id: int) -> Optional[Donation]:
        return self._find_one(DonationDocument, Donation, DonationDocument.id == donation_id)

    def get_all_donations(self) -> list[Donation]:
        return self._find_all(DonationDocument, Donation)

    def update_donation(self, donation_id: int, patch: DonationPatch) -> Optional[Donation]:
        return self._update(DonationDocument, Donation, donation_id, patch.changes())

    def contribute_to_donation(self, donation_id: int, amount: int) -> Optional[Donation]:
        with self._session() as session:
            row = session.execute(
                select(DonationDocument).where(DonationDocument.id == donation_id).with_for_update()
            ).scalars().first()
            if row is None:
                return None
            current = Donation.model_validate(row.data)
            merged = merge(current, {"raised_amount": current.raised_amount + amount})
            row.data = merged.to_document()
            session.commit()
            return merged

    # -------------------------- posts --------------------------
    def create_post(self, payload: PostCreate) -> Post:
        return self._insert(PostDocument, Post, {**payload.model_dump(), "created_at": utcnow()})

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._find_one(PostDocument, Post, PostDocument.id == post_id)

    def get_all_posts(self) -> list[Post]:
        return self._find_all(PostDocument, Post, newest_first=True)

    def get_posts_by_user(self, user_id: int) -> list[Post]:
        return self._find_all(
            PostDocument, Post, PostDocument.data["userId"].as_integer() == user_id, newest_first=True
        )

    def update_post(self, post_id: int, patch: PostPatch) -> Optional[Post]:
        return self._update(PostDocument, Post, post_id, patch.changes())
