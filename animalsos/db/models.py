"""
SQLAlchemy tables backing the document store.

Each entity kind is one collection: documents are kept whole in a JSON
column, keyed by an opaque storage key. The domain ``id`` is a plain unique
indexed column, never the primary key.
"""
from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String

from .session import Base


def _new_key() -> str:
    return uuid.uuid4().hex


class DocumentMixin:
    storage_key = Column(String(32), primary_key=True, default=_new_key)
    id = Column(Integer, nullable=False, unique=True, index=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=True, index=True)


class UserDocument(DocumentMixin, Base):
    __tablename__ = "users"


class ReportDocument(DocumentMixin, Base):
    __tablename__ = "reports"


class VetDocument(DocumentMixin, Base):
    __tablename__ = "vets"


class AdoptionDocument(DocumentMixin, Base):
    __tablename__ = "adoptions"


class DonationDocument(DocumentMixin, Base):
    __tablename__ = "donations"


class PostDocument(DocumentMixin, Base):
    __tablename__ = "posts"


COLLECTIONS = (
    UserDocument,
    ReportDocument,
    VetDocument,
    AdoptionDocument,
    DonationDocument,
    PostDocument,
)


class Counter(Base):
    """Per-collection id sequence, incremented inside the insert transaction."""

    __tablename__ = "counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)


class SessionRecord(Base):
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    expires_at = Column(Float, nullable=False, index=True)
