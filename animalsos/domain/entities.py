"""
Entity schemas shared by the storage backends and the JSON API.

Every record kind has three shapes:

- ``<E>``: the full stored record, including server-assigned fields.
- ``<E>Create``: the insert payload a caller supplies (no ``id``, no
  timestamps, no ``raisedAmount``).
- ``<E>Patch``: the mutable fields, all optional. Only fields explicitly set
  by the caller are merged into the stored record. Fields the record
  requires can be changed but not set to null.

Field names are snake_case in Python and camelCase on the wire
(``userId``, ``createdAt``...). Models accept either form on input.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    USER = "user"
    NGO = "ngo"
    ADMIN = "admin"


class ReportStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESCUED = "rescued"
    CLOSED = "closed"


class ReportUrgency(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"


class AdoptionStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    ADOPTED = "adopted"


class Schema(BaseModel):
    """Base model: camelCase aliases, enum values kept as plain strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict using the wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class Patch(Schema):
    # fields that may be changed but never cleared with null
    not_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _reject_null_required(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for name in sorted(cls.not_nullable):
            alias = cls.model_fields[name].alias or name
            for key in (name, alias):
                if key in data and data[key] is None:
                    raise ValueError(f"{alias} cannot be null")
        return data

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually supplied, keyed by Python name."""
        return self.model_dump(exclude_unset=True)


# -------------------------- users --------------------------
class UserCreate(Schema):
    username: str = Field(min_length=1)
    password: str
    email: str = Field(min_length=3)
    name: str
    role: UserRole = UserRole.USER
    phone: Optional[str] = None
    address: Optional[str] = None


class User(UserCreate):
    id: int
    created_at: datetime


class UserPatch(Patch):
    not_nullable = frozenset({"username", "password", "email", "name", "role"})

    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class PublicUser(Schema):
    """User as exposed over HTTP: never carries the password hash."""

    id: int
    username: str
    email: str
    name: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime


def public_user(user: User) -> PublicUser:
    return PublicUser.model_validate(user.model_dump(exclude={"password"}))


# -------------------------- reports --------------------------
class ReportCreate(Schema):
    user_id: int
    animal_type: str
    description: str
    location: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    urgency: ReportUrgency = ReportUrgency.NORMAL
    image_url: Optional[str] = None


class Report(ReportCreate):
    id: int
    created_at: datetime
    updated_at: datetime


class ReportPatch(Patch):
    not_nullable = frozenset({"animal_type", "description", "location", "status", "urgency"})

    animal_type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    status: Optional[ReportStatus] = None
    urgency: Optional[ReportUrgency] = None
    image_url: Optional[str] = None


# -------------------------- vets --------------------------
class VetCreate(Schema):
    name: str
    address: str
    phone: str
    email: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    is_open: Optional[bool] = None


class Vet(VetCreate):
    id: int


class VetPatch(Patch):
    not_nullable = frozenset({"name", "address", "phone"})

    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    is_open: Optional[bool] = None


# -------------------------- adoptions --------------------------
class AdoptionCreate(Schema):
    name: str
    type: str
    breed: Optional[str] = None
    age: str
    gender: str
    description: str
    image_url: Optional[str] = None
    status: AdoptionStatus = AdoptionStatus.AVAILABLE


class Adoption(AdoptionCreate):
    id: int
    created_at: datetime


class AdoptionPatch(Patch):
    not_nullable = frozenset({"name", "type", "age", "gender", "description", "status"})

    name: Optional[str] = None
    type: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[AdoptionStatus] = None


# -------------------------- donations --------------------------
class DonationCreate(Schema):
    title: str
    description: str
    goal_amount: int = Field(ge=0)
    image_url: Optional[str] = None


class Donation(DonationCreate):
    id: int
    raised_amount: int = 0
    created_at: datetime


class DonationPatch(Patch):
    not_nullable = frozenset({"title", "description", "goal_amount"})

    title: Optional[str] = None
    description: Optional[str] = None
    goal_amount: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None


# -------------------------- posts --------------------------
class PostCreate(Schema):
    user_id: int
    title: str
    content: str
    image_url: Optional[str] = None


class Post(PostCreate):
    id: int
    created_at: datetime


class PostPatch(Patch):
    not_nullable = frozenset({"title", "content"})

    title: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
