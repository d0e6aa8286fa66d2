"""
Entity records shared by every content store backend.

Records are plain dataclasses with snake_case attributes. ``as_dict`` renders
them with the camelCase keys the website and admin panel consume, and
``from_dict`` reads that shape back (used by the object-store backend).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Optional

from pydantic.alias_generators import to_camel, to_snake


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise to an aware UTC datetime. Naive values are taken to be UTC
    already (SQLite hands them back without tzinfo); offsets are converted.
    """
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def later_than(previous: Optional[datetime]) -> datetime:
    """Current time, nudged forward so it sorts strictly after ``previous``."""
    now = utcnow()
    previous = ensure_utc(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class Record:
    """Behaviour shared by the entity dataclasses below."""

    kind: ClassVar[str]
    unique_fields: ClassVar[tuple[str, ...]] = ()
    datetime_fields: ClassVar[tuple[str, ...]] = ("created_at",)
    stamped_on_create: ClassVar[tuple[str, ...]] = ("created_at",)
    stamped_on_update: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def new_values(cls, data: dict, now: datetime) -> dict:
        """Column values for a fresh row built from a create payload."""
        values = dict(data)
        for name in cls.stamped_on_create:
            values[name] = now
        return values

    def changed_values(self, changes: dict) -> dict:
        values = dict(changes)
        for name in self.stamped_on_update:
            values[name] = later_than(getattr(self, name))
        return values

    def as_dict(self) -> dict:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = to_snake(key)
            if name not in known:
                continue
            if name in cls.datetime_fields and value is not None:
                if isinstance(value, str):
                    value = datetime.fromisoformat(value)
                value = ensure_utc(value)
            values[name] = value
        return cls(**values)


@dataclass
class User(Record):
    kind: ClassVar[str] = "users"
    unique_fields: ClassVar[tuple[str, ...]] = ("username",)
    datetime_fields: ClassVar[tuple[str, ...]] = ()
    stamped_on_create: ClassVar[tuple[str, ...]] = ()

    id: int
    username: str
    # Stored as given. Login compares it verbatim.
    password: str


@dataclass
class BlogPost(Record):
    kind: ClassVar[str] = "blogs"
    unique_fields: ClassVar[tuple[str, ...]] = ("slug",)
    datetime_fields: ClassVar[tuple[str, ...]] = (
        "publish_date",
        "created_at",
        "updated_at",
    )
    stamped_on_create: ClassVar[tuple[str, ...]] = ("created_at", "updated_at")
    stamped_on_update: ClassVar[tuple[str, ...]] = ("updated_at",)

    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    author: Optional[str] = "Admin"
    status: str = "draft"
    publish_date: datetime = field(default_factory=utcnow)
    images: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def new_values(cls, data: dict, now: datetime) -> dict:
        values = super().new_values(data, now)
        if values.get("publish_date") is None:
            values["publish_date"] = now
        return values


@dataclass
class Product(Record):
    kind: ClassVar[str] = "products"
    unique_fields: ClassVar[tuple[str, ...]] = ("slug",)

    id: int
    name: str
    slug: str
    description: str
    image: Optional[str] = None
    category: Optional[str] = None
    featured: bool = False
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Service(Record):
    kind: ClassVar[str] = "services"
    unique_fields: ClassVar[tuple[str, ...]] = ("slug",)

    id: int
    name: str
    slug: str
    description: str
    full_description: Optional[str] = None
    image: Optional[str] = None
    featured: bool = False
    parent_id: Optional[int] = None
    order: Optional[int] = 0
    features: list[str] = field(default_factory=list)
    benefits: list[str] = field(default_factory=list)
    applications: list[str] = field(default_factory=list)
    specifications: dict[str, str] = field(default_factory=dict)
    related_services: list[int] = field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    # Only populated on copies returned by the hierarchy fetch; never stored.
    children: Optional[list["Service"]] = None

    def as_dict(self) -> dict:
        data = super().as_dict()
        data.pop("children")
        if self.children is not None:
            data["children"] = [child.as_dict() for child in self.children]
        return data


@dataclass
class ContactMessage(Record):
    kind: ClassVar[str] = "contact_messages"

    id: int
    name: str
    email: str
    message: str
    phone: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    read: bool = False


RECORD_TYPES: tuple[type[Record], ...] = (
    User,
    BlogPost,
    Product,
    Service,
    ContactMessage,
)
