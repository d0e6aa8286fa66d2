"""
Pydantic schemas for the content API.

Create models carry the fields a client may set on a new row; update models
are their partial counterparts. Both accept camelCase (the wire format) or
snake_case keys.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from enclosures_backend.records import ensure_utc

BlogStatus = Literal["draft", "published", "scheduled"]
ModerationStatus = Literal["approved", "pending", "spam"]

SLUG_PATTERN = r"^[A-Za-z0-9]+(?:[-_][A-Za-z0-9]+)*$"


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class PartialModel(ApiModel):
    """Base for update payloads: only keys the client sent are applied."""

    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


def _publish_date_utc(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value)


class UserCreate(ApiModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class BlogPostCreate(ApiModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    author: Optional[str] = "Admin"
    status: BlogStatus = "draft"
    publish_date: Optional[datetime] = None
    images: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None

    normalize_publish_date = field_validator("publish_date")(_publish_date_utc)


class BlogPostUpdate(PartialModel):
    not_nullable: ClassVar[tuple[str, ...]] = (
        "title",
        "slug",
        "content",
        "status",
        "publish_date",
        "images",
        "categories",
        "tags",
    )

    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=SLUG_PATTERN)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    author: Optional[str] = None
    status: Optional[BlogStatus] = None
    publish_date: Optional[datetime] = None
    images: Optional[list[str]] = None
    categories: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None

    normalize_publish_date = field_validator("publish_date")(_publish_date_utc)


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    image: Optional[str] = None
    category: Optional[str] = None
    featured: bool = False


class ProductUpdate(PartialModel):
    not_nullable: ClassVar[tuple[str, ...]] = (
        "name",
        "slug",
        "description",
        "featured",
    )

    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    category: Optional[str] = None
    featured: Optional[bool] = None


class ServiceCreate(ApiModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    full_description: Optional[str] = None
    image: Optional[str] = None
    featured: bool = False
    parent_id: Optional[int] = None
    order: int = 0
    features: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    applications: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    related_services: list[int] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class ServiceUpdate(PartialModel):
    not_nullable: ClassVar[tuple[str, ...]] = (
        "name",
        "slug",
        "description",
        "featured",
        "order",
        "features",
        "benefits",
        "applications",
        "specifications",
        "related_services",
    )

    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    full_description: Optional[str] = None
    image: Optional[str] = None
    featured: Optional[bool] = None
    parent_id: Optional[int] = None
    order: Optional[int] = None
    features: Optional[list[str]] = None
    benefits: Optional[list[str]] = None
    applications: Optional[list[str]] = None
    specifications: Optional[dict[str, str]] = None
    related_services: Optional[list[int]] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class ContactMessageCreate(ApiModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    message: str = Field(..., min_length=1)


class ContactResponse(BaseModel):
    success: bool
    message: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    id: int
    username: str
    token: str


class UploadResponse(BaseModel):
    urls: list[str]


class MediaUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    status: Optional[ModerationStatus] = None


class StatusResponse(BaseModel):
    success: bool
