"""
Content store contract shared by the in-memory, object-store and SQL backends.

Lookups never raise for a missing row: they return ``None`` (single row),
``False`` (delete) or an empty list. The only domain error is
``UniqueConstraintError`` when a slug or username is already taken.
"""

from __future__ import annotations

from dataclasses import replace
from operator import attrgetter
from typing import Callable, Iterable, Optional, Protocol, Sequence

from enclosures_backend.records import (
    BlogPost,
    ContactMessage,
    Product,
    Record,
    Service,
    User,
)
from enclosures_backend.schemas import (
    BlogPostCreate,
    BlogPostUpdate,
    ContactMessageCreate,
    ProductCreate,
    ProductUpdate,
    ServiceCreate,
    ServiceUpdate,
    UserCreate,
)


class UniqueConstraintError(Exception):
    """Raised when a create/update would duplicate a unique column."""

    def __init__(self, kind: str, field: str, value):
        self.kind = kind
        self.field = field
        self.value = value
        super().__init__(f"{kind}: {field} '{value}' is already in use")


class ContentStore(Protocol):
    """Interface for content persistence."""

    # Users
    def get_user(self, user_id: int) -> Optional[User]:
        ...

    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    def create_user(self, data: UserCreate) -> User:
        ...

    # Blog posts
    def get_blog_posts(self) -> list[BlogPost]:
        ...

    def get_blog_post_by_id(self, post_id: int) -> Optional[BlogPost]:
        ...

    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        ...

    def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        ...

    def update_blog_post(
        self, post_id: int, changes: BlogPostUpdate
    ) -> Optional[BlogPost]:
        ...

    def delete_blog_post(self, post_id: int) -> bool:
        ...

    # Products
    def get_products(self) -> list[Product]:
        ...

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        ...

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        ...

    def get_featured_products(self) -> list[Product]:
        ...

    def create_product(self, data: ProductCreate) -> Product:
        ...

    def update_product(
        self, product_id: int, changes: ProductUpdate
    ) -> Optional[Product]:
        ...

    def delete_product(self, product_id: int) -> bool:
        ...

    # Services
    def get_services(self) -> list[Service]:
        ...

    def get_service_by_id(self, service_id: int) -> Optional[Service]:
        ...

    def get_service_by_slug(self, slug: str) -> Optional[Service]:
        ...

    def get_featured_services(self) -> list[Service]:
        ...

    def get_services_by_parent_id(self, parent_id: Optional[int]) -> list[Service]:
        ...

    def get_service_hierarchy(self) -> list[Service]:
        ...

    def get_related_services(self, service_id: int) -> list[Service]:
        ...

    def create_service(self, data: ServiceCreate) -> Service:
        ...

    def update_service(
        self, service_id: int, changes: ServiceUpdate
    ) -> Optional[Service]:
        ...

    def delete_service(self, service_id: int) -> bool:
        ...

    # Contact messages
    def get_contact_messages(self) -> list[ContactMessage]:
        ...

    def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        ...

    def mark_contact_message_as_read(
        self, message_id: int
    ) -> Optional[ContactMessage]:
        ...

    def delete_contact_message(self, message_id: int) -> bool:
        ...


def newest_first(records: Iterable[Record], attribute: str) -> list:
    """Sort descending on a timestamp; ties put the higher id first."""
    return sorted(records, key=attrgetter(attribute, "id"), reverse=True)


def children_of(services: Iterable[Service], parent_id: Optional[int]) -> list[Service]:
    """
    Services whose parent is ``parent_id`` (``None`` selects main services),
    ordered by ``order`` with insertion order breaking ties.
    """
    matches = [s for s in services if s.parent_id == parent_id]
    return sorted(matches, key=lambda s: s.order or 0)


def attach_children(
    main_services: Sequence[Service],
    lookup_children: Callable[[int], list[Service]],
) -> list[Service]:
    """
    Copy each main service with its direct children attached. One level only:
    children are returned as stored and never searched for their own children.
    """
    return [
        replace(service, children=lookup_children(service.id))
        for service in main_services
    ]


def resolve_related(
    service: Optional[Service],
    lookup: Callable[[int], Optional[Service]],
) -> list[Service]:
    """Related services in list order; ids that no longer resolve are skipped."""
    if service is None or not service.related_services:
        return []
    related: list[Service] = []
    for related_id in service.related_services:
        found = lookup(related_id)
        if found is not None:
            related.append(found)
    return related
