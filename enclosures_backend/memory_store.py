"""
In-memory content store for development and tests.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Dict, Optional

from enclosures_backend.records import (
    RECORD_TYPES,
    BlogPost,
    ContactMessage,
    Product,
    Record,
    Service,
    User,
    utcnow,
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
from enclosures_backend.seed import seed_demo_data
from enclosures_backend.store import (
    UniqueConstraintError,
    attach_children,
    children_of,
    newest_first,
    resolve_related,
)


class InMemoryContentStore:
    """
    Dict-backed store living for the lifetime of the process.

    Each entity type has its own id sequence. Mutations hold a lock because
    FastAPI runs sync handlers on a thread pool.
    """

    def __init__(self, seed: bool = True):
        self._lock = threading.RLock()
        self.tables: Dict[str, Dict[int, Record]] = {}
        self.next_ids: Dict[str, int] = {}
        self.reset()
        if seed:
            seed_demo_data(self)

    def reset(self) -> None:
        """Clear all stored data and restart every id sequence at 1."""
        with self._lock:
            self.tables = {record_type.kind: {} for record_type in RECORD_TYPES}
            self.next_ids = {record_type.kind: 1 for record_type in RECORD_TYPES}

    # Generic row operations

    def _rows(self, record_type: type[Record]) -> list:
        with self._lock:
            return list(self.tables[record_type.kind].values())

    def _get(self, record_type: type[Record], record_id: int):
        return self.tables[record_type.kind].get(record_id)

    def _find(self, record_type: type[Record], field: str, value):
        for record in self._rows(record_type):
            if getattr(record, field) == value:
                return record
        return None

    def _check_unique(
        self, record_type: type[Record], values: dict, exclude_id: Optional[int] = None
    ) -> None:
        for field in record_type.unique_fields:
            if field not in values:
                continue
            existing = self._find(record_type, field, values[field])
            if existing is not None and existing.id != exclude_id:
                raise UniqueConstraintError(record_type.kind, field, values[field])

    def _insert(self, record_type: type[Record], data: dict):
        with self._lock:
            values = record_type.new_values(data, utcnow())
            self._check_unique(record_type, values)
            record_id = self.next_ids[record_type.kind]
            self.next_ids[record_type.kind] = record_id + 1
            record = record_type(id=record_id, **values)
            self.tables[record_type.kind][record_id] = record
            return record

    def _update(self, record_type: type[Record], record_id: int, changes: dict):
        with self._lock:
            existing = self._get(record_type, record_id)
            if existing is None:
                return None
            self._check_unique(record_type, changes, exclude_id=record_id)
            updated = replace(existing, **existing.changed_values(changes))
            self.tables[record_type.kind][record_id] = updated
            return updated

    def _delete(self, record_type: type[Record], record_id: int) -> bool:
        with self._lock:
            return self.tables[record_type.kind].pop(record_id, None) is not None

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._find(User, "username", username)

    def create_user(self, data: UserCreate) -> User:
        return self._insert(User, data.model_dump())

    # Blog posts

    def get_blog_posts(self) -> list[BlogPost]:
        return newest_first(self._rows(BlogPost), "publish_date")

    def get_blog_post_by_id(self, post_id: int) -> Optional[BlogPost]:
        return self._get(BlogPost, post_id)

    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return self._find(BlogPost, "slug", slug)

    def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        return self._insert(BlogPost, data.model_dump())

    def update_blog_post(
        self, post_id: int, changes: BlogPostUpdate
    ) -> Optional[BlogPost]:
        return self._update(BlogPost, post_id, changes.changes())

    def delete_blog_post(self, post_id: int) -> bool:
        return self._delete(BlogPost, post_id)

    # Products

    def get_products(self) -> list[Product]:
        return self._rows(Product)

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self._get(Product, product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return self._find(Product, "slug", slug)

    def get_featured_products(self) -> list[Product]:
        return [p for p in self._rows(Product) if p.featured]

    def create_product(self, data: ProductCreate) -> Product:
        return self._insert(Product, data.model_dump())

    def update_product(
        self, product_id: int, changes: ProductUpdate
    ) -> Optional[Product]:
        return self._update(Product, product_id, changes.changes())

    def delete_product(self, product_id: int) -> bool:
        return self._delete(Product, product_id)

    # Services

    def get_services(self) -> list[Service]:
        return self._rows(Service)

    def get_service_by_id(self, service_id: int) -> Optional[Service]:
        return self._get(Service, service_id)

    def get_service_by_slug(self, slug: str) -> Optional[Service]:
        return self._find(Service, "slug", slug)

    def get_featured_services(self) -> list[Service]:
        return [s for s in self._rows(Service) if s.featured]

    def get_services_by_parent_id(self, parent_id: Optional[int]) -> list[Service]:
        return children_of(self._rows(Service), parent_id)

    def get_service_hierarchy(self) -> list[Service]:
        return attach_children(
            self.get_services_by_parent_id(None), self.get_services_by_parent_id
        )

    def get_related_services(self, service_id: int) -> list[Service]:
        return resolve_related(self.get_service_by_id(service_id), self.get_service_by_id)

    def create_service(self, data: ServiceCreate) -> Service:
        return self._insert(Service, data.model_dump())

    def update_service(
        self, service_id: int, changes: ServiceUpdate
    ) -> Optional[Service]:
        return self._update(Service, service_id, changes.changes())

    def delete_service(self, service_id: int) -> bool:
        return self._delete(Service, service_id)

    # Contact messages

    def get_contact_messages(self) -> list[ContactMessage]:
        return newest_first(self._rows(ContactMessage), "created_at")

    def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        return self._insert(ContactMessage, data.model_dump())

    def mark_contact_message_as_read(
        self, message_id: int
    ) -> Optional[ContactMessage]:
        return self._update(ContactMessage, message_id, {"read": True})

    def delete_contact_message(self, message_id: int) -> bool:
        return self._delete(ContactMessage, message_id)
