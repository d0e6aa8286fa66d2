"""
Content store kept in blob storage, one JSON document per row.

Layout under the configured prefix::

    users/1.json
    blogs/1.json
    products/1.json
    services/1.json
    contact_messages/1.json
    counters.json          {"blogs": 3, "services": 12, ...}

Listing a kind fetches every document under its prefix, so reads cost one
round trip per row. A document that cannot be found is reported as a missing
row, never as an error.
"""

from __future__ import annotations

import json
import logging
import posixpath
import threading
from dataclasses import replace
from typing import Optional

from enclosures_backend.blob_storage import BlobStorageClient
from enclosures_backend.records import (
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
from enclosures_backend.store import (
    UniqueConstraintError,
    attach_children,
    children_of,
    newest_first,
    resolve_related,
)

logger = logging.getLogger(__name__)

COUNTERS_DOCUMENT = "counters.json"


def _row_id(path: str) -> Optional[int]:
    stem, ext = posixpath.splitext(posixpath.basename(path))
    if ext != ".json" or not stem.isdigit():
        return None
    return int(stem)


class ObjectContentStore:
    """Content store over a ``BlobStorageClient``."""

    def __init__(self, client: BlobStorageClient, prefix: str = ""):
        self.client = client
        self.prefix = prefix
        # Serialises the counters read-modify-write within this process.
        self._counter_lock = threading.Lock()
        # Held across unique checks and the write that follows them.
        self._write_lock = threading.Lock()

    def _path(self, kind: str, record_id: int) -> str:
        return f"{self.prefix}{kind}/{record_id}.json"

    def _load_document(self, path: str) -> Optional[dict]:
        try:
            return json.loads(self.client.get_bytes(path))
        except FileNotFoundError:
            return None

    def _next_id(self, kind: str) -> int:
        path = f"{self.prefix}{COUNTERS_DOCUMENT}"
        with self._counter_lock:
            counters = self._load_document(path) or {}
            next_id = int(counters.get(kind, 0)) + 1
            counters[kind] = next_id
            self.client.upload_json(path, counters)
        return next_id

    # Generic row operations

    def _get(self, record_type: type[Record], record_id: int):
        document = self._load_document(self._path(record_type.kind, record_id))
        if document is None:
            return None
        return record_type.from_dict(document)

    def _rows(self, record_type: type[Record]) -> list:
        ids = []
        for path in self.client.list_paths(f"{self.prefix}{record_type.kind}/"):
            record_id = _row_id(path)
            if record_id is not None:
                ids.append(record_id)
        rows = []
        for record_id in sorted(ids):
            record = self._get(record_type, record_id)
            if record is None:
                logger.debug(
                    "%s/%s vanished between listing and fetch", record_type.kind, record_id
                )
                continue
            rows.append(record)
        return rows

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

    def _save(self, record: Record) -> None:
        self.client.upload_json(self._path(record.kind, record.id), record.as_dict())

    def _insert(self, record_type: type[Record], data: dict):
        with self._write_lock:
            values = record_type.new_values(data, utcnow())
            self._check_unique(record_type, values)
            record = record_type(id=self._next_id(record_type.kind), **values)
            self._save(record)
        return record

    def _update(self, record_type: type[Record], record_id: int, changes: dict):
        with self._write_lock:
            existing = self._get(record_type, record_id)
            if existing is None:
                return None
            self._check_unique(record_type, changes, exclude_id=record_id)
            updated = replace(existing, **existing.changed_values(changes))
            self._save(updated)
        return updated

    def _delete(self, record_type: type[Record], record_id: int) -> bool:
        path = self._path(record_type.kind, record_id)
        if not self.client.exists(path):
            return False
        self.client.delete(path)
        return True

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
        services = self._rows(Service)
        return attach_children(
            children_of(services, None),
            lambda parent_id: children_of(services, parent_id),
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
