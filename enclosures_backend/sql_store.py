"""
Relational content store built on SQLAlchemy.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from enclosures_backend.records import (
    BlogPost,
    ContactMessage,
    Product,
    Record,
    Service,
    User,
    ensure_utc,
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
from enclosures_backend.store import UniqueConstraintError, attach_children


class SqlContentStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).

    Ids come from the database's autoincrement and slug/username uniqueness
    is a column constraint; violations surface as ``UniqueConstraintError``.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlContentStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    # Generic row operations

    def _to_record(self, record_type: type[Record], row):
        row_type = ROW_TYPES[record_type]
        values = {}
        for f in fields(record_type):
            if not hasattr(row_type, f.name):
                continue
            value = getattr(row, f.name)
            if f.name in record_type.datetime_fields:
                value = ensure_utc(value)
            values[f.name] = value
        return record_type(**values)

    def _select(self, record_type: type[Record], *criteria, order_by=()) -> list:
        row_type = ROW_TYPES[record_type]
        stmt = select(row_type)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(*(order_by or (row_type.id.asc(),)))
        with self.Session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(record_type, row) for row in rows]

    def _first(self, record_type: type[Record], *criteria):
        row_type = ROW_TYPES[record_type]
        stmt = select(row_type).where(*criteria).order_by(row_type.id.asc()).limit(1)
        with self.Session() as session:
            row = session.execute(stmt).scalars().first()
            return self._to_record(record_type, row) if row else None

    def _get(self, record_type: type[Record], record_id: int):
        with self.Session() as session:
            row = session.get(ROW_TYPES[record_type], record_id)
            return self._to_record(record_type, row) if row else None

    def _commit(self, session: Session, record_type: type[Record], values: dict) -> None:
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            field = next((f for f in record_type.unique_fields if f in values), None)
            if field is None:
                raise
            raise UniqueConstraintError(record_type.kind, field, values[field]) from e

    def _insert(self, record_type: type[Record], data: dict):
        values = record_type.new_values(data, utcnow())
        with self.Session() as session:
            row = ROW_TYPES[record_type](**values)
            session.add(row)
            self._commit(session, record_type, values)
            session.refresh(row)
            return self._to_record(record_type, row)

    def _update(self, record_type: type[Record], record_id: int, changes: dict):
        with self.Session() as session:
            row = session.get(ROW_TYPES[record_type], record_id)
            if not row:
                return None
            existing = self._to_record(record_type, row)
            values = existing.changed_values(changes)
            for name, value in values.items():
                setattr(row, name, value)
            self._commit(session, record_type, values)
            session.refresh(row)
            return self._to_record(record_type, row)

    def _delete(self, record_type: type[Record], record_id: int) -> bool:
        with self.Session() as session:
            row = session.get(ROW_TYPES[record_type], record_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(User, UserRow.username == username)

    def create_user(self, data: UserCreate) -> User:
        return self._insert(User, data.model_dump())

    # Blog posts

    def get_blog_posts(self) -> list[BlogPost]:
        return self._select(
            BlogPost,
            order_by=(BlogPostRow.publish_date.desc(), BlogPostRow.id.desc()),
        )

    def get_blog_post_by_id(self, post_id: int) -> Optional[BlogPost]:
        return self._get(BlogPost, post_id)

    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return self._first(BlogPost, BlogPostRow.slug == slug)

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
        return self._select(Product)

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self._get(Product, product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return self._first(Product, ProductRow.slug == slug)

    def get_featured_products(self) -> list[Product]:
        return self._select(Product, ProductRow.featured.is_(True))

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
        return self._select(Service)

    def get_service_by_id(self, service_id: int) -> Optional[Service]:
        return self._get(Service, service_id)

    def get_service_by_slug(self, slug: str) -> Optional[Service]:
        return self._first(Service, ServiceRow.slug == slug)

    def get_featured_services(self) -> list[Service]:
        return self._select(Service, ServiceRow.featured.is_(True))

    def get_services_by_parent_id(self, parent_id: Optional[int]) -> list[Service]:
        if parent_id is None:
            criterion = ServiceRow.parent_id.is_(None)
        else:
            criterion = ServiceRow.parent_id == parent_id
        return self._select(
            Service,
            criterion,
            order_by=(func.coalesce(ServiceRow.order, 0).asc(), ServiceRow.id.asc()),
        )

    def get_service_hierarchy(self) -> list[Service]:
        return attach_children(
            self.get_services_by_parent_id(None), self.get_services_by_parent_id
        )

    def get_related_services(self, service_id: int) -> list[Service]:
        service = self.get_service_by_id(service_id)
        if service is None or not service.related_services:
            return []
        found = {
            s.id: s
            for s in self._select(Service, ServiceRow.id.in_(service.related_services))
        }
        return [found[i] for i in service.related_services if i in found]

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
        return self._select(
            ContactMessage,
            order_by=(ContactMessageRow.created_at.desc(), ContactMessageRow.id.desc()),
        )

    def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        return self._insert(ContactMessage, data.model_dump())

    def mark_contact_message_as_read(
        self, message_id: int
    ) -> Optional[ContactMessage]:
        return self._update(ContactMessage, message_id, {"read": True})

    def delete_contact_message(self, message_id: int) -> bool:
        return self._delete(ContactMessage, message_id)


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)


class BlogPostRow(Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    author = Column(String, nullable=True, default="Admin")
    status = Column(String, nullable=False, default="draft", index=True)
    publish_date = Column(DateTime(timezone=True), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    categories = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    meta_title = Column(String, nullable=True)
    meta_description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    category = Column(String, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ServiceRow(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=False)
    full_description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    # Plain integer, not a foreign key: deleting a parent leaves children as-is.
    parent_id = Column(Integer, nullable=True, index=True)
    order = Column("order", Integer, nullable=True, default=0)
    features = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    applications = Column(JSON, nullable=False, default=list)
    specifications = Column(JSON, nullable=False, default=dict)
    related_services = Column(JSON, nullable=False, default=list)
    meta_title = Column(String, nullable=True)
    meta_description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ContactMessageRow(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    read = Column(Boolean, nullable=False, default=False)


ROW_TYPES: dict[type[Record], type] = {
    User: UserRow,
    BlogPost: BlogPostRow,
    Product: ProductRow,
    Service: ServiceRow,
    ContactMessage: ContactMessageRow,
}
