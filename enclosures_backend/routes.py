"""
HTTP routes for the content API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from enclosures_backend.comments import InMemoryCommentStore
from enclosures_backend.dependencies import (
    get_comment_store,
    get_content_store,
    get_media_library,
)
from enclosures_backend.media import MediaLibrary
from enclosures_backend.schemas import (
    BlogPostCreate,
    BlogPostUpdate,
    ContactMessageCreate,
    ContactResponse,
    LoginRequest,
    LoginResponse,
    MediaUpdate,
    ProductCreate,
    ProductUpdate,
    ServiceCreate,
    ServiceUpdate,
    StatusResponse,
    UploadResponse,
)
from enclosures_backend.store import ContentStore

logger = logging.getLogger(__name__)

router = APIRouter()

DEMO_TOKEN = "demo-token"


def _numeric_id(value: str) -> Optional[int]:
    """ASCII digits only; other Unicode digits such as superscripts are not ids."""
    if value.isascii() and value.isdecimal():
        return int(value)
    return None


def _by_id_or_slug(id_or_slug: str, by_id, by_slug):
    """All-digit keys are looked up as ids first, then as slugs."""
    record_id = _numeric_id(id_or_slug)
    if record_id is not None:
        found = by_id(record_id)
        if found is not None:
            return found
    return by_slug(id_or_slug)


def _found(record, entity: str):
    if record is None:
        raise HTTPException(status_code=404, detail=f"{entity} not found")
    return record


def _deleted(ok: bool, entity: str) -> Response:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{entity} not found")
    return Response(status_code=204)


@router.get("/health")
def health():
    return {"status": "healthy"}


# Blog posts


@router.get("/blogs")
def list_blog_posts(store: ContentStore = Depends(get_content_store)):
    return [post.as_dict() for post in store.get_blog_posts()]


@router.get("/blogs/{id_or_slug}")
def get_blog_post(id_or_slug: str, store: ContentStore = Depends(get_content_store)):
    post = _by_id_or_slug(
        id_or_slug, store.get_blog_post_by_id, store.get_blog_post_by_slug
    )
    return _found(post, "Blog post").as_dict()


@router.post("/blogs", status_code=201)
def create_blog_post(
    payload: BlogPostCreate, store: ContentStore = Depends(get_content_store)
):
    return store.create_blog_post(payload).as_dict()


@router.put("/blogs/{post_id}")
def update_blog_post(
    post_id: int,
    payload: BlogPostUpdate,
    store: ContentStore = Depends(get_content_store),
):
    return _found(store.update_blog_post(post_id, payload), "Blog post").as_dict()


@router.delete("/blogs/{post_id}", status_code=204)
def delete_blog_post(post_id: int, store: ContentStore = Depends(get_content_store)):
    return _deleted(store.delete_blog_post(post_id), "Blog post")


# Products


@router.get("/products")
def list_products(store: ContentStore = Depends(get_content_store)):
    return [product.as_dict() for product in store.get_products()]


@router.get("/products/featured")
def list_featured_products(store: ContentStore = Depends(get_content_store)):
    return [product.as_dict() for product in store.get_featured_products()]


@router.get("/products/{id_or_slug}")
def get_product(id_or_slug: str, store: ContentStore = Depends(get_content_store)):
    product = _by_id_or_slug(
        id_or_slug, store.get_product_by_id, store.get_product_by_slug
    )
    return _found(product, "Product").as_dict()


@router.post("/products", status_code=201)
def create_product(
    payload: ProductCreate, store: ContentStore = Depends(get_content_store)
):
    return store.create_product(payload).as_dict()


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    payload: ProductUpdate,
    store: ContentStore = Depends(get_content_store),
):
    return _found(store.update_product(product_id, payload), "Product").as_dict()


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, store: ContentStore = Depends(get_content_store)):
    return _deleted(store.delete_product(product_id), "Product")


# Services


@router.get("/services")
def list_services(store: ContentStore = Depends(get_content_store)):
    return [service.as_dict() for service in store.get_services()]


@router.get("/services/featured")
def list_featured_services(store: ContentStore = Depends(get_content_store)):
    return [service.as_dict() for service in store.get_featured_services()]


@router.get("/services/hierarchy")
def service_hierarchy(store: ContentStore = Depends(get_content_store)):
    return [service.as_dict() for service in store.get_service_hierarchy()]


@router.get("/services/parent/{parent_id}")
def list_services_by_parent(
    parent_id: str, store: ContentStore = Depends(get_content_store)
):
    key = _numeric_id(parent_id)
    if key is None and parent_id != "null":
        raise HTTPException(status_code=400, detail="Invalid parent ID")
    return [service.as_dict() for service in store.get_services_by_parent_id(key)]


@router.get("/services/{service_id}/related")
def list_related_services(
    service_id: int, store: ContentStore = Depends(get_content_store)
):
    return [service.as_dict() for service in store.get_related_services(service_id)]


@router.get("/services/{id_or_slug}")
def get_service(id_or_slug: str, store: ContentStore = Depends(get_content_store)):
    service = _found(
        _by_id_or_slug(id_or_slug, store.get_service_by_id, store.get_service_by_slug),
        "Service",
    )
    body = service.as_dict()
    sub_services = store.get_services_by_parent_id(service.id)
    if sub_services:
        body["subServices"] = [s.as_dict() for s in sub_services]
    return body


@router.post("/services", status_code=201)
def create_service(
    payload: ServiceCreate, store: ContentStore = Depends(get_content_store)
):
    return store.create_service(payload).as_dict()


@router.put("/services/{service_id}")
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    store: ContentStore = Depends(get_content_store),
):
    return _found(store.update_service(service_id, payload), "Service").as_dict()


@router.delete("/services/{service_id}", status_code=204)
def delete_service(service_id: int, store: ContentStore = Depends(get_content_store)):
    return _deleted(store.delete_service(service_id), "Service")


# Contact messages


@router.post("/contact", response_model=ContactResponse, status_code=201)
def submit_contact_message(
    payload: ContactMessageCreate, store: ContentStore = Depends(get_content_store)
):
    message = store.create_contact_message(payload)
    logger.info("Stored contact message %s", message.id)
    return ContactResponse(success=True, message="Message sent successfully")


@router.get("/contact")
def list_contact_messages(store: ContentStore = Depends(get_content_store)):
    return [message.as_dict() for message in store.get_contact_messages()]


@router.post("/contact/{message_id}/read")
def mark_contact_message_as_read(
    message_id: int, store: ContentStore = Depends(get_content_store)
):
    message = store.mark_contact_message_as_read(message_id)
    return _found(message, "Contact message").as_dict()


@router.delete("/contact/{message_id}", status_code=204)
def delete_contact_message(
    message_id: int, store: ContentStore = Depends(get_content_store)
):
    return _deleted(store.delete_contact_message(message_id), "Contact message")


# Uploads and media library


@router.post("/upload", response_model=UploadResponse, status_code=201)
def upload_images(
    images: list[UploadFile] = File(default=[]),
    media: MediaLibrary = Depends(get_media_library),
):
    urls = media.save_uploads([(image.filename or "", image.file) for image in images])
    return UploadResponse(urls=urls)


@router.get("/media")
def list_media(media: MediaLibrary = Depends(get_media_library)):
    return [item.as_dict() for item in media.list_items()]


@router.get("/media/{item_id}")
def get_media_item(item_id: int, media: MediaLibrary = Depends(get_media_library)):
    return _found(media.get_item(item_id), "Media item").as_dict()


@router.patch("/media/{item_id}")
def update_media_item(
    item_id: int,
    payload: MediaUpdate,
    media: MediaLibrary = Depends(get_media_library),
):
    item = media.update_item(item_id, name=payload.name, status=payload.status)
    return _found(item, "Media item").as_dict()


@router.delete("/media/{item_id}", response_model=StatusResponse)
def delete_media_item(item_id: int, media: MediaLibrary = Depends(get_media_library)):
    if not media.delete_item(item_id):
        raise HTTPException(status_code=404, detail="Media item not found")
    return StatusResponse(success=True)


# Comment moderation


@router.get("/comments")
def list_comments(comments: InMemoryCommentStore = Depends(get_comment_store)):
    return [comment.as_dict() for comment in comments.list_comments()]


@router.get("/comments/{comment_id}")
def get_comment(
    comment_id: int, comments: InMemoryCommentStore = Depends(get_comment_store)
):
    return _found(comments.get_comment(comment_id), "Comment").as_dict()


@router.post("/comments/{comment_id}/approve")
def approve_comment(
    comment_id: int, comments: InMemoryCommentStore = Depends(get_comment_store)
):
    comment = _found(comments.approve(comment_id), "Comment")
    return {"success": True, "comment": comment.as_dict()}


@router.post("/comments/{comment_id}/reject")
def reject_comment(
    comment_id: int, comments: InMemoryCommentStore = Depends(get_comment_store)
):
    comment = _found(comments.reject(comment_id), "Comment")
    return {"success": True, "comment": comment.as_dict()}


@router.delete("/comments/{comment_id}", response_model=StatusResponse)
def delete_comment(
    comment_id: int, comments: InMemoryCommentStore = Depends(get_comment_store)
):
    if not comments.delete_comment(comment_id):
        raise HTTPException(status_code=404, detail="Comment not found")
    return StatusResponse(success=True)


# Auth


@router.post("/auth/login", response_model=LoginResponse)
def login(payload: LoginRequest, store: ContentStore = Depends(get_content_store)):
    user = store.get_user_by_username(payload.username)
    # TODO: store password hashes instead of comparing plaintext.
    if user is None or user.password != payload.password:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(id=user.id, username=user.username, token=DEMO_TOKEN)
