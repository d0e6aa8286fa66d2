"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from enclosures_backend.blob_storage import InMemoryBlobStorageClient, S3BlobStorageClient
from enclosures_backend.comments import InMemoryCommentStore
from enclosures_backend.config import get_settings
from enclosures_backend.media import MediaLibrary
from enclosures_backend.memory_store import InMemoryContentStore
from enclosures_backend.object_store import ObjectContentStore
from enclosures_backend.seed import seed_if_empty
from enclosures_backend.sql_store import SqlContentStore
from enclosures_backend.store import ContentStore

logger = logging.getLogger(__name__)

_content_store: ContentStore | None = None
_media_library: MediaLibrary | None = None
_comment_store: InMemoryCommentStore | None = None


def _object_store() -> ObjectContentStore:
    settings = get_settings()
    if settings.cos_bucket:
        client = S3BlobStorageClient(
            bucket=settings.cos_bucket,
            region=settings.cos_region or "",
            endpoint=settings.cos_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    else:
        logger.warning("COS_BUCKET is not set; object store is backed by memory")
        client = InMemoryBlobStorageClient()
    return ObjectContentStore(client, prefix=settings.object_store_prefix)


def get_content_store() -> ContentStore:
    """
    Return a singleton content store so rows persist across requests.
    """
    global _content_store
    if _content_store:
        return _content_store

    settings = get_settings()
    backend = settings.storage_backend
    if backend == "sql" and not settings.database_url:
        logger.warning("DATABASE_URL is not set; falling back to the in-memory store")
        backend = "memory"

    if backend == "object":
        store = _object_store()
    elif backend == "sql":
        store = SqlContentStore(settings.database_url)
    else:
        store = InMemoryContentStore()
    logger.info("Using %s content store", backend)

    if backend != "memory" and settings.seed_demo_data:
        seed_if_empty(store)
    _content_store = store
    return _content_store


def get_media_library() -> MediaLibrary:
    global _media_library
    if _media_library:
        return _media_library
    settings = get_settings()
    _media_library = MediaLibrary(
        settings.uploads_dir,
        url_path=settings.uploads_url_path,
        max_files=settings.max_upload_files,
    )
    return _media_library


def get_comment_store() -> InMemoryCommentStore:
    global _comment_store
    if _comment_store:
        return _comment_store
    _comment_store = InMemoryCommentStore()
    return _comment_store
