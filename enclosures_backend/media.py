"""
Image uploads and the media library.

Uploaded files are written to a local directory that the app serves
statically. The library has no table of its own: every listing is derived
from the directory contents and file metadata, with admin edits (display
name, status) kept alongside in memory.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import random
import shutil
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, ClassVar, Dict, Optional, Sequence

from enclosures_backend.records import Record

logger = logging.getLogger(__name__)

UPLOAD_FIELD = "images"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class UploadError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.status_code = status_code
        super().__init__(message)


@dataclass
class MediaItem(Record):
    kind: ClassVar[str] = "media"
    datetime_fields: ClassVar[tuple[str, ...]] = ("uploaded_at",)

    id: int
    name: str
    url: str
    type: str
    size: int
    uploaded_at: datetime
    status: str = "approved"


def unique_filename(original: str) -> str:
    """``images-<epoch ms>-<random>.<ext>``, keeping the original extension."""
    _, ext = os.path.splitext(original)
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{UPLOAD_FIELD}-{suffix}{ext}"


class MediaLibrary:
    def __init__(self, directory: str, url_path: str = "/uploads", max_files: int = 5):
        self.directory = directory
        self.url_path = url_path.rstrip("/")
        self.max_files = max_files
        self._lock = threading.Lock()
        # filename -> {"name": ..., "status": ...}
        self.overrides: Dict[str, dict] = {}

    def save_uploads(self, files: Sequence[tuple[str, BinaryIO]]) -> list[str]:
        """
        Store a batch of ``(original filename, file object)`` pairs and return
        their public URLs. The whole batch is rejected before anything is
        written if it is empty, too large or contains a non-image file.
        """
        if not files:
            raise UploadError("No files uploaded")
        if len(files) > self.max_files:
            raise UploadError(f"At most {self.max_files} files can be uploaded at once")
        for original, _ in files:
            _, ext = os.path.splitext(original or "")
            if ext.lower() not in ALLOWED_EXTENSIONS:
                raise UploadError("Only image files are allowed!", status_code=415)

        os.makedirs(self.directory, exist_ok=True)
        urls = []
        for original, stream in files:
            filename = unique_filename(original)
            with open(os.path.join(self.directory, filename), "wb") as out:
                shutil.copyfileobj(stream, out)
            urls.append(f"{self.url_path}/{filename}")
        logger.info("Stored %d upload(s) in %s", len(urls), self.directory)
        return urls

    def _filenames(self) -> list[str]:
        if not os.path.isdir(self.directory):
            return []
        return sorted(
            name
            for name in os.listdir(self.directory)
            if os.path.isfile(os.path.join(self.directory, name))
        )

    def list_items(self) -> list[MediaItem]:
        items = []
        for filename in self._filenames():
            try:
                stats = os.stat(os.path.join(self.directory, filename))
            except FileNotFoundError:
                continue
            override = self.overrides.get(filename, {})
            items.append(
                MediaItem(
                    id=len(items) + 1,
                    name=override.get("name", filename),
                    url=f"{self.url_path}/{filename}",
                    type=mimetypes.guess_type(filename)[0] or "application/octet-stream",
                    size=stats.st_size,
                    uploaded_at=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
                    status=override.get("status", "approved"),
                )
            )
        return items

    def get_item(self, item_id: int) -> Optional[MediaItem]:
        for item in self.list_items():
            if item.id == item_id:
                return item
        return None

    def update_item(
        self, item_id: int, name: Optional[str] = None, status: Optional[str] = None
    ) -> Optional[MediaItem]:
        with self._lock:
            item = self.get_item(item_id)
            if item is None:
                return None
            filename = item.url.rsplit("/", 1)[-1]
            override = self.overrides.setdefault(filename, {})
            if name:
                override["name"] = name
            if status:
                override["status"] = status
        return self.get_item(item_id)

    def delete_item(self, item_id: int) -> bool:
        with self._lock:
            item = self.get_item(item_id)
            if item is None:
                return False
            filename = item.url.rsplit("/", 1)[-1]
            try:
                os.remove(os.path.join(self.directory, filename))
            except FileNotFoundError:
                logger.info("Media file %s was already removed", filename)
                return False
            finally:
                self.overrides.pop(filename, None)
        logger.info("Deleted media file %s", filename)
        return True
