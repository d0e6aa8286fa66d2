"""
Blog comment moderation queue.

Comments live only in process memory and start with a small demo set; the
admin panel approves them, marks them as spam or deletes them.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import ClassVar, Dict, Optional

from enclosures_backend.records import Record, utcnow

APPROVED = "approved"
PENDING = "pending"
SPAM = "spam"


@dataclass
class Comment(Record):
    kind: ClassVar[str] = "comments"

    id: int
    author: str
    email: str
    blog_post_id: int
    blog_post_title: str
    status: str = PENDING
    created_at: datetime = field(default_factory=utcnow)


def _demo_comments() -> list[Comment]:
    now = utcnow()
    return [
        Comment(
            id=1,
            author="John Smith",
            email="john@example.com",
            blog_post_id=1,
            blog_post_title="Industry Trends: The Future of Industrial Enclosures",
            status=APPROVED,
            created_at=now - timedelta(days=2),
        ),
        Comment(
            id=2,
            author="Jane Doe",
            email="jane@example.com",
            blog_post_id=1,
            blog_post_title="Industry Trends: The Future of Industrial Enclosures",
            status=PENDING,
            created_at=now - timedelta(days=1),
        ),
        Comment(
            id=3,
            author="spam.bot",
            email="spam@example.com",
            blog_post_id=2,
            blog_post_title="Custom Enclosure Solutions for Harsh Environments",
            status=SPAM,
            created_at=now,
        ),
    ]


class InMemoryCommentStore:
    def __init__(self, seed: bool = True):
        self._lock = threading.Lock()
        self.comments: Dict[int, Comment] = {}
        if seed:
            self.comments = {c.id: c for c in _demo_comments()}

    def list_comments(self) -> list[Comment]:
        with self._lock:
            return list(self.comments.values())

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.comments.get(comment_id)

    def set_status(self, comment_id: int, status: str) -> Optional[Comment]:
        with self._lock:
            comment = self.comments.get(comment_id)
            if comment is None:
                return None
            updated = replace(comment, status=status)
            self.comments[comment_id] = updated
            return updated

    def approve(self, comment_id: int) -> Optional[Comment]:
        return self.set_status(comment_id, APPROVED)

    def reject(self, comment_id: int) -> Optional[Comment]:
        return self.set_status(comment_id, SPAM)

    def delete_comment(self, comment_id: int) -> bool:
        with self._lock:
            return self.comments.pop(comment_id, None) is not None
