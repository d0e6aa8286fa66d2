"""
Blob storage abstraction for Tencent COS (S3-compatible) and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
import json

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


class BlobStorageClient(Protocol):
    """Defines the operations the object-store backend needs."""

    def upload_json(self, path: str, payload: dict) -> None:
        ...

    def get_bytes(self, path: str) -> bytes:
        """Raises FileNotFoundError when nothing is stored at ``path``."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def delete(self, path: str) -> None:
        ...

    def list_paths(self, prefix: str) -> list[str]:
        ...


@dataclass
class InMemoryBlobStorageClient:
    """Test double for blob storage interactions."""

    stored_objects: dict = None

    def __post_init__(self):
        if self.stored_objects is None:
            self.stored_objects = {}

    def upload_json(self, path: str, payload: dict) -> None:
        # Use JSON string to mimic real upload behavior
        self.stored_objects[path] = json.loads(json.dumps(payload, default=str))

    def get_bytes(self, path: str) -> bytes:
        stored = self.stored_objects.get(path)
        if stored is None:
            raise FileNotFoundError(path)
        if isinstance(stored, bytes):
            return stored
        return json.dumps(stored, default=str).encode("utf-8")

    def exists(self, path: str) -> bool:
        return path in self.stored_objects

    def delete(self, path: str) -> None:
        self.stored_objects.pop(path, None)

    def list_paths(self, prefix: str) -> list[str]:
        return sorted(p for p in self.stored_objects if p.startswith(prefix))


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES


@dataclass
class S3BlobStorageClient:
    """
    S3-compatible blob client, used against Tencent COS in production.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy COS requirements.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def upload_json(self, path: str, payload: dict) -> None:
        body = json.dumps(payload, default=str).encode("utf-8")
        self._client.put_object(
            Bucket=self.bucket,
            Key=path,
            Body=body,
            ContentType="application/json",
        )

    def get_bytes(self, path: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=path)
        except ClientError as e:
            if _is_missing(e):
                raise FileNotFoundError(path) from e
            raise
        return response["Body"].read()

    def exists(self, path: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=path)
        except ClientError as e:
            if _is_missing(e):
                return False
            raise
        return True

    def delete(self, path: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=path)

    def list_paths(self, prefix: str) -> list[str]:
        paginator = self._client.get_paginator("list_objects_v2")
        paths: list[str] = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            paths.extend(item["Key"] for item in page.get("Contents", []))
        return paths
