"""File storage backends for response attachments."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
import re
from pathlib import Path, PureWindowsPath
from typing import Any, Protocol
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from idgov.core.config import Settings, get_settings
from idgov.core.errors import NotFoundError, UpstreamFailureError

logger = logging.getLogger(__name__)

_EXTENSION_PATTERN = re.compile(r"\.[a-z0-9]{1,10}")


@dataclass(slots=True, frozen=True)
class StoredFile:
    """Result of persisting raw bytes."""

    storage_key: str
    size: int


class FileStorage(Protocol):
    def save(self, data: bytes, original_name: str, mime_type: str) -> StoredFile: ...

    def read(self, storage_key: str) -> bytes: ...

    def delete(self, storage_key: str) -> bool: ...


def generate_storage_key(original_name: str) -> str:
    # clients may send a full Windows path as the filename
    extension = PureWindowsPath(original_name).suffix.lower()
    if not _EXTENSION_PATTERN.fullmatch(extension):
        extension = ""
    return f"{uuid4().hex}{extension}"


class LocalFileStorage:
    """Stores attachments as flat files inside ``upload_dir``."""

    def __init__(self, upload_dir: str | Path) -> None:
        self._upload_dir = Path(upload_dir)

    def _path_for(self, storage_key: str) -> Path:
        if not storage_key or "/" in storage_key or "\\" in storage_key or storage_key.startswith("."):
            raise NotFoundError("Attachment file not found")
        return self._upload_dir / storage_key

    def save(self, data: bytes, original_name: str, mime_type: str) -> StoredFile:
        storage_key = generate_storage_key(original_name)
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
            self._path_for(storage_key).write_bytes(data)
        except OSError as exc:
            raise UpstreamFailureError("Failed to store attachment") from exc
        return StoredFile(storage_key=storage_key, size=len(data))

    def read(self, storage_key: str) -> bytes:
        path = self._path_for(storage_key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError("Attachment file not found") from exc
        except OSError as exc:
            raise UpstreamFailureError("Failed to read attachment") from exc

    def delete(self, storage_key: str) -> bool:
        try:
            self._path_for(storage_key).unlink()
        except (OSError, NotFoundError):
            return False
        return True


class S3FileStorage:
    """Stores attachments in an S3 bucket under a configurable prefix."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        s3_client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._s3_client_factory = s3_client_factory or self._default_s3_client
        self._s3_client: Any | None = None
        self._bucket_ready = False

    def _default_s3_client(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = self._s3_client_factory()
        return self._s3_client

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        client = self._get_s3_client()
        bucket = self._settings.upload_bucket
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError:
            client.create_bucket(Bucket=bucket)
        self._bucket_ready = True

    def _object_key(self, storage_key: str) -> str:
        return f"{self._settings.upload_prefix.rstrip('/')}/{storage_key}"

    def save(self, data: bytes, original_name: str, mime_type: str) -> StoredFile:
        storage_key = generate_storage_key(original_name)
        try:
            self._ensure_bucket()
            self._get_s3_client().put_object(
                Bucket=self._settings.upload_bucket,
                Key=self._object_key(storage_key),
                Body=data,
                ContentType=mime_type,
                Metadata={"original_name": original_name},
            )
        except (BotoCoreError, ClientError) as exc:
            raise UpstreamFailureError("Failed to store attachment") from exc
        logger.info(
            "stored attachment in s3",
            extra={"bucket": self._settings.upload_bucket, "storage_key": storage_key},
        )
        return StoredFile(storage_key=storage_key, size=len(data))

    def read(self, storage_key: str) -> bytes:
        client = self._get_s3_client()
        try:
            response = client.get_object(
                Bucket=self._settings.upload_bucket, Key=self._object_key(storage_key)
            )
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code")
            if error_code in {"404", "NoSuchKey", "NoSuchBucket"}:
                raise NotFoundError("Attachment file not found") from exc
            raise UpstreamFailureError("Failed to read attachment") from exc
        except BotoCoreError as exc:
            raise UpstreamFailureError("Failed to read attachment") from exc
        return response["Body"].read()

    def delete(self, storage_key: str) -> bool:
        try:
            self._get_s3_client().delete_object(
                Bucket=self._settings.upload_bucket, Key=self._object_key(storage_key)
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("failed to delete attachment", extra={"storage_key": storage_key, "error": str(exc)})
            return False
        return True


def build_file_storage(settings: Settings | None = None) -> FileStorage:
    settings = settings or get_settings()
    backend = settings.file_storage_backend.lower()
    if backend == "local":
        return LocalFileStorage(settings.upload_dir)
    if backend == "s3":
        return S3FileStorage(settings=settings)
    raise ValueError(f"Unsupported file storage backend '{settings.file_storage_backend}'")


__all__ = [
    "FileStorage",
    "LocalFileStorage",
    "S3FileStorage",
    "StoredFile",
    "build_file_storage",
    "generate_storage_key",
]
