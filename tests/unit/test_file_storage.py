from __future__ import annotations

from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from idgov.core.config import Settings
from idgov.core.errors import NotFoundError, UpstreamFailureError
from idgov.services.file_storage import LocalFileStorage, S3FileStorage, build_file_storage


def test_local_storage_round_trip(tmp_path: Path) -> None:
    storage = LocalFileStorage(tmp_path / "uploads")

    stored = storage.save(b"%PDF-1.7 policy", "Access Policy.PDF", "application/pdf")

    assert stored.storage_key.endswith(".pdf")
    assert stored.size == 15
    assert storage.read(stored.storage_key) == b"%PDF-1.7 policy"
    assert storage.delete(stored.storage_key) is True
    assert storage.delete(stored.storage_key) is False
    with pytest.raises(NotFoundError):
        storage.read(stored.storage_key)


@pytest.mark.parametrize("storage_key", ["../secrets.txt", "nested/file.pdf", ".env", ""])
def test_local_storage_rejects_traversal(tmp_path: Path, storage_key: str) -> None:
    storage = LocalFileStorage(tmp_path)

    with pytest.raises(NotFoundError):
        storage.read(storage_key)


@pytest.mark.parametrize(
    ("original_name", "extension"),
    [
        ("C:\\my.docs\\report", ""),
        ("C:\\Users\\ana\\Evidence.DOCX", ".docx"),
        ("uploads/v1.2/scan", ""),
        ("notes.tar gz", ""),
    ],
)
def test_local_storage_keys_ignore_client_directories(tmp_path: Path, original_name: str, extension: str) -> None:
    storage = LocalFileStorage(tmp_path)

    stored = storage.save(b"data", original_name, "application/pdf")

    assert "\\" not in stored.storage_key
    assert "/" not in stored.storage_key
    assert stored.storage_key[32:] == extension
    assert storage.read(stored.storage_key) == b"data"


def test_local_storage_wraps_write_failures(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    storage = LocalFileStorage(blocker)

    with pytest.raises(UpstreamFailureError):
        storage.save(b"data", "note.pdf", "application/pdf")


def test_s3_storage_creates_bucket_and_uses_prefix(s3_client) -> None:
    settings = Settings(upload_bucket="evidence", upload_prefix="attachments/")
    storage = S3FileStorage(settings=settings, s3_client_factory=lambda: s3_client)

    stored = storage.save(b"\x89PNG", "diagram.png", "image/png")

    assert list(s3_client.buckets["evidence"]) == [f"attachments/{stored.storage_key}"]
    assert storage.read(stored.storage_key) == b"\x89PNG"
    assert storage.delete(stored.storage_key) is True
    with pytest.raises(NotFoundError):
        storage.read(stored.storage_key)


def test_s3_storage_maps_service_errors(s3_client, monkeypatch) -> None:
    storage = S3FileStorage(settings=Settings(), s3_client_factory=lambda: s3_client)

    def broken_put(**_: object) -> None:
        raise ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")

    monkeypatch.setattr(s3_client, "put_object", broken_put)

    with pytest.raises(UpstreamFailureError):
        storage.save(b"data", "policy.pdf", "application/pdf")


def test_build_file_storage_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_file_storage(Settings(upload_dir=str(tmp_path))), LocalFileStorage)
    assert isinstance(build_file_storage(Settings(file_storage_backend="s3")), S3FileStorage)
    with pytest.raises(ValueError):
        build_file_storage(Settings(file_storage_backend="ftp"))
