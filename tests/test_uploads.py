import io
import logging
import os

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from resume_review.errors import FileTooLarge
from resume_review.uploads import UploadStore


def _upload(data, filename="resume.pdf", content_type="application/pdf"):
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


def test_save_writes_unique_file(upload_dir):
    store = UploadStore(str(upload_dir), max_bytes=1024)

    first = store.save(_upload(b"%PDF-1.4 data"))
    second = store.save(_upload(b"%PDF-1.4 data"))

    assert first.path != second.path
    assert first.path.endswith("-resume.pdf")
    assert first.read_bytes() == b"%PDF-1.4 data"
    assert first.media_type == "application/pdf"
    assert first.filename == "resume.pdf"
    assert first.size == 13


def test_save_strips_directories_from_filename(upload_dir):
    store = UploadStore(str(upload_dir), max_bytes=1024)
    stored = store.save(_upload(b"data", filename="../../etc/passwd"))

    assert os.path.dirname(stored.path) == str(upload_dir)
    assert stored.path.endswith("-passwd")


def test_receive_deletes_file_on_exit(upload_dir, stored_files):
    store = UploadStore(str(upload_dir), max_bytes=1024)

    with store.receive(_upload(b"data")) as stored:
        assert os.path.exists(stored.path)
    assert stored_files() == []


def test_receive_deletes_file_on_error(upload_dir, stored_files):
    store = UploadStore(str(upload_dir), max_bytes=1024)

    with pytest.raises(RuntimeError):
        with store.receive(_upload(b"data")):
            raise RuntimeError("boom")
    assert stored_files() == []


def test_size_cap_rejects_and_removes_partial_file(upload_dir, stored_files):
    store = UploadStore(str(upload_dir), max_bytes=10)

    with pytest.raises(FileTooLarge) as excinfo:
        store.save(_upload(b"x" * 11))
    assert excinfo.value.status_code == 400
    assert stored_files() == []


def test_file_at_cap_is_accepted(upload_dir):
    store = UploadStore(str(upload_dir), max_bytes=10)
    assert store.save(_upload(b"x" * 10)).size == 10


def test_failed_delete_is_logged_not_raised(upload_dir, monkeypatch, caplog):
    store = UploadStore(str(upload_dir), max_bytes=1024)
    stored = store.save(_upload(b"data"))

    def deny(path):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(os, "remove", deny)
    with caplog.at_level(logging.ERROR, logger="resume_review.uploads"):
        store.discard(stored.path)

    assert "Error deleting temp file" in caplog.text


def test_discard_missing_file_is_silent(upload_dir, caplog):
    store = UploadStore(str(upload_dir), max_bytes=1024)
    store.discard(str(upload_dir / "gone.pdf"))
    assert caplog.text == ""
