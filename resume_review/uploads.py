"""Transient on-disk storage for uploaded resumes.

Each request writes at most one file into the upload directory and the file
is removed when the request finishes, whatever the outcome.

The size cap here applies while copying an upload that the server has already
received. Requests whose declared Content-Length is over the cap are turned
away earlier by the app middleware in ``main.py``.
"""
import logging
import os
import secrets
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from fastapi import UploadFile

from .errors import FileTooLarge

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredUpload:
    path: str
    filename: str
    media_type: str
    size: int

    def read_bytes(self) -> bytes:
        with open(self.path, "rb") as f:
            return f.read()


class UploadStore:
    def __init__(self, directory: str, max_bytes: int):
        self.directory = directory
        self.max_bytes = max_bytes

    def _unique_path(self, filename: str) -> str:
        base = os.path.basename(filename or "upload") or "upload"
        name = f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}-{base}"
        return os.path.join(self.directory, name)

    def save(self, upload: UploadFile) -> StoredUpload:
        """Copy the upload to disk, enforcing the size cap while writing."""
        os.makedirs(self.directory, exist_ok=True)
        path = self._unique_path(upload.filename)

        size = 0
        try:
            with open(path, "wb") as buffer:
                while True:
                    chunk = upload.file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise FileTooLarge(self.max_bytes)
                    buffer.write(chunk)
        except BaseException:
            self.discard(path)
            raise

        return StoredUpload(path=path, filename=upload.filename or "", media_type=upload.content_type or "", size=size)

    def discard(self, path: str) -> None:
        """Delete a stored file; failures are logged and never raised."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error deleting temp file %s: %s", path, e)

    @contextmanager
    def receive(self, upload: UploadFile) -> Iterator[StoredUpload]:
        stored = self.save(upload)
        try:
            yield stored
        finally:
            self.discard(stored.path)
