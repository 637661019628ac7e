"""
Photo attachment storage.

Photos arrive as data-URI strings, are decoded to raw bytes and written under
generated filenames into a local directory that is also served at /storage.
"""
import base64
import binascii
import os
import re
import time
import uuid
from pathlib import Path
from typing import Protocol

import aiofiles
import structlog
from fastapi import Depends

from blog_api.config import Settings, get_settings
from blog_api.errors import RequestValidationFailed, StorageError
from blog_api.schemas import PHOTO_PATTERN

logger = structlog.get_logger(__name__)

DATA_URI_PREFIX = re.compile(PHOTO_PATTERN)


def decode_photo(photo: str) -> bytes:
    """Strip the data-URI prefix and base64-decode the rest"""
    encoded = DATA_URI_PREFIX.sub("", photo, count=1)
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RequestValidationFailed(
            detail=[{"loc": ["photo"], "msg": "Photo is not valid base64 data"}]
        ) from exc


def generate_photo_filename(author_id: str) -> str:
    """{epochMillis}-{authorId}-{token}.png; the token keeps same-millisecond uploads apart"""
    return f"{int(time.time() * 1000)}-{author_id}-{uuid.uuid4().hex[:12]}.png"


def build_photo_path(server_base_path: str, filename: str) -> str:
    return f"{server_base_path.rstrip('/')}/storage/{filename}"


def filename_from_photo_path(photo_path: str) -> str:
    return photo_path.split("/")[-1]


class BlobStorage(Protocol):
    async def write(self, filename: str, data: bytes) -> None: ...

    def delete(self, filename: str) -> None: ...

    def exists(self, filename: str) -> bool: ...


class LocalBlobStorage:
    """Stores photo files in a directory on the local filesystem"""

    def __init__(self, root: str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, filename: str) -> Path:
        # Generated names never contain separators; reject anything that tries to escape root
        if os.path.basename(filename) != filename or filename in ("", ".", ".."):
            raise StorageError(f"Invalid photo filename: {filename!r}")
        return self.root / filename

    async def write(self, filename: str, data: bytes) -> None:
        path = self._path_for(filename)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as exc:
            raise StorageError(f"Could not write photo {filename}") from exc
        logger.info("photo_stored", filename=filename, size=len(data))

    def delete(self, filename: str) -> None:
        """Remove a photo; FileNotFoundError is left to the caller to judge"""
        path = self._path_for(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise StorageError(f"Could not delete photo {filename}") from exc
        logger.info("photo_deleted", filename=filename)

    def exists(self, filename: str) -> bool:
        return self._path_for(filename).is_file()

    def read(self, filename: str) -> bytes:
        return self._path_for(filename).read_bytes()


def get_blob_storage(settings: Settings = Depends(get_settings)) -> BlobStorage:
    """Blob storage dependency"""
    return LocalBlobStorage(settings.storage_dir)
