"""Object storage for product images and site assets.

Objects live under ``storage_root`` and are served from
``storage_public_url``. Only URLs under that public prefix are considered
owned by this storage; anything else (static paths, third-party CDNs) is left
alone on replace or delete.
"""

import asyncio
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import UploadFile

from core.config import Settings
from core.exceptions import StorageError
from core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StoredObject:
    """A binary object to store, with its original filename."""

    filename: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def extension(self) -> str:
        suffix = Path(self.filename).suffix.lstrip(".")
        return suffix.lower() or "bin"


async def read_upload(file: UploadFile) -> StoredObject:
    """Buffer a multipart upload into a StoredObject."""
    return StoredObject(
        filename=file.filename or "upload",
        content=await file.read(),
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
    )


def safe_name(filename: str) -> str:
    return _UNSAFE.sub("_", Path(filename).name) or "upload"


def timestamped_path(prefix: str, filename: str) -> str:
    """``products/1700000000000_shirt.jpg`` style object path."""
    return f"{prefix}/{int(time.time() * 1000)}_{safe_name(filename)}"


class ObjectStorage:
    """Filesystem-backed object store with public download URLs."""

    def __init__(self, settings: Settings):
        self.root = Path(settings.storage_root)
        self.public_url = settings.storage_public_url

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Object path escapes storage root: {path}")
        return target

    def url_for(self, path: str) -> str:
        return f"{self.public_url}/{quote(path)}"

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """Return the object path for a URL this storage issued, else None."""
        if not url or not url.startswith(self.public_url + "/"):
            return None
        return unquote(url[len(self.public_url) + 1:].split("?")[0])

    def owns(self, url: Optional[str]) -> bool:
        return self.path_from_url(url) is not None

    async def upload(self, path: str, upload: StoredObject) -> str:
        """Write an object and return its download URL."""
        target = self._resolve(path)

        def write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(upload.content)

        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, write)
        except OSError as e:
            logger.error("Object upload failed", path=path, error=str(e))
            raise StorageError(f"Upload of {path} failed: {e}") from e

        logger.info("Object uploaded", path=path, size=len(upload.content),
                    content_type=upload.content_type)
        return self.url_for(path)

    async def delete(self, path: str) -> None:
        """Delete an object; raises StorageError if it cannot be removed."""
        target = self._resolve(path)

        def remove():
            target.unlink()

        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, remove)
        except OSError as e:
            raise StorageError(f"Delete of {path} failed: {e}") from e
        logger.info("Object deleted", path=path)

    async def delete_url(self, url: Optional[str]) -> bool:
        """Best-effort delete of an owned object URL. Returns True if deleted."""
        path = self.path_from_url(url)
        if path is None:
            return False
        try:
            await self.delete(path)
            return True
        except StorageError as e:
            logger.warning("Could not delete stored object", url=url, error=str(e))
            return False
