"""
Document Storage

Stores document bytes on the local filesystem (or a mounted volume) and
hands back the storage path plus the public URL the file is served under.

Usage:
    storage = LocalDocumentStorage(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_URL)
    stored = storage.upload(association_id, "lease.pdf", content)
"""

import logging
import re
import time
import uuid
from pathlib import Path
from typing import Union
from uuid import UUID

from pydantic import BaseModel

from hoa_intake.core.config import settings
from hoa_intake.core.exceptions import StorageError

logger = logging.getLogger(__name__)

UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class StoredFile(BaseModel):
    path: str
    """Path relative to the storage root"""
    url: str


class LocalDocumentStorage:
    """Filesystem-backed object store for ingested documents."""

    def __init__(self, root: Union[str, Path], public_base_url: str):
        """
        Initialize storage.

        Args:
            root: Directory under which files are written
            public_base_url: URL prefix the root directory is served under
        """
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls) -> "LocalDocumentStorage":
        return cls(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_URL)

    def upload(self, association_id: UUID, filename: str, content: bytes) -> StoredFile:
        """
        Write a file under the association's folder (blocking).

        Args:
            association_id: Owning association (first path component)
            filename: Original archive path or filename
            content: File bytes

        Returns:
            StoredFile with relative path and public URL

        Raises:
            StorageError: If the file cannot be written
        """
        safe_name = UNSAFE_CHARS.sub("_", filename)
        relative = f"{association_id}/{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{safe_name}"
        target = self.root / relative

        if target.exists():
            raise StorageError(relative, "file already exists")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise StorageError(relative, str(e)) from e

        logger.debug(f"Stored {filename} at {relative} ({len(content)} bytes)")
        return StoredFile(path=relative, url=f"{self.public_base_url}/{relative}")

    def delete(self, path: str) -> None:
        """Remove a stored file; missing files are ignored."""
        try:
            (self.root / path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove stored file {path}: {str(e)}")
