"""
Archive Reader

Decompresses an uploaded ZIP archive in memory and returns one entry per
document, keeping the folder path each file was found under.
"""

import io
import logging
import zipfile
from pathlib import PurePosixPath
from typing import BinaryIO, List, Union

from pydantic import BaseModel

from hoa_intake.core.exceptions import ArchiveError
logger = logging.getLogger(__name__)

IGNORED_PREFIXES = ("__MACOSX/",)


class ArchiveEntry(BaseModel):
    """One file extracted from an archive."""

    filename: str
    path: str
    content: bytes
    size: int

    @property
    def folder_path(self) -> str:
        """Folder inside the archive, or "General" for top-level files."""
        parent = str(PurePosixPath(self.path).parent)
        return "General" if parent in ("", ".") else parent


def _is_ignored(path: str) -> bool:
    if path.startswith(IGNORED_PREFIXES):
        return True
    # .DS_Store and other hidden files
    return any(part.startswith(".") for part in PurePosixPath(path).parts)


def read_archive(archive: Union[bytes, BinaryIO]) -> List[ArchiveEntry]:
    """
    Read every document out of a ZIP archive.

    Args:
        archive: Archive bytes or a binary file object

    Returns:
        Entries in archive order

    Raises:
        ArchiveError: If the archive is unreadable or contains no documents
    """
    source = io.BytesIO(archive) if isinstance(archive, (bytes, bytearray)) else archive

    try:
        with zipfile.ZipFile(source) as zf:
            entries = []
            for info in zf.infolist():
                path = info.filename.replace("\\", "/")
                if info.is_dir() or _is_ignored(path):
                    continue

                content = zf.read(info)
                filename = PurePosixPath(path).name
                entries.append(
                    ArchiveEntry(
                        filename=filename,
                        path=path,
                        content=content,
                        size=len(content),
                    )
                )
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
        raise ArchiveError(f"Failed to read archive: {str(e)}") from e

    if not entries:
        raise ArchiveError("ZIP file contains no documents")

    logger.info(f"Found {len(entries)} files in archive")
    return entries
