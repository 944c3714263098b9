# storage/disk.py
import os
import secrets
from pathlib import Path
from typing import Callable, Optional

from upload_gate.core.logging import get_logger
from upload_gate.core.types import UploadPartMetadata
from upload_gate.storage.base import Destination, Storage, StoredFile

logger = get_logger(__name__)

FilenameBuilder = Callable[[UploadPartMetadata], str]


def random_filename(part: UploadPartMetadata) -> str:
    """16 random bytes as hex, without extension"""
    return secrets.token_hex(16)


class DiskDestination(Destination):
    """Streams a part into a file on disk, created on the first write"""

    def __init__(self, part: UploadPartMetadata, path: Path):
        super().__init__(part)
        self.path = path
        self._handle = None

    def _open(self):
        if self._handle is None:
            self._handle = open(self.path, "wb")
        return self._handle

    def write(self, chunk: bytes) -> None:
        self._open().write(chunk)
        self.size += len(chunk)

    def finalize(self) -> StoredFile:
        # Empty parts still produce an (empty) file
        self._open().close()
        return StoredFile(
            field_name=self.part.field_name,
            original_name=self.part.original_file_name,
            mime_type=self.part.declared_mime_type,
            encoding=self.part.encoding,
            size=self.size,
            storage="disk",
            path=str(self.path),
            filename=self.path.name,
        )

    def discard(self) -> None:
        if self._handle is None:
            return
        if not self._handle.closed:
            self._handle.close()
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        logger.info("partial_file_discarded", path=str(self.path), size=self.size)


class DiskStorage(Storage):
    """
    Writes accepted parts under a directory

    Args:
        directory: Target directory, created when missing
        filename: Builds the stored file name from the part metadata
    """

    name = "disk"

    def __init__(self, directory: str, filename: Optional[FilenameBuilder] = None):
        self.directory = Path(directory)
        self.filename = filename or random_filename
        self.directory.mkdir(parents=True, exist_ok=True)

    def destination_for(self, part: UploadPartMetadata) -> DiskDestination:
        # Only the final path component of a built name is kept
        name = os.path.basename(self.filename(part))
        path = self.directory / name
        logger.debug("disk_destination_resolved", path=str(path))
        return DiskDestination(part, path)
