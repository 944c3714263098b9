# storage/memory.py
from io import BytesIO

from upload_gate.core.types import UploadPartMetadata
from upload_gate.storage.base import Destination, Storage, StoredFile


class MemoryDestination(Destination):
    """Accumulates a part in an in-memory buffer"""

    def __init__(self, part: UploadPartMetadata):
        super().__init__(part)
        self.buffer = BytesIO()

    def write(self, chunk: bytes) -> None:
        self.buffer.write(chunk)
        self.size += len(chunk)

    def finalize(self) -> StoredFile:
        return StoredFile(
            field_name=self.part.field_name,
            original_name=self.part.original_file_name,
            mime_type=self.part.declared_mime_type,
            encoding=self.part.encoding,
            size=self.size,
            storage="memory",
            buffer=self.buffer.getvalue(),
        )

    def discard(self) -> None:
        self.buffer = BytesIO()
        self.size = 0


class MemoryStorage(Storage):
    """Keeps accepted parts in memory"""

    name = "memory"

    def destination_for(self, part: UploadPartMetadata) -> MemoryDestination:
        return MemoryDestination(part)
