# storage/base.py
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from upload_gate.core.types import UploadPartMetadata


class StoredFile(BaseModel):
    """A file part whose bytes were fully written to its destination"""

    field_name: str
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    encoding: Optional[str] = None
    size: int = 0
    storage: str
    path: Optional[str] = None
    filename: Optional[str] = None
    buffer: Optional[bytes] = None


class Destination(ABC):
    """Where the bytes of one accepted part are written"""

    def __init__(self, part: UploadPartMetadata):
        self.part = part
        self.size = 0

    @abstractmethod
    def write(self, chunk: bytes) -> None:
        """Append a chunk of the part's bytes"""
        pass

    @abstractmethod
    def finalize(self) -> StoredFile:
        """Close the destination and describe the stored file"""
        pass

    @abstractmethod
    def discard(self) -> None:
        """Drop everything written so far"""
        pass


class Storage(ABC):
    """Strategy resolving the destination of accepted parts"""

    name: str

    @abstractmethod
    def destination_for(self, part: UploadPartMetadata) -> Destination:
        pass
