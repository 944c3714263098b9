"""Storage strategies for accepted upload parts"""

from .base import Destination, Storage, StoredFile
from .disk import DiskDestination, DiskStorage, random_filename
from .memory import MemoryDestination, MemoryStorage


def build_storage(settings) -> Storage:
    """Select the storage strategy named in the settings"""
    if settings.storage == "memory":
        return MemoryStorage()
    return DiskStorage(settings.upload_dir)


__all__ = [
    "Destination",
    "Storage",
    "StoredFile",
    "DiskDestination",
    "DiskStorage",
    "MemoryDestination",
    "MemoryStorage",
    "build_storage",
    "random_filename",
]
