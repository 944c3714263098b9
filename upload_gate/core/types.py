"""
Value types for upload admission

Metadata, limits, filter policy and decisions exchanged between the
multipart parser, the admission gate and the storage strategy.
"""

from enum import Enum
from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RejectionReason(str, Enum):
    """Why a part was refused"""
    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"
    FILE_TOO_LARGE = "FileTooLarge"
    TOO_MANY_FILES = "TooManyFiles"
    TOO_MANY_PARTS = "TooManyParts"
    TOO_MANY_FIELDS = "TooManyFields"
    FIELD_TOO_LARGE = "FieldTooLarge"
    FIELD_NAME_TOO_LONG = "FieldNameTooLong"
    TOO_MANY_HEADER_PAIRS = "TooManyHeaderPairs"


class UploadPartMetadata(BaseModel):
    """
    Metadata for one file part, as reported by the multipart parser.

    The parser creates a new instance whenever the running size changes;
    instances are never mutated.
    """
    model_config = ConfigDict(frozen=True)

    field_name: str
    original_file_name: Optional[str] = None
    declared_mime_type: Optional[str] = None
    byte_size_so_far: int = Field(default=0, ge=0)
    encoding: Optional[str] = None


class LimitsConfig(BaseModel):
    """Upper bounds for one upload request. None means unbounded."""
    model_config = ConfigDict(frozen=True)

    max_field_name_size: Optional[int] = Field(default=None, gt=0)
    max_field_value_size: Optional[int] = Field(default=None, gt=0)
    max_fields: Optional[int] = Field(default=None, gt=0)
    max_file_size: Optional[int] = Field(default=None, gt=0)
    max_files: Optional[int] = Field(default=None, gt=0)
    max_parts: Optional[int] = Field(default=None, gt=0)
    max_header_pairs: Optional[int] = Field(default=None, gt=0)


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    if value and not value.startswith("."):
        value = "." + value
    return value


class FilterPolicy(BaseModel):
    """
    Allow-lists for file extensions and declared MIME types.

    Entries are lower-cased on construction and extensions always carry
    the leading dot, so "PNG", "png" and ".png" are the same entry.
    """
    model_config = ConfigDict(frozen=True)

    allowed_extensions: frozenset[str] = frozenset()
    allowed_mime_types: frozenset[str] = frozenset()

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _lower_extensions(cls, value: Iterable[str]) -> frozenset[str]:
        return frozenset(_normalise_extension(ext) for ext in value if ext.strip())

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def _lower_mime_types(cls, value: Iterable[str]) -> frozenset[str]:
        return frozenset(mime.strip().lower() for mime in value if mime.strip())


class Accepted(BaseModel):
    """The part is admitted; bytes go to `destination`"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["accepted"] = "accepted"
    destination: Any = None


class Rejected(BaseModel):
    """The part is refused; terminal for that part"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    reason: RejectionReason


AdmissionDecision = Annotated[Union[Accepted, Rejected], Field(discriminator="kind")]


class SessionCounters(BaseModel):
    """Running counts for a single in-flight request. Never shared."""

    parts_seen: int = 0
    files_seen: int = 0
    fields_seen: int = 0
