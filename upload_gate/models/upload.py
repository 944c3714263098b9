"""
Pydantic models for the upload API

These models structure the response data returned to clients.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class UploadedFileInfo(BaseModel):
    """
    A file part that was admitted and stored.

    The in-memory buffer of memory storage is never echoed back.
    """
    field_name: str = Field(..., description="Form field the file was sent under")
    original_name: Optional[str] = Field(default=None, description="File name declared by the client")
    mime_type: Optional[str] = Field(default=None, description="Content type declared by the client")
    size: int = Field(..., ge=0, description="Number of bytes stored")
    storage: str = Field(..., description="Storage strategy that received the bytes")
    filename: Optional[str] = Field(default=None, description="Stored file name (disk storage)")
    path: Optional[str] = Field(default=None, description="Stored file path (disk storage)")


class RejectedPartInfo(BaseModel):
    """A part refused by the admission gate"""
    field_name: Optional[str] = None
    original_name: Optional[str] = None
    reason: str


class UploadResponse(BaseModel):
    """
    Response model for the upload endpoint.

    Lists every accepted file and field and every rejected part.
    """
    files: List[UploadedFileInfo] = Field(default_factory=list)
    fields: Dict[str, List[str]] = Field(default_factory=dict)
    rejected: List[RejectedPartInfo] = Field(default_factory=list)


class PolicyResponse(BaseModel):
    """Active limits and allow-lists"""
    limits: Dict[str, Optional[int]]
    allowed_extensions: List[str]
    allowed_mime_types: List[str]
    storage: str
    abort_on_first_rejection: bool
