"""
Pydantic models mirroring API contracts
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class UploadedFile(BaseModel):
    """A file the API accepted and stored"""

    field_name: str
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: int
    storage: str
    filename: Optional[str] = None
    path: Optional[str] = None


class RejectedPart(BaseModel):
    """A part the API rejected"""

    field_name: Optional[str] = None
    original_name: Optional[str] = None
    reason: str


class UploadResult(BaseModel):
    """Response model for the upload endpoint"""

    files: List[UploadedFile] = Field(default_factory=list)
    fields: Dict[str, List[str]] = Field(default_factory=dict)
    rejected: List[RejectedPart] = Field(default_factory=list)


class AbortedUpload(BaseModel):
    """Response body when the API aborts the whole request"""

    error: str
    field_name: Optional[str] = None
    original_name: Optional[str] = None


class PolicyInfo(BaseModel):
    """Response model for the policy endpoint"""

    limits: Dict[str, Optional[int]]
    allowed_extensions: List[str]
    allowed_mime_types: List[str]
    storage: str
    abort_on_first_rejection: bool
