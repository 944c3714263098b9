# core/errors.py
from typing import Optional

from upload_gate.core.types import Rejected, RejectionReason

class UploadGateError(Exception):
    """Base class for upload gate errors"""
    pass

class ConfigurationError(UploadGateError):
    """Raised when limits, policy or storage cannot be built from settings"""
    pass

class UploadRejected(UploadGateError):
    """Raised when a request is aborted on its first rejected part"""

    def __init__(self, rejection: Rejected, field_name: Optional[str] = None,
                 original_name: Optional[str] = None):
        self.rejection = rejection
        self.field_name = field_name
        self.original_name = original_name
        super().__init__(f"{rejection.reason.value}: {field_name or '-'}")

    @property
    def reason(self) -> RejectionReason:
        return self.rejection.reason

_SIZE_REASONS = {
    RejectionReason.FILE_TOO_LARGE,
    RejectionReason.FIELD_TOO_LARGE,
}

def http_status_for(reason: RejectionReason) -> int:
    """
    Map a rejection reason to the HTTP status the host server should answer with

    Args:
        reason: The rejection reason

    Returns:
        413 for size reasons, 415 for unsupported types, 400 otherwise
    """
    if reason in _SIZE_REASONS:
        return 413
    if reason is RejectionReason.UNSUPPORTED_FILE_TYPE:
        return 415
    return 400

