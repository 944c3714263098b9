# tests/core/test_types.py
import pytest
from pydantic import TypeAdapter, ValidationError

from upload_gate.core.types import (
    Accepted,
    AdmissionDecision,
    FilterPolicy,
    LimitsConfig,
    Rejected,
    RejectionReason,
    UploadPartMetadata,
)

def test_filter_policy_normalises_entries():
    """Entries are lower-cased and extensions get a leading dot"""
    policy = FilterPolicy(
        allowed_extensions=["PNG", ".Jpg", " gif "],
        allowed_mime_types=["Image/PNG", "image/jpeg"],
    )

    assert policy.allowed_extensions == frozenset({".png", ".jpg", ".gif"})
    assert policy.allowed_mime_types == frozenset({"image/png", "image/jpeg"})

def test_filter_policy_is_immutable():
    """Policies cannot be changed after construction"""
    policy = FilterPolicy(allowed_extensions=[".png"], allowed_mime_types=["image/png"])

    with pytest.raises(ValidationError):
        policy.allowed_extensions = frozenset({".exe"})

def test_limits_reject_non_positive_bounds():
    """Bounds must be positive integers"""
    with pytest.raises(ValidationError):
        LimitsConfig(max_files=0)

def test_limits_default_to_unbounded():
    """Absent bounds are None"""
    limits = LimitsConfig()

    assert all(value is None for value in limits.model_dump().values())

def test_part_metadata_rejects_negative_size():
    """byte_size_so_far is never negative"""
    with pytest.raises(ValidationError):
        UploadPartMetadata(field_name="f", byte_size_so_far=-1)

def test_admission_decision_is_tagged():
    """Decisions parse by their kind tag"""
    adapter = TypeAdapter(AdmissionDecision)

    assert isinstance(adapter.validate_python({"kind": "accepted"}), Accepted)
    rejected = adapter.validate_python({"kind": "rejected", "reason": "FileTooLarge"})
    assert isinstance(rejected, Rejected)
    assert rejected.reason is RejectionReason.FILE_TOO_LARGE
