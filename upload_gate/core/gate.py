# core/gate.py
"""
Upload admission gate

Pure decision functions: given a part's metadata, the shared policy and
limits, and the request's own counters, decide whether the part is admitted.
Only the caller-owned SessionCounters are ever mutated.
"""

from typing import Optional, Protocol

from upload_gate.core.logging import get_logger
from upload_gate.core.types import (
    Accepted,
    AdmissionDecision,
    FilterPolicy,
    LimitsConfig,
    Rejected,
    RejectionReason,
    SessionCounters,
    UploadPartMetadata,
)

logger = get_logger(__name__)


class StorageStrategy(Protocol):
    """Resolves where an accepted file part is written"""

    def destination_for(self, part: UploadPartMetadata): ...


def _within(count: int, bound: Optional[int]) -> bool:
    return bound is None or count < bound


def _at_most(size: int, bound: Optional[int]) -> bool:
    return bound is None or size <= bound


def extract_extension(file_name: Optional[str]) -> str:
    """
    Extension of a client supplied file name

    Args:
        file_name: Declared file name, may be None

    Returns:
        Substring from the last "." lower-cased, or "" when there is none
    """
    if not file_name:
        return ""
    index = file_name.rfind(".")
    if index == -1:
        return ""
    return file_name[index:].lower()


def is_allowed_type(part: UploadPartMetadata, policy: FilterPolicy) -> bool:
    """Both the extension and the declared MIME type must be allow-listed"""
    if not part.original_file_name or not part.declared_mime_type:
        return False
    # MIME lookup is an exact match, no case folding
    if part.declared_mime_type not in policy.allowed_mime_types:
        return False
    return extract_extension(part.original_file_name) in policy.allowed_extensions


def check_chunk(byte_size_so_far: int, limits: LimitsConfig) -> Optional[Rejected]:
    """Size check run at every chunk boundary while a file streams in"""
    if not _at_most(byte_size_so_far, limits.max_file_size):
        return Rejected(reason=RejectionReason.FILE_TOO_LARGE)
    return None


def check_header_pairs(pair_count: int, limits: LimitsConfig) -> Optional[Rejected]:
    """Reject a request carrying more header pairs than allowed"""
    if not _at_most(pair_count, limits.max_header_pairs):
        logger.info("header_pairs_rejected", pair_count=pair_count,
                    limit=limits.max_header_pairs)
        return Rejected(reason=RejectionReason.TOO_MANY_HEADER_PAIRS)
    return None


def _reject(reason: RejectionReason, **context) -> Rejected:
    logger.info("part_rejected", reason=reason.value, **context)
    return Rejected(reason=reason)


def evaluate(
    part: UploadPartMetadata,
    policy: FilterPolicy,
    limits: LimitsConfig,
    counters: SessionCounters,
    storage: Optional[StorageStrategy] = None,
) -> AdmissionDecision:
    """
    Decide whether a file part is admitted

    Count bounds are checked first so a part past them is rejected whatever
    its own validity, then the size bound, then the type filter.

    Args:
        part: Metadata reported by the parser
        policy: Extension and MIME type allow-lists
        limits: Request bounds
        counters: This request's counters, incremented on acceptance only
        storage: Strategy resolving the destination of an accepted part

    Returns:
        Accepted(destination) or Rejected(reason)
    """
    context = {"field_name": part.field_name, "file_name": part.original_file_name}

    if not _within(counters.parts_seen, limits.max_parts):
        return _reject(RejectionReason.TOO_MANY_PARTS, **context)
    if not _within(counters.files_seen, limits.max_files):
        return _reject(RejectionReason.TOO_MANY_FILES, **context)
    if check_chunk(part.byte_size_so_far, limits) is not None:
        return _reject(RejectionReason.FILE_TOO_LARGE, size=part.byte_size_so_far, **context)
    if not is_allowed_type(part, policy):
        return _reject(RejectionReason.UNSUPPORTED_FILE_TYPE,
                       mime_type=part.declared_mime_type, **context)

    counters.parts_seen += 1
    counters.files_seen += 1

    destination = storage.destination_for(part) if storage is not None else None
    logger.debug("part_accepted", **context)
    return Accepted(destination=destination)


def evaluate_field(
    name: str,
    value: str,
    limits: LimitsConfig,
    counters: SessionCounters,
) -> AdmissionDecision:
    """Decide whether a non-file form field is admitted"""
    if not _within(counters.parts_seen, limits.max_parts):
        return _reject(RejectionReason.TOO_MANY_PARTS, field_name=name)
    if not _within(counters.fields_seen, limits.max_fields):
        return _reject(RejectionReason.TOO_MANY_FIELDS, field_name=name)
    if not _at_most(len(name), limits.max_field_name_size):
        return _reject(RejectionReason.FIELD_NAME_TOO_LONG, field_name=name[:32])
    if not _at_most(len(value.encode("utf-8")), limits.max_field_value_size):
        return _reject(RejectionReason.FIELD_TOO_LARGE, field_name=name)

    counters.parts_seen += 1
    counters.fields_seen += 1
    return Accepted()
