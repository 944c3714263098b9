# core/session.py
"""
Per-request upload session

Owns the SessionCounters of one in-flight request and drives every part
through the admission gate in arrival order. File bytes are streamed into
the storage destination with the size check run at every chunk boundary.
"""

from typing import AsyncIterable, Dict, List, Optional

from pydantic import BaseModel

from upload_gate.core.errors import UploadRejected
from upload_gate.core.gate import check_chunk, check_header_pairs, evaluate, evaluate_field
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
from upload_gate.storage import Destination, Storage, StoredFile

logger = get_logger(__name__)


class RejectedPart(BaseModel):
    """A part refused by the gate"""

    field_name: Optional[str] = None
    original_name: Optional[str] = None
    reason: RejectionReason


class SessionResult(BaseModel):
    """Everything admitted and refused for one request"""

    files: List[StoredFile] = []
    fields: Dict[str, List[str]] = {}
    rejected: List[RejectedPart] = []

    @property
    def all_rejected(self) -> bool:
        return bool(self.rejected) and not self.files and not self.fields


class UploadSession:
    """
    Admission state for a single upload request

    File parts are either pushed chunk by chunk (start_file, feed_file,
    end_file) or pulled from an async iterator with admit_file. Only one
    file is open at a time.

    Args:
        policy: Shared file-type allow-lists
        limits: Shared request bounds
        storage: Strategy resolving destinations of accepted files
        abort_on_first_rejection: Raise UploadRejected on the first refusal
            and discard every file already stored for this request
    """

    def __init__(
        self,
        policy: FilterPolicy,
        limits: LimitsConfig,
        storage: Storage,
        abort_on_first_rejection: bool = False,
    ):
        self.policy = policy
        self.limits = limits
        self.storage = storage
        self.abort_on_first_rejection = abort_on_first_rejection
        self.counters = SessionCounters()
        self._stored: List[Destination] = []
        self._result = SessionResult()
        self._current: Optional[Destination] = None
        self._current_size = 0

    def _record_rejection(self, rejection: Rejected, field_name: Optional[str] = None,
                          original_name: Optional[str] = None) -> Rejected:
        self._result.rejected.append(RejectedPart(
            field_name=field_name,
            original_name=original_name,
            reason=rejection.reason,
        ))
        if self.abort_on_first_rejection:
            self.discard_stored()
            raise UploadRejected(rejection, field_name=field_name, original_name=original_name)
        return rejection

    def check_headers(self, pair_count: int) -> Optional[Rejected]:
        """Apply the header pair bound to the request"""
        rejection = check_header_pairs(pair_count, self.limits)
        if rejection is not None:
            return self._record_rejection(rejection)
        return None

    def admit_field(self, name: str, value: str) -> AdmissionDecision:
        """Run a non-file field through the gate and keep it when accepted"""
        decision = evaluate_field(name, value, self.limits, self.counters)
        if isinstance(decision, Rejected):
            return self._record_rejection(decision, field_name=name)

        self._result.fields.setdefault(name, []).append(value)
        return decision

    @property
    def file_open(self) -> bool:
        return self._current is not None

    def start_file(self, part: UploadPartMetadata) -> AdmissionDecision:
        """Run a file part's metadata through the gate before any byte is read"""
        if self._current is not None:
            raise RuntimeError("previous file part was not ended")

        decision = evaluate(part, self.policy, self.limits, self.counters, self.storage)
        if isinstance(decision, Rejected):
            return self._record_rejection(
                decision, field_name=part.field_name, original_name=part.original_file_name
            )

        self._current = decision.destination
        self._current_size = part.byte_size_so_far
        return decision

    def feed_file(self, chunk: bytes) -> Optional[Rejected]:
        """
        Write the next chunk of the open file

        Returns:
            Rejected(FileTooLarge) once the running size passes max_file_size;
            the partial write is discarded and no further chunk must be fed
        """
        destination = self._current
        self._current_size += len(chunk)
        rejection = check_chunk(self._current_size, self.limits)
        if rejection is not None:
            part = destination.part
            self.abandon_file()
            logger.info("file_stream_aborted",
                        field_name=part.field_name,
                        file_name=part.original_file_name,
                        size=self._current_size,
                        limit=self.limits.max_file_size)
            return self._record_rejection(
                rejection, field_name=part.field_name, original_name=part.original_file_name
            )

        try:
            destination.write(chunk)
        except BaseException:
            self.abandon_file()
            raise
        return None

    def end_file(self) -> StoredFile:
        """Finalize the open file and record it as stored"""
        destination = self._current
        try:
            stored = destination.finalize()
        except BaseException:
            self.abandon_file()
            raise

        self._current = None
        self._stored.append(destination)
        self._result.files.append(stored)
        logger.info("file_stored",
                    field_name=stored.field_name,
                    file_name=stored.original_name,
                    size=stored.size,
                    storage=stored.storage)
        return stored

    def abandon_file(self) -> None:
        """Discard whatever was written for the open file"""
        if self._current is not None:
            destination, self._current = self._current, None
            destination.discard()

    async def admit_file(
        self,
        part: UploadPartMetadata,
        chunks: AsyncIterable[bytes],
    ) -> AdmissionDecision:
        """
        Run a file part through the gate and stream its bytes when accepted

        Reading stops as soon as the running size passes max_file_size; the
        partial write is discarded and the part is recorded as FileTooLarge.
        If the chunk source fails the partial write is discarded as well.

        Args:
            part: Metadata reported before the first byte
            chunks: The part's bytes

        Returns:
            The final decision for the part
        """
        decision = self.start_file(part)
        if isinstance(decision, Rejected):
            return decision

        try:
            async for chunk in chunks:
                rejection = self.feed_file(chunk)
                if rejection is not None:
                    return rejection
            self.end_file()
        except BaseException:
            self.abandon_file()
            if self.abort_on_first_rejection:
                self.discard_stored()
            raise
        return decision

    def fail(self) -> None:
        """The request failed: drop the open file and everything stored"""
        self.abandon_file()
        self.discard_stored()

    def discard_stored(self) -> None:
        """Remove every file already stored for this request"""
        for destination in self._stored:
            destination.discard()
        if self._stored:
            logger.info("stored_files_discarded", count=len(self._stored))
        self._stored = []
        self._result.files = []

    def result(self) -> SessionResult:
        return self._result
