# tests/core/test_session.py
import pytest

from upload_gate.core.errors import UploadRejected
from upload_gate.core.session import UploadSession
from upload_gate.core.types import (
    Accepted,
    FilterPolicy,
    LimitsConfig,
    Rejected,
    RejectionReason,
    UploadPartMetadata,
)
from upload_gate.storage import DiskStorage, MemoryStorage

POLICY = FilterPolicy(allowed_extensions=[".png"], allowed_mime_types=["image/png"])

def png(name="image.png"):
    return UploadPartMetadata(field_name="file", original_file_name=name, declared_mime_type="image/png")

async def chunks_of(*chunks):
    for chunk in chunks:
        yield chunk

class CountingChunks:
    """Async chunk source recording how many chunks were pulled"""

    def __init__(self, *chunks):
        self.chunks = list(chunks)
        self.consumed = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.consumed >= len(self.chunks):
            raise StopAsyncIteration
        chunk = self.chunks[self.consumed]
        self.consumed += 1
        return chunk

@pytest.mark.asyncio
async def test_admit_file_streams_into_memory():
    """Accepted files are written chunk by chunk"""
    session = UploadSession(POLICY, LimitsConfig(), MemoryStorage())

    decision = await session.admit_file(png(), chunks_of(b"abc", b"def"))

    assert isinstance(decision, Accepted)
    result = session.result()
    assert len(result.files) == 1
    assert result.files[0].buffer == b"abcdef"
    assert result.files[0].size == 6
    assert result.files[0].storage == "memory"

@pytest.mark.asyncio
async def test_stream_stops_when_size_exceeded(tmp_path):
    """Reading stops at the first chunk past max_file_size and the partial file is removed"""
    storage = DiskStorage(str(tmp_path))
    session = UploadSession(POLICY, LimitsConfig(max_file_size=5), storage)
    source = CountingChunks(b"abc", b"def", b"ghi", b"jkl")

    decision = await session.admit_file(png(), source)

    assert isinstance(decision, Rejected)
    assert decision.reason is RejectionReason.FILE_TOO_LARGE
    assert source.consumed == 2
    assert list(tmp_path.iterdir()) == []
    assert session.result().rejected[0].reason is RejectionReason.FILE_TOO_LARGE

@pytest.mark.asyncio
async def test_stream_exactly_at_limit_is_kept(tmp_path):
    """A stream ending exactly at max_file_size is stored"""
    session = UploadSession(POLICY, LimitsConfig(max_file_size=6), DiskStorage(str(tmp_path)))

    decision = await session.admit_file(png(), chunks_of(b"abc", b"def"))

    assert isinstance(decision, Accepted)
    stored = session.result().files[0]
    assert (tmp_path / stored.filename).read_bytes() == b"abcdef"

@pytest.mark.asyncio
async def test_rejections_do_not_stop_other_parts():
    """Without the abort policy later parts are still admitted"""
    session = UploadSession(POLICY, LimitsConfig(), MemoryStorage())

    await session.admit_file(png("virus.exe"), chunks_of(b"MZ"))
    await session.admit_file(png(), chunks_of(b"png"))

    result = session.result()
    assert len(result.files) == 1
    assert len(result.rejected) == 1
    assert result.rejected[0].original_name == "virus.exe"
    assert result.rejected[0].reason is RejectionReason.UNSUPPORTED_FILE_TYPE
    assert not result.all_rejected

@pytest.mark.asyncio
async def test_abort_on_first_rejection_discards_stored_files(tmp_path):
    """The first rejection raises and removes files already written"""
    session = UploadSession(POLICY, LimitsConfig(), DiskStorage(str(tmp_path)), abort_on_first_rejection=True)

    await session.admit_file(png(), chunks_of(b"first"))
    assert len(list(tmp_path.iterdir())) == 1

    with pytest.raises(UploadRejected) as excinfo:
        await session.admit_file(png("notes.txt"), chunks_of(b"text"))

    assert excinfo.value.reason is RejectionReason.UNSUPPORTED_FILE_TYPE
    assert excinfo.value.original_name == "notes.txt"
    assert list(tmp_path.iterdir()) == []
    assert session.result().files == []

def test_admit_field_records_values():
    """Accepted fields are kept in arrival order"""
    session = UploadSession(POLICY, LimitsConfig(max_fields=2), MemoryStorage())

    session.admit_field("tag", "a")
    session.admit_field("tag", "b")
    decision = session.admit_field("tag", "c")

    assert decision.reason is RejectionReason.TOO_MANY_FIELDS
    assert session.result().fields == {"tag": ["a", "b"]}

def test_only_rejections_marks_all_rejected():
    """all_rejected is set when nothing at all was admitted"""
    session = UploadSession(POLICY, LimitsConfig(max_field_name_size=2), MemoryStorage())

    session.admit_field("long-name", "x")

    assert session.result().all_rejected

def test_check_headers():
    """Header pair bound applies to the whole request"""
    session = UploadSession(POLICY, LimitsConfig(max_header_pairs=2), MemoryStorage())

    assert session.check_headers(2) is None
    assert session.check_headers(3).reason is RejectionReason.TOO_MANY_HEADER_PAIRS

def test_sessions_do_not_share_counters():
    """Each request owns its counters"""
    first = UploadSession(POLICY, LimitsConfig(max_fields=1), MemoryStorage())
    second = UploadSession(POLICY, LimitsConfig(max_fields=1), MemoryStorage())

    first.admit_field("a", "1")

    assert isinstance(second.admit_field("a", "1"), Accepted)
    assert first.counters is not second.counters

async def failing_after(*chunks):
    for chunk in chunks:
        yield chunk
    raise ConnectionResetError("client went away")

@pytest.mark.asyncio
async def test_failing_chunk_source_removes_partial_file(tmp_path):
    """A chunk source error propagates and leaves nothing on disk"""
    session = UploadSession(POLICY, LimitsConfig(), DiskStorage(str(tmp_path)))

    with pytest.raises(ConnectionResetError):
        await session.admit_file(png(), failing_after(b"abc"))

    assert list(tmp_path.iterdir()) == []
    assert not session.file_open
    assert session.result().files == []

@pytest.mark.asyncio
async def test_failing_chunk_source_in_abort_mode_discards_stored(tmp_path):
    """With the abort policy an error also removes earlier files"""
    session = UploadSession(POLICY, LimitsConfig(), DiskStorage(str(tmp_path)), abort_on_first_rejection=True)
    await session.admit_file(png(), chunks_of(b"first"))

    with pytest.raises(ConnectionResetError):
        await session.admit_file(png("second.png"), failing_after(b"abc"))

    assert list(tmp_path.iterdir()) == []

def test_push_file_chunks(tmp_path):
    """start_file, feed_file and end_file store a file without an iterator"""
    session = UploadSession(POLICY, LimitsConfig(max_file_size=6), DiskStorage(str(tmp_path)))

    assert isinstance(session.start_file(png()), Accepted)
    assert session.file_open
    assert session.feed_file(b"abc") is None
    assert session.feed_file(b"def") is None
    stored = session.end_file()

    assert not session.file_open
    assert (tmp_path / stored.filename).read_bytes() == b"abcdef"

def test_push_file_past_limit_is_abandoned(tmp_path):
    """The chunk crossing max_file_size is never written"""
    session = UploadSession(POLICY, LimitsConfig(max_file_size=4), DiskStorage(str(tmp_path)))

    session.start_file(png())
    assert session.feed_file(b"abc") is None
    rejection = session.feed_file(b"def")

    assert rejection.reason is RejectionReason.FILE_TOO_LARGE
    assert not session.file_open
    assert list(tmp_path.iterdir()) == []

def test_fail_discards_open_and_stored_files(tmp_path):
    """A failed request leaves no files behind"""
    session = UploadSession(POLICY, LimitsConfig(), DiskStorage(str(tmp_path)))
    session.start_file(png())
    session.feed_file(b"done")
    session.end_file()
    session.start_file(png("open.png"))
    session.feed_file(b"half")

    session.fail()

    assert list(tmp_path.iterdir()) == []
    assert session.result().files == []
