# core/multipart.py
"""
Incremental multipart feeding

Decodes a multipart body as it arrives and hands every part to an
UploadSession in arrival order. File bytes go to the session chunk by
chunk; the caller stops reading the body once feed() returns False.
"""

from typing import Optional

from werkzeug.http import parse_options_header
from werkzeug.sansio.multipart import (
    Data,
    Epilogue,
    Field,
    File,
    MultipartDecoder,
    NeedData,
)

from upload_gate.core.session import UploadSession
from upload_gate.core.types import Rejected, UploadPartMetadata


def parse_boundary(content_type: str) -> Optional[bytes]:
    """Boundary of a multipart/form-data content type, or None"""
    mimetype, options = parse_options_header(content_type)
    boundary = options.get("boundary")
    if mimetype != "multipart/form-data" or not boundary:
        return None
    return boundary.encode("latin-1")


class MultipartFeeder:
    """
    Feeds decoder events for one request into its UploadSession

    Field values are buffered up to one byte past max_field_value_size, which
    is enough for the gate to reject them without holding the whole value.

    Args:
        session: The request's upload session
        boundary: Multipart boundary from the Content-Type header
    """

    def __init__(self, session: UploadSession, boundary: bytes):
        self.session = session
        self.decoder = MultipartDecoder(boundary)
        limit = session.limits.max_field_value_size
        self._field_cap = None if limit is None else limit + 1
        self._field_name: Optional[str] = None
        self._field_value = bytearray()
        self._in_file = False
        self._skip_file = False

    def feed(self, data: Optional[bytes]) -> bool:
        """
        Decode the next piece of the body; None marks the end of the body

        Returns:
            False when the body must not be read any further
        """
        self.decoder.receive_data(data)
        event = self.decoder.next_event()
        while not isinstance(event, (Epilogue, NeedData)):
            if isinstance(event, Field):
                self._field_name = event.name
                self._field_value = bytearray()
            elif isinstance(event, File):
                self._start_file(event)
            elif isinstance(event, Data):
                if not self._on_data(event):
                    return False
            event = self.decoder.next_event()
        return True

    def close(self) -> None:
        """Drop a file part the body ended in the middle of"""
        self.session.abandon_file()

    def _start_file(self, event: File) -> None:
        part = UploadPartMetadata(
            field_name=event.name,
            original_file_name=event.filename or None,
            declared_mime_type=event.headers.get("Content-Type") or None,
            encoding=event.headers.get("Content-Transfer-Encoding"),
        )
        decision = self.session.start_file(part)
        self._in_file = True
        self._skip_file = isinstance(decision, Rejected)

    def _on_data(self, event: Data) -> bool:
        if not self._in_file:
            if self._field_cap is None or len(self._field_value) < self._field_cap:
                self._field_value.extend(event.data)
                if self._field_cap is not None:
                    del self._field_value[self._field_cap:]
            if not event.more_data:
                value = self._field_value.decode("utf-8", errors="replace")
                self.session.admit_field(self._field_name, value)
                self._field_name = None
                self._field_value = bytearray()
            return True

        if not self._skip_file and event.data:
            if self.session.feed_file(event.data) is not None:
                return False
        if not event.more_data:
            if not self._skip_file:
                self.session.end_file()
            self._in_file = False
            self._skip_file = False
        return True
