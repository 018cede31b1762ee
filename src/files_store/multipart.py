"""
Streaming decoder for upload requests.

Feeds the raw request body through ``python_multipart`` and accumulates the
content of the ``name``, ``owner`` and ``bytes`` fields into a ``FileInput``.
Parts with any other field name are read and dropped.
"""

import logging
from typing import AsyncIterator, Dict, List, Optional

import python_multipart
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import parse_options_header

from files_store.errors import DecodeError
from files_store.schemas import FileInput

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "owner")
BYTES_FIELD = "bytes"


class UploadDecoder:
    """Collects the recognised fields of one multipart body."""

    def __init__(self, boundary: bytes):
        self.fields: Dict[str, bytes] = {}
        self._field_name: Optional[str] = None
        self._buffer: List[bytes] = []
        self._header_field = b""
        self._header_value = b""
        self._headers: Dict[bytes, bytes] = {}
        self._parser = python_multipart.MultipartParser(
            boundary,
            {
                "on_part_begin": self.on_part_begin,
                "on_part_data": self.on_part_data,
                "on_part_end": self.on_part_end,
                "on_header_field": self.on_header_field,
                "on_header_value": self.on_header_value,
                "on_header_end": self.on_header_end,
                "on_headers_finished": self.on_headers_finished,
            },
        )

    def on_part_begin(self) -> None:
        self._field_name = None
        self._buffer = []
        self._headers = {}

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._field_name is not None:
            self._buffer.append(data[start:end])

    def on_part_end(self) -> None:
        if self._field_name is not None:
            self.fields[self._field_name] = b"".join(self._buffer)
        self._buffer = []

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        raw_name = options.get(b"name")
        if raw_name is None:
            return
        name = raw_name.decode("latin-1")
        if name in TEXT_FIELDS or name == BYTES_FIELD:
            self._field_name = name
        else:
            logger.debug("Ignoring multipart field '%s'", name)

    def write(self, chunk: bytes) -> None:
        try:
            self._parser.write(chunk)
        except MultipartParseError as e:
            raise DecodeError(f"malformed multipart body: {e}") from e

    def finalize(self) -> FileInput:
        try:
            self._parser.finalize()
        except MultipartParseError as e:
            raise DecodeError(f"malformed multipart body: {e}") from e
        return build_file_input(self.fields)


def build_file_input(fields: Dict[str, bytes]) -> FileInput:
    """Assemble a ``FileInput`` from raw field bytes, decoding text fields as UTF-8."""
    text = {}
    for field in TEXT_FIELDS:
        raw = fields.get(field, b"")
        try:
            text[field] = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"field '{field}' is not valid UTF-8: {e}") from e
    return FileInput(name=text["name"], owner=text["owner"], bytes=fields.get(BYTES_FIELD, b""))


def get_boundary(content_type: Optional[str]) -> bytes:
    """Extract the multipart boundary from a Content-Type header value."""
    if not content_type:
        raise DecodeError("missing Content-Type header")
    ctype, options = parse_options_header(content_type)
    if ctype != b"multipart/form-data":
        raise DecodeError(f"expected multipart/form-data, got {ctype.decode('latin-1')}")
    boundary = options.get(b"boundary")
    if not boundary:
        raise DecodeError("multipart boundary is missing")
    return boundary


async def decode_upload(content_type: Optional[str], stream: AsyncIterator[bytes]) -> FileInput:
    """Decode a streamed multipart upload into a ``FileInput``."""
    decoder = UploadDecoder(get_boundary(content_type))
    async for chunk in stream:
        if chunk:
            decoder.write(chunk)
    return decoder.finalize()
