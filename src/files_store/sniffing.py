"""MIME type detection from file content."""

from typing import Optional

import filetype

TEXT_MIME_TYPE = "text/plain"

# Bytes that legitimately appear in text files.
_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\b\x1b")


def _looks_like_text(data: bytes) -> bool:
    try:
        decoded = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return not any(
        ord(ch) < 0x20 and ord(ch) not in _TEXT_CONTROL_BYTES or ord(ch) == 0x7F
        for ch in decoded
    )


def detect(data: bytes) -> Optional[str]:
    """
    Classify ``data`` by its content, never by file name.

    Binary formats are matched on their magic numbers. Content without a
    known signature that decodes as printable UTF-8 is reported as
    ``text/plain``. Empty input and unrecognised binary content yield None.
    """
    if not data:
        return None
    kind = filetype.guess(data)
    if kind is not None:
        return kind.mime
    if _looks_like_text(data):
        return TEXT_MIME_TYPE
    return None
