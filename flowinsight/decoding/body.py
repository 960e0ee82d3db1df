"""
Body normalization and display helpers.

Capture backends hand us bodies as str, bytes, or an already-parsed JSON
object. BodyContent pins that down to one of three cases (text, bytes,
absent) and produces the single canonical text every decoder works on.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from typing import Literal

logger = logging.getLogger(__name__)

BYTES_PER_LINE = 16
PRINTABLE_RATIO = 0.8
SNIFF_LENGTH = 1024

TEXT_CONTENT_TYPES = (
    "text/",
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-javascript",
    "application/xhtml+xml",
    "application/rss+xml",
    "application/atom+xml",
)


def bytes_to_text(data: bytes) -> str:
    """
    Decode bytes as UTF-8 when valid, otherwise byte-for-byte as Latin-1.

    The Latin-1 path keeps every byte as one code point, so binary
    signatures (e.g. gzip's 1F 8B) stay visible to the decoders.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


@dataclass(frozen=True)
class BodyContent:
    """A request/response body, normalized to text | bytes | absent."""

    kind: Literal["text", "bytes", "absent"]
    text: str
    data: bytes

    @classmethod
    def from_raw(cls, value: Any) -> BodyContent:
        if value is None:
            return cls(kind="absent", text="", data=b"")
        if isinstance(value, str):
            return cls(kind="text", text=value, data=value.encode("utf-8", errors="surrogatepass"))
        if isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
            return cls(kind="bytes", text=bytes_to_text(data), data=data)
        # Already-decoded payload (e.g. parsed JSON) from an upstream stage
        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.debug(f"Body of type {type(value).__name__} is not JSON-serializable, using str()")
            text = str(value)
        return cls(kind="text", text=text, data=text.encode("utf-8", errors="surrogatepass"))

    @property
    def is_empty(self) -> bool:
        return not self.data


def is_text_content(data: bytes, content_type: str | None = None) -> bool:
    """Text by declared type, otherwise valid UTF-8 that is mostly printable."""
    content_type = (content_type or "").lower()
    if any(t in content_type for t in TEXT_CONTENT_TYPES):
        return True

    if not data:
        return True

    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False

    sample = data[:SNIFF_LENGTH]
    printable = sum(1 for b in sample if 32 <= b <= 126 or b in (9, 10, 13))
    return printable / len(sample) > PRINTABLE_RATIO


def generate_hex_view(data: bytes, max_lines: int = 1000) -> str:
    """
    Classic hexdump: offset, 16 hex bytes (gap after 8), ASCII gutter.

    Output is capped at max_lines with a trailing truncation note.
    """
    if not data:
        return ""

    lines = []
    total_lines = (len(data) + BYTES_PER_LINE - 1) // BYTES_PER_LINE
    for line_no in range(min(total_lines, max_lines)):
        offset = line_no * BYTES_PER_LINE
        chunk = data[offset:offset + BYTES_PER_LINE]

        hex_part = ""
        for i in range(BYTES_PER_LINE):
            hex_part += f"{chunk[i]:02x} " if i < len(chunk) else "   "
            if i == 7:
                hex_part += " "

        ascii_part = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        lines.append(f"{offset:08x}  {hex_part} |{ascii_part}|\n")

    if total_lines > max_lines:
        lines.append(f"\n... (showing first {max_lines} lines of {len(data)} bytes)\n")

    return "".join(lines)


def content_summary(data: bytes, is_text: bool, preview_length: int = 100) -> str:
    """One-line description of a body for list views."""
    if not data:
        return "Empty body"
    if not is_text:
        return f"Binary content ({len(data)} bytes)"

    preview = data[:preview_length].decode("utf-8", errors="ignore")
    suffix = "..." if len(data) > preview_length else ""
    return f"Text content ({len(data)} bytes): {preview}{suffix}"
