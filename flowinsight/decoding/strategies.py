"""
Base decoding strategies.

Each strategy takes body text and returns a DecodingResult. A strategy
only reports success when it can show the transform did something:
- Base64: input has the base64 shape and decodes cleanly
- URL: percent-decoding changed the text
- HTML: entity substitution changed the text
- Unicode: at least one \\uXXXX escape was replaced
- Hex: separators stripped, rest is non-empty even-length hex
- Gzip: detector only, always a failure (no inflate at this tier)

None of them raise: malformed input becomes a failure result.
"""

from __future__ import annotations

import base64
import binascii
import html
import logging
import re
from urllib.parse import unquote

from flowinsight.decoding.body import bytes_to_text
from flowinsight.models import DecodingResult

logger = logging.getLogger(__name__)

BASE64 = "Base64"
URL = "URL"
HTML = "HTML"
UNICODE = "Unicode"
HEX = "Hex"
GZIP = "Gzip"

GZIP_MAGIC = "\x1f\x8b"

BASE64_SHAPE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
PERCENT_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")
BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
HTML_ENTITY = re.compile(r"&[a-zA-Z0-9#]+;")
UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")
SURROGATE_PAIR_ESCAPE = re.compile(r"\\u(d[89ab][0-9a-f]{2})\\u(d[c-f][0-9a-f]{2})", re.IGNORECASE)
HEX_SEPARATORS = re.compile(r"[\s\-:]")
HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
HEX_SHAPE = re.compile(r"^[0-9a-fA-F\s\-:]+$")

GZIP_DETECTED = "Gzip-compressed data detected, but it cannot be inflated here"
GZIP_NOT_FOUND = "No gzip signature found"


def decode_base64(content: str) -> DecodingResult:
    """Decode standard base64. Missing trailing padding is tolerated."""
    try:
        trimmed = content.strip()
        if not trimmed or not BASE64_SHAPE.match(trimmed):
            return DecodingResult.failure(content, BASE64, "Not valid base64")

        if len(trimmed.rstrip("=")) % 4 == 1:
            return DecodingResult.failure(content, BASE64, "Invalid base64 length")

        padded = trimmed + "=" * (-len(trimmed) % 4) if "=" not in trimmed else trimmed
        decoded = base64.b64decode(padded, validate=True)
        return DecodingResult.ok(bytes_to_text(decoded), BASE64)
    except (binascii.Error, ValueError) as e:
        logger.debug(f"Base64 decoding failed: {e}")
        return DecodingResult.failure(content, BASE64, str(e))


def decode_url(content: str) -> DecodingResult:
    """Strict percent-decoding: malformed escapes or bad UTF-8 fail."""
    try:
        if BAD_PERCENT_ESCAPE.search(content):
            return DecodingResult.failure(content, URL, "Malformed percent-escape sequence")

        decoded = unquote(content, errors="strict")
        if decoded == content:
            return DecodingResult.failure(content, URL, "Content is not URL-encoded")
        return DecodingResult.ok(decoded, URL)
    except UnicodeDecodeError as e:
        logger.debug(f"URL decoding failed: {e}")
        return DecodingResult.failure(content, URL, f"Invalid UTF-8 in percent-escapes: {e.reason}")


def decode_html_entities(content: str) -> DecodingResult:
    """Replace named and numeric HTML character references."""
    decoded = html.unescape(content)
    if decoded == content:
        return DecodingResult.failure(content, HTML, "Content has no HTML entities")
    return DecodingResult.ok(decoded, HTML)


def _join_surrogate_pair(match: re.Match) -> str:
    high = int(match.group(1), 16)
    low = int(match.group(2), 16)
    return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


def _unescape_code_point(match: re.Match) -> str:
    code_point = int(match.group(1), 16)
    # Unpaired surrogates cannot be encoded
    if 0xD800 <= code_point <= 0xDFFF:
        return "\ufffd"
    return chr(code_point)


def decode_unicode_escapes(content: str) -> DecodingResult:
    """Replace \\uXXXX escapes, joining surrogate pairs into real characters.

    A surrogate escape without its partner becomes U+FFFD.
    """
    decoded, pairs = SURROGATE_PAIR_ESCAPE.subn(_join_surrogate_pair, content)
    decoded, singles = UNICODE_ESCAPE.subn(_unescape_code_point, decoded)
    if pairs + singles == 0:
        return DecodingResult.failure(content, UNICODE, "Content has no unicode escape sequences")
    return DecodingResult.ok(decoded, UNICODE)


def decode_hex(content: str) -> DecodingResult:
    """Decode hex text, ignoring whitespace, '-' and ':' separators."""
    clean = HEX_SEPARATORS.sub("", content)
    if not clean or not HEX_DIGITS.match(clean) or len(clean) % 2 != 0:
        return DecodingResult.failure(content, HEX, "Not valid hexadecimal")

    return DecodingResult.ok(bytes_to_text(bytes.fromhex(clean)), HEX)


def has_gzip_magic(content: str) -> bool:
    return content.startswith(GZIP_MAGIC)


def detect_gzip(content: str) -> DecodingResult:
    """
    Report whether content starts with the gzip magic bytes (1F 8B).

    Always a failure: inflating is not available at this tier. The reason
    and the ``compression`` field tell "detected" apart from "not gzip".
    """
    if has_gzip_magic(content):
        return DecodingResult.failure(content, GZIP, GZIP_DETECTED, compression="gzip")
    return DecodingResult.failure(content, GZIP, GZIP_NOT_FOUND)
