"""
Two-stage decoding strategies.

Both combinators end in a gzip stage, which can only detect compression
here. Their failure reasons tell apart "first stage failed" from "first
stage worked, second stage needs an inflate that isn't available".
"""

from __future__ import annotations

from flowinsight.decoding.strategies import decode_base64
from flowinsight.decoding.strategies import detect_gzip
from flowinsight.models import DecodingResult

BASE64_THEN_GZIP = "Base64→Gzip"
GZIP_THEN_BASE64 = "Gzip→Base64"


def decode_base64_then_gzip(content: str) -> DecodingResult:
    """Base64-decode, then look for a gzip stream in the decoded bytes."""
    base64_result = decode_base64(content)
    if not base64_result.success:
        return DecodingResult.failure(
            content, BASE64_THEN_GZIP, f"Base64 decoding failed: {base64_result.error}"
        )

    gzip_result = detect_gzip(base64_result.content)
    if gzip_result.compression == "gzip":
        return DecodingResult.failure(
            base64_result.content,
            BASE64_THEN_GZIP,
            "Base64 decoded, but inflating the gzip payload is not available here",
            compression="gzip",
        )

    return DecodingResult.failure(content, BASE64_THEN_GZIP, "No gzip data after Base64 decoding")


def decode_gzip_then_base64(content: str) -> DecodingResult:
    """Inflate gzip, then base64-decode. Stops at detection in this tier."""
    gzip_result = detect_gzip(content)
    if gzip_result.compression != "gzip":
        return DecodingResult.failure(content, GZIP_THEN_BASE64, "No gzip data detected")

    return DecodingResult.failure(
        content,
        GZIP_THEN_BASE64,
        "Gzip data detected, but it cannot be inflated here",
        compression="gzip",
    )
