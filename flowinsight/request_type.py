"""
Resource-type classification for UI grouping and coloring.

Priority cascade, first applicable stage decides:
1. Declared content type
2. Request headers (X-Requested-With, Accept)
3. URL path extension
4. URL shape (/api/, /ajax/, .xml)
5. "other"
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit

from flowinsight.models import RequestType
from flowinsight.models import RequestTypeInfo
from flowinsight.rules import API_PATH_MARKERS
from flowinsight.rules import CONTENT_TYPE_RULES
from flowinsight.rules import EXTENSION_TYPES
from flowinsight.rules import REQUEST_TYPES


def classify_request_type(
    url: str,
    content_type: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> RequestType:
    """
    Classify a flow's resource type.

    Args:
        url: Request URL (absolute or just a path)
        content_type: Declared Content-Type, if any
        headers: Request headers (looked up case-insensitively)

    Returns:
        One of the REQUEST_TYPES keys; "other" when nothing applies
    """
    if content_type:
        by_content_type = _type_from_content_type(content_type.lower())
        if by_content_type:
            return by_content_type

    if headers:
        by_headers = _type_from_headers(headers)
        if by_headers:
            return by_headers

    path = _url_path(url)

    extension = _path_extension(path)
    if extension in EXTENSION_TYPES:
        return EXTENSION_TYPES[extension]

    if any(marker in path for marker in API_PATH_MARKERS) or path.endswith(".xml"):
        return "fetch"

    return "other"


def _type_from_content_type(content_type: str) -> RequestType | None:
    for mode, needles, request_type in CONTENT_TYPE_RULES:
        if mode == "prefix":
            if content_type.startswith(needles):
                return request_type
        elif any(needle in content_type for needle in needles):
            return request_type
    return None


def _type_from_headers(headers: Mapping[str, str]) -> RequestType | None:
    lowered = {str(k).lower(): str(v).lower() for k, v in headers.items()}

    if lowered.get("x-requested-with", "").strip() == "xmlhttprequest":
        return "fetch"

    accept = lowered.get("accept", "")
    if "text/html" not in accept:
        if "application/json" in accept:
            return "script-or-data"
        if "application/xml" in accept:
            return "fetch"
    return None


def _url_path(url: str) -> str:
    """Lowercased path of an absolute or relative URL, without query/fragment."""
    if not url:
        return ""
    try:
        return urlsplit(url.strip()).path.lower()
    except ValueError:
        # Malformed netloc (e.g. unbalanced IPv6 brackets): fall back to raw text
        return url.split("?", 1)[0].split("#", 1)[0].lower()


def _path_extension(path: str) -> str:
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return last_segment.rsplit(".", 1)[-1]


def get_request_type_info(request_type: RequestType | str) -> RequestTypeInfo:
    """Display metadata for a type tag; unknown tags map to "other"."""
    return REQUEST_TYPES.get(request_type, REQUEST_TYPES["other"])


def all_request_types() -> list[RequestTypeInfo]:
    return list(REQUEST_TYPES.values())
