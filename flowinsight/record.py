"""
Flow record passed between the capture layer and the enrichers.

FlowRecord holds:
- Request identity (id, url, method, domain)
- Request/response headers (lowercase keys)
- Request/response bodies as captured (str, bytes, parsed JSON or None)
- Derived app fields, filled in by FlowEnricher.enrich
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from urllib.parse import urlsplit


def _lowercase_keys(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(key).lower(): str(value) for key, value in headers.items()}


@dataclass
class FlowRecord:
    """
    One captured HTTP exchange.

    Header keys are lowercased on construction, so ``get_header`` lookups
    are case-insensitive. The ``app_*`` fields stay None until enrichment.
    """

    id: str
    url: str
    method: str = "GET"
    domain: str = ""

    # Headers (lowercase keys)
    request_headers: dict[str, str] = field(default_factory=dict)
    response_headers: dict[str, str] = field(default_factory=dict)

    content_type: str | None = None

    # Bodies as captured
    request_body: Any = None
    response_body: Any = None

    status_code: int | None = None

    # Derived by enrichment
    app_name: str | None = None
    app_icon: str | None = None
    app_category: str | None = None
    app_color: str | None = None

    def __post_init__(self) -> None:
        self.request_headers = _lowercase_keys(self.request_headers)
        self.response_headers = _lowercase_keys(self.response_headers)

    @classmethod
    def from_http_flow(cls, flow: Any, include_bodies: bool = True) -> FlowRecord:
        """
        Create a FlowRecord from a mitmproxy flow.

        Args:
            flow: mitmproxy HTTP flow object
            include_bodies: Read and decompress message bodies. Leave bodies
                as None when only headers are needed.

        Returns:
            FlowRecord with request/response data (response fields empty
            when the flow has no response yet)
        """
        request_headers = {}
        response_headers = {}

        for key, value in flow.request.headers.items():
            request_headers[key.lower()] = value

        if flow.response:
            for key, value in flow.response.headers.items():
                response_headers[key.lower()] = value

        content_type = response_headers.get("content-type") or request_headers.get("content-type")

        request_body = None
        response_body = None
        if include_bodies:
            request_body = flow.request.get_content(strict=False)
            if flow.response:
                response_body = flow.response.get_content(strict=False)

        return cls(
            id=flow.id,
            url=flow.request.pretty_url,
            method=flow.request.method,
            domain=flow.request.pretty_host,
            request_headers=request_headers,
            response_headers=response_headers,
            content_type=content_type,
            request_body=request_body,
            response_body=response_body,
            status_code=flow.response.status_code if flow.response else None,
        )

    @property
    def host(self) -> str:
        """The domain, or the URL host when no domain was recorded."""
        if self.domain:
            return self.domain
        try:
            return urlsplit(self.url).hostname or ""
        except ValueError:
            return ""

    def get_header(self, name: str, from_request: bool = True) -> str | None:
        """Get a header value (case-insensitive)."""
        headers = self.request_headers if from_request else self.response_headers
        return headers.get(name.lower())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "method": self.method,
            "domain": self.domain,
            "status_code": self.status_code,
            "content_type": self.content_type,
            "app_name": self.app_name,
            "app_icon": self.app_icon,
            "app_category": self.app_category,
            "app_color": self.app_color,
        }
