"""
Core type definitions for flowinsight.

All value types here are frozen: rule tables built from them are shared
across every classification call and must never change after import.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Literal


# =============================================================================
# Application identification
# =============================================================================


@dataclass(frozen=True)
class AppInfo:
    """Application descriptor attached to a flow: name, icon glyph, category."""

    name: str
    icon: str
    category: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "icon": self.icon,
            "category": self.category,
        }


UNKNOWN_APP = AppInfo(name="Unknown App", icon="❓", category="Unknown")


@dataclass(frozen=True)
class ClassificationRule:
    """
    A domain rule for app identification.

    Matches when any entry of ``domains`` is a substring of the flow domain
    (or the other way around). ``user_agents`` and ``headers`` are optional
    extra predicates; ``None`` means "no requirement".

    Rules are only meaningful inside an ordered sequence: the first rule
    that matches wins, so the same domain may appear in several rules.
    """

    domains: tuple[str, ...]
    app: AppInfo
    user_agents: tuple[str, ...] | None = None
    headers: tuple[tuple[str, str], ...] | None = None  # (name, value substring)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {
            "domains": list(self.domains),
            "app": self.app.to_dict(),
        }
        if self.user_agents is not None:
            result["user_agents"] = list(self.user_agents)
        if self.headers is not None:
            result["headers"] = dict(self.headers)
        return result


@dataclass(frozen=True)
class UserAgentSignature:
    """A user-agent substring that identifies a client regardless of domain."""

    pattern: str
    app: AppInfo


@dataclass(frozen=True)
class AppIconInfo:
    """Display icon and color for an application."""

    icon: str
    color: str
    name: str


# =============================================================================
# Resource types
# =============================================================================


RequestType = Literal[
    "fetch",
    "document",
    "stylesheet",
    "script-or-data",
    "font",
    "image",
    "media",
    "wasm",
    "other",
]


@dataclass(frozen=True)
class RequestTypeInfo:
    """Display metadata for a resource-type tag."""

    type: RequestType
    label: str
    icon: str
    color: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
        }


# =============================================================================
# Decoding
# =============================================================================


@dataclass(frozen=True)
class DecodingResult:
    """
    Outcome of one decoding attempt.

    On failure ``content`` echoes the input unchanged and ``error`` says why.
    ``compression`` is set when a compression signature was recognized,
    whether or not the attempt succeeded.
    """

    success: bool
    content: str
    method: str
    error: str | None = None
    compression: Literal["gzip"] | None = None

    @classmethod
    def ok(cls, content: str, method: str) -> DecodingResult:
        return cls(success=True, content=content, method=method)

    @classmethod
    def failure(
        cls,
        content: str,
        method: str,
        error: str,
        compression: Literal["gzip"] | None = None,
    ) -> DecodingResult:
        return cls(
            success=False,
            content=content,
            method=method,
            error=error,
            compression=compression,
        )

    def to_dict(self) -> dict:
        result: dict[str, Any] = {
            "success": self.success,
            "content": self.content,
            "method": self.method,
        }
        if self.error:
            result["error"] = self.error
        if self.compression:
            result["compression"] = self.compression
        return result


@dataclass(frozen=True)
class DecodingStrategy:
    """A named decoder: ``decoder(content)`` must return a DecodingResult."""

    method: str
    description: str
    decoder: Callable[[str], DecodingResult]

    def __call__(self, content: str) -> DecodingResult:
        return self.decoder(content)


@dataclass(frozen=True)
class BodyDecoding:
    """Everything the body panel needs for one request or response body."""

    results: tuple[DecodingResult, ...]
    best: DecodingResult
    likely_encoded: bool
    is_text: bool
    hex_view: str
    summary: str

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "best": self.best.to_dict(),
            "likely_encoded": self.likely_encoded,
            "is_text": self.is_text,
            "hex_view": self.hex_view,
            "summary": self.summary,
        }
