"""
Decoding engine that runs the strategies selected for a content type.

The DecodingEngine:
1. Picks strategies for the declared content type (get_decoding_attempts)
2. Runs every one of them, none short-circuited (try_multiple_decodings)
3. Returns the first success in configured order (get_best_result)

A strategy that raises is logged and recorded as a failure result, so
one bad body never aborts enrichment of the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from flowinsight.config import config
from flowinsight.decoding import combinators
from flowinsight.decoding import strategies
from flowinsight.models import DecodingResult
from flowinsight.models import DecodingStrategy

logger = logging.getLogger(__name__)

NO_DECODING = "None"

# Strategy registry: method name -> strategy
STRATEGIES: Mapping[str, DecodingStrategy] = MappingProxyType({
    strategies.BASE64: DecodingStrategy(strategies.BASE64, "Base64 decode", strategies.decode_base64),
    strategies.URL: DecodingStrategy(strategies.URL, "URL decode", strategies.decode_url),
    strategies.HTML: DecodingStrategy(strategies.HTML, "HTML entity decode", strategies.decode_html_entities),
    strategies.UNICODE: DecodingStrategy(strategies.UNICODE, "Unicode escape decode", strategies.decode_unicode_escapes),
    strategies.HEX: DecodingStrategy(strategies.HEX, "Hex decode", strategies.decode_hex),
    strategies.GZIP: DecodingStrategy(strategies.GZIP, "Gzip detection", strategies.detect_gzip),
    combinators.BASE64_THEN_GZIP: DecodingStrategy(
        combinators.BASE64_THEN_GZIP,
        "Base64 decode, then gzip inflate",
        combinators.decode_base64_then_gzip,
    ),
    combinators.GZIP_THEN_BASE64: DecodingStrategy(
        combinators.GZIP_THEN_BASE64,
        "Gzip inflate, then Base64 decode",
        combinators.decode_gzip_then_base64,
    ),
})


class DecodingEngine:
    """
    Runs decoding strategies over body text.

    Args:
        base64_hint_min_length: is_likely_encoded flags base64-shaped text
            only when strictly longer than this
        hex_hint_min_length: same, for hex-shaped text
    """

    def __init__(
        self,
        base64_hint_min_length: int | None = None,
        hex_hint_min_length: int | None = None,
    ):
        self.base64_hint_min_length = (
            config.BASE64_HINT_MIN_LENGTH if base64_hint_min_length is None else base64_hint_min_length
        )
        self.hex_hint_min_length = (
            config.HEX_HINT_MIN_LENGTH if hex_hint_min_length is None else hex_hint_min_length
        )

    def get_decoding_attempts(self, content_type: str | None) -> list[DecodingStrategy]:
        """Strategies to try for a content type, in priority order."""
        content_type = (content_type or "").lower()
        methods = [strategies.BASE64, strategies.URL]

        if "text/html" in content_type or "application/xhtml" in content_type:
            methods.append(strategies.HTML)

        if "application/json" in content_type or "text/javascript" in content_type:
            methods.append(strategies.UNICODE)

        # Binary or unknown (non-text) types may be a hex dump
        if (
            "application/octet-stream" in content_type
            or "application/binary" in content_type
            or "text/" not in content_type
        ):
            methods.append(strategies.HEX)

        methods += [strategies.GZIP, combinators.BASE64_THEN_GZIP, combinators.GZIP_THEN_BASE64]
        return [STRATEGIES[m] for m in methods]

    def try_multiple_decodings(self, content: str, content_type: str | None) -> list[DecodingResult]:
        """Run every selected strategy and return all results in order."""
        return [self._run(strategy, content) for strategy in self.get_decoding_attempts(content_type)]

    def get_best_result(self, content: str, content_type: str | None) -> DecodingResult:
        """First successful result in priority order, or a "None" failure echoing the input."""
        return self.best_of(self.try_multiple_decodings(content, content_type), content)

    @staticmethod
    def best_of(results: list[DecodingResult], content: str) -> DecodingResult:
        for result in results:
            if result.success:
                return result
        return DecodingResult.failure(content, NO_DECODING, "No suitable decoding method found")

    def is_likely_encoded(self, content: str) -> bool:
        """Cheap hint for the UI that content may be encoded. Independent of decoding."""
        if strategies.BASE64_SHAPE.match(content.strip()) and len(content) > self.base64_hint_min_length:
            return True

        if "%" in content and strategies.PERCENT_ESCAPE.search(content):
            return True

        if "&" in content and strategies.HTML_ENTITY.search(content):
            return True

        if "\\u" in content and strategies.UNICODE_ESCAPE.search(content):
            return True

        if strategies.HEX_SHAPE.match(content) and len(content) > self.hex_hint_min_length:
            return True

        return strategies.has_gzip_magic(content)

    def _run(self, strategy: DecodingStrategy, content: str) -> DecodingResult:
        try:
            return strategy(content)
        except Exception as e:
            logger.debug(f"Decoding strategy '{strategy.method}' raised: {e}")
            return DecodingResult.failure(content, strategy.method, f"{strategy.method} failed: {e}")


# Default engine used by the module-level helpers
_engine: DecodingEngine | None = None


def get_engine() -> DecodingEngine:
    """Get the shared default engine."""
    global _engine
    if _engine is None:
        _engine = DecodingEngine()
    return _engine


def get_decoding_attempts(content_type: str | None) -> list[DecodingStrategy]:
    return get_engine().get_decoding_attempts(content_type)


def try_multiple_decodings(content: str, content_type: str | None) -> list[DecodingResult]:
    return get_engine().try_multiple_decodings(content, content_type)


def get_best_result(content: str, content_type: str | None) -> DecodingResult:
    return get_engine().get_best_result(content, content_type)


def is_likely_encoded(content: str) -> bool:
    return get_engine().is_likely_encoded(content)
