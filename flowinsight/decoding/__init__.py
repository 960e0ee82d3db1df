"""
Decoding package for opaque request/response body text.

- strategies: Base64, URL, HTML entity, unicode escape, hex decoding, gzip detection
- combinators: Base64→Gzip and Gzip→Base64 two-stage attempts
- engine: strategy selection per content type and best-result choice
- body: body normalization, text sniffing, hex view and summaries
"""

from flowinsight.decoding.body import BodyContent
from flowinsight.decoding.body import content_summary
from flowinsight.decoding.body import generate_hex_view
from flowinsight.decoding.body import is_text_content
from flowinsight.decoding.engine import DecodingEngine
from flowinsight.decoding.engine import get_best_result
from flowinsight.decoding.engine import get_decoding_attempts
from flowinsight.decoding.engine import get_engine
from flowinsight.decoding.engine import is_likely_encoded
from flowinsight.decoding.engine import STRATEGIES
from flowinsight.decoding.engine import try_multiple_decodings

__all__ = [
    "BodyContent",
    "DecodingEngine",
    "STRATEGIES",
    "content_summary",
    "generate_hex_view",
    "get_best_result",
    "get_decoding_attempts",
    "get_engine",
    "is_likely_encoded",
    "is_text_content",
    "try_multiple_decodings",
]
