"""
Flow insight for captured HTTP traffic.

Identifies the app behind each flow, tags its resource type and tries to
decode opaque bodies.

As a mitmproxy addon:
    mitmdump -s flowinsight/addon.py

Or programmatically:
    from flowinsight.addon import FlowInsightAddon
    addons = [FlowInsightAddon()]
"""

from flowinsight.app_classifier import classify_app
from flowinsight.enricher import FlowEnricher
from flowinsight.models import AppInfo
from flowinsight.models import DecodingResult
from flowinsight.models import UNKNOWN_APP
from flowinsight.record import FlowRecord
from flowinsight.request_type import classify_request_type

__all__ = [
    "AppInfo",
    "DecodingResult",
    "FlowEnricher",
    "FlowRecord",
    "UNKNOWN_APP",
    "classify_app",
    "classify_request_type",
]
