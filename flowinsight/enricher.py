"""
Flow enrichment: app identity eagerly, request type and body decoding lazily.

enrich() is pure: it returns a copy of the flow with the app fields set
and never touches the input, so enriching twice gives the same record.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import Literal

from flowinsight.app_classifier import classify_app
from flowinsight.app_icons import app_icon_from_user_agent
from flowinsight.app_icons import get_app_icon
from flowinsight.config import config
from flowinsight.decoding.body import BodyContent
from flowinsight.decoding.body import content_summary
from flowinsight.decoding.body import generate_hex_view
from flowinsight.decoding.body import is_text_content
from flowinsight.decoding.engine import DecodingEngine
from flowinsight.decoding.engine import get_engine
from flowinsight.decoding.engine import NO_DECODING
from flowinsight.models import BodyDecoding
from flowinsight.models import DecodingResult
from flowinsight.models import UNKNOWN_APP
from flowinsight.models import RequestTypeInfo
from flowinsight.record import FlowRecord
from flowinsight.registry import RuleRegistry
from flowinsight.request_type import classify_request_type
from flowinsight.request_type import get_request_type_info

logger = logging.getLogger(__name__)

Direction = Literal["request", "response"]


class FlowEnricher:
    """
    Attaches derived fields to FlowRecords.

    Args:
        registry: Rule source for app identification (global registry if None)
        engine: Decoding engine (shared default engine if None)
        hex_view_max_lines: Cap for the hex view of binary bodies
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        engine: DecodingEngine | None = None,
        hex_view_max_lines: int | None = None,
    ):
        self._registry = registry
        self._engine = engine or get_engine()
        self._hex_view_max_lines = (
            config.HEX_VIEW_MAX_LINES if hex_view_max_lines is None else hex_view_max_lines
        )

    def enrich(self, flow: FlowRecord) -> FlowRecord:
        """
        Return a copy of ``flow`` with app_name/icon/category/color set.

        An unidentified app still gets a client color from its User-Agent.
        """
        user_agent = flow.get_header("user-agent")
        app = classify_app(
            flow.host,
            user_agent=user_agent,
            headers=flow.request_headers,
            registry=self._registry,
        )
        if app == UNKNOWN_APP and user_agent:
            icon_info = app_icon_from_user_agent(user_agent)
        else:
            icon_info = get_app_icon(app.name, app.category)
        return dataclasses.replace(
            flow,
            app_name=app.name,
            app_icon=app.icon,
            app_category=app.category,
            app_color=icon_info.color,
        )

    def enrich_all(self, flows: Iterable[FlowRecord]) -> list[FlowRecord]:
        """Enrich a batch; a flow that fails is logged and kept as-is."""
        enriched = []
        for flow in flows:
            try:
                enriched.append(self.enrich(flow))
            except Exception as e:
                logger.warning(f"Could not enrich flow {getattr(flow, 'id', '?')}: {e}")
                enriched.append(flow)
        return enriched

    def request_type(self, flow: FlowRecord) -> RequestTypeInfo:
        """Resource type of a flow, from the response Content-Type when present."""
        content_type = flow.get_header("content-type", from_request=False) or flow.content_type
        request_type = classify_request_type(flow.url, content_type, flow.request_headers)
        return get_request_type_info(request_type)

    def decode_body(self, flow: FlowRecord, direction: Direction = "response") -> BodyDecoding:
        """
        Run every applicable decoding strategy over one body.

        Args:
            flow: The flow whose body to decode
            direction: "request" or "response"

        Returns:
            BodyDecoding with all results and the best one. Never raises:
            an unexpected error becomes a failed "None" result.
        """
        if direction == "request":
            raw = flow.request_body
            content_type = flow.get_header("content-type")
        else:
            raw = flow.response_body
            content_type = flow.get_header("content-type", from_request=False) or flow.content_type

        try:
            body = BodyContent.from_raw(raw)
            results = tuple(self._engine.try_multiple_decodings(body.text, content_type))
            is_text = is_text_content(body.data, content_type)
            return BodyDecoding(
                results=results,
                best=self._engine.best_of(list(results), body.text),
                likely_encoded=self._engine.is_likely_encoded(body.text),
                is_text=is_text,
                hex_view="" if is_text else generate_hex_view(body.data, self._hex_view_max_lines),
                summary=content_summary(body.data, is_text),
            )
        except Exception as e:
            logger.warning(f"Body decoding failed for flow {flow.id} ({direction}): {e}")
            failed = DecodingResult.failure("", NO_DECODING, f"Body decoding failed: {e}")
            return BodyDecoding(
                results=(),
                best=failed,
                likely_encoded=False,
                is_text=False,
                hex_view="",
                summary="Undecodable body",
            )
