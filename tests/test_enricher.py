from __future__ import annotations

import base64

from flowinsight.app_icons import APP_ICONS
from flowinsight.decoding.engine import DecodingEngine
from flowinsight.enricher import FlowEnricher
from flowinsight.record import FlowRecord


def make_flow(**kwargs) -> FlowRecord:
    kwargs.setdefault("id", "flow-1")
    kwargs.setdefault("url", "https://api.github.com/repos")
    return FlowRecord(**kwargs)


class TestEnrich:
    def test_sets_app_fields(self):
        flow = make_flow(domain="api.github.com", request_headers={"User-Agent": "curl/8.4.0"})
        enriched = FlowEnricher().enrich(flow)

        assert enriched.app_name == "cURL"
        assert enriched.app_icon == "🌀"
        assert enriched.app_category == "Development"
        assert enriched.app_color == "#073551"

    def test_does_not_mutate_input(self):
        flow = make_flow(domain="api.github.com")
        enriched = FlowEnricher().enrich(flow)
        assert enriched is not flow
        assert flow.app_name is None
        assert enriched.app_name == "GitHub"

    def test_idempotent(self):
        enricher = FlowEnricher()
        once = enricher.enrich(make_flow(domain="www.bilibili.com"))
        assert enricher.enrich(once) == once

    def test_domain_from_url(self):
        enriched = FlowEnricher().enrich(make_flow(url="https://github.com/org/repo"))
        assert enriched.app_name == "GitHub"
        assert enriched.app_color == "#181717"

    def test_unknown(self):
        enriched = FlowEnricher().enrich(make_flow(url="https://example.net/"))
        assert enriched.app_name == "Unknown App"
        assert enriched.app_category == "Unknown"
        assert enriched.app_color == "#666666"

    def test_unknown_app_colored_by_user_agent(self):
        flow = make_flow(url="https://example.net/", request_headers={"User-Agent": "MyApp/1.0 (iPhone; iOS 17.0)"})
        enriched = FlowEnricher().enrich(flow)
        assert enriched.app_name == "Unknown App"
        assert enriched.app_color == APP_ICONS["ios"].color

    def test_enrich_all_passes_bad_flow_through(self):
        good = make_flow(domain="api.github.com")
        bad = make_flow(id="bad")
        bad.request_headers = None

        results = FlowEnricher().enrich_all([good, bad])
        assert results[0].app_name == "GitHub"
        assert results[1] is bad


class TestRequestType:
    def test_response_content_type_wins(self):
        flow = make_flow(
            url="https://example.com/app.js",
            content_type="application/json",
            response_headers={"Content-Type": "text/css"},
        )
        info = FlowEnricher().request_type(flow)
        assert info.type == "stylesheet"
        assert info.label == "CSS"

    def test_flow_content_type(self):
        flow = make_flow(url="https://example.com/data", content_type="application/json")
        assert FlowEnricher().request_type(flow).type == "script-or-data"

    def test_request_headers(self):
        flow = make_flow(url="https://example.com/data", request_headers={"X-Requested-With": "XMLHttpRequest"})
        assert FlowEnricher().request_type(flow).type == "fetch"


class TestDecodeBody:
    def test_base64_json_response(self):
        flow = make_flow(response_body=b"SGVsbG8=", response_headers={"Content-Type": "application/json"})
        decoding = FlowEnricher().decode_body(flow)

        assert decoding.best.method == "Base64"
        assert decoding.best.content == "Hello"
        assert decoding.is_text
        assert decoding.hex_view == ""
        assert decoding.summary == "Text content (8 bytes): SGVsbG8="
        assert not decoding.likely_encoded
        assert [r.method for r in decoding.results][:3] == ["Base64", "URL", "Unicode"]

    def test_request_direction(self):
        flow = make_flow(
            request_body="q=caf%C3%A9",
            request_headers={"Content-Type": "application/x-www-form-urlencoded"},
            response_body="SGVsbG8=",
        )
        decoding = FlowEnricher().decode_body(flow, "request")
        assert decoding.best.method == "URL"
        assert decoding.best.content == "q=café"

    def test_request_without_content_type_ignores_response_type(self):
        flow = make_flow(
            request_body="\\u0041",
            content_type="application/json",
            response_headers={"Content-Type": "application/json"},
        )
        decoding = FlowEnricher().decode_body(flow, "request")
        methods = [r.method for r in decoding.results]
        assert "Unicode" not in methods
        assert "Hex" in methods
        assert decoding.best.method == "None"

    def test_binary_body(self):
        flow = make_flow(response_body=b"\x00\x01\x02\xff")
        decoding = FlowEnricher().decode_body(flow)
        assert not decoding.is_text
        assert decoding.hex_view.startswith("00000000  00 01 02 ff")
        assert decoding.summary == "Binary content (4 bytes)"

    def test_gzip_body(self):
        flow = make_flow(response_body=b"\x1f\x8b\x08\x00\x00\x00\x00\x00")
        decoding = FlowEnricher().decode_body(flow)
        assert not decoding.best.success
        assert decoding.likely_encoded
        assert any(r.compression == "gzip" for r in decoding.results)

    def test_base64_wrapped_gzip(self):
        payload = base64.b64encode(b"\x1f\x8b\x08\x00\x00\x00").decode()
        decoding = FlowEnricher().decode_body(make_flow(response_body=payload))
        combined = next(r for r in decoding.results if r.method == "Base64→Gzip")
        assert combined.compression == "gzip"

    def test_absent_body(self):
        decoding = FlowEnricher().decode_body(make_flow())
        assert decoding.summary == "Empty body"
        assert decoding.best.method == "None"
        assert decoding.hex_view == ""

    def test_hex_view_cap(self):
        flow = make_flow(response_body=bytes(range(256)) * 4)
        decoding = FlowEnricher(hex_view_max_lines=3).decode_body(flow)
        assert "showing first 3 lines of 1024 bytes" in decoding.hex_view

    def test_never_raises(self, monkeypatch):
        engine = DecodingEngine()

        def boom(content, content_type):
            raise RuntimeError("engine down")

        monkeypatch.setattr(engine, "try_multiple_decodings", boom)
        decoding = FlowEnricher(engine=engine).decode_body(make_flow(response_body="x"))
        assert not decoding.best.success
        assert decoding.best.method == "None"
        assert "engine down" in decoding.best.error
        assert decoding.to_dict()["results"] == []
