from __future__ import annotations

from mitmproxy.test import tflow

from flowinsight.record import FlowRecord


def test_from_http_flow() -> None:
    f = tflow.tflow(resp=True)
    f.response.headers["Content-Type"] = "application/json"

    record = FlowRecord.from_http_flow(f)
    assert record.id == f.id
    assert record.url == f.request.pretty_url
    assert record.method == "GET"
    assert record.domain == "address"
    assert record.request_body == b"content"
    assert record.response_body == b"message"
    assert record.status_code == 200
    assert record.content_type == "application/json"
    assert record.get_header("HEADER") == "qvalue"
    assert record.get_header("Content-Type", from_request=False) == "application/json"
    assert record.app_name is None


def test_from_http_flow_without_response() -> None:
    record = FlowRecord.from_http_flow(tflow.tflow())
    assert record.response_body is None
    assert record.status_code is None
    assert record.response_headers == {}


def test_from_http_flow_headers_only() -> None:
    f = tflow.tflow(resp=True)
    f.response.headers["Content-Type"] = "application/json"

    record = FlowRecord.from_http_flow(f, include_bodies=False)
    assert record.request_body is None
    assert record.response_body is None
    assert record.status_code == 200
    assert record.get_header("Content-Type", from_request=False) == "application/json"


def test_headers_are_lowercased() -> None:
    record = FlowRecord(id="1", url="https://example.com/", request_headers={"User-Agent": "curl/8.4.0"})
    assert record.request_headers == {"user-agent": "curl/8.4.0"}
    assert record.get_header("user-agent") == "curl/8.4.0"
    assert record.get_header("USER-AGENT") == "curl/8.4.0"
    assert record.get_header("accept") is None


def test_host_falls_back_to_url() -> None:
    assert FlowRecord(id="1", url="https://github.com/x", domain="api.github.com").host == "api.github.com"
    assert FlowRecord(id="2", url="https://GitHub.com:8443/x").host == "github.com"
    assert FlowRecord(id="3", url="not a url").host == ""
