from __future__ import annotations

import pytest

from flowinsight.request_type import all_request_types
from flowinsight.request_type import classify_request_type
from flowinsight.request_type import get_request_type_info
from flowinsight.rules import REQUEST_TYPES


@pytest.mark.parametrize("content_type,expected", [
    ("text/html; charset=utf-8", "document"),
    ("application/xhtml+xml", "document"),
    ("text/css", "stylesheet"),
    ("application/javascript", "script-or-data"),
    ("application/json", "script-or-data"),
    ("application/problem+json", "script-or-data"),
    ("font/woff2", "font"),
    ("application/font-woff", "font"),
    ("image/svg+xml", "image"),
    ("video/mp4", "media"),
    ("audio/mpeg", "media"),
    ("application/wasm", "wasm"),
    ("application/xml", "fetch"),
    ("text/xml", "fetch"),
])
def test_content_type(content_type, expected) -> None:
    assert classify_request_type("https://example.com/resource", content_type) == expected


def test_json_is_script_or_data() -> None:
    assert classify_request_type("https://example.com/x.json", "application/json") == "script-or-data"


def test_content_type_beats_extension() -> None:
    assert classify_request_type("https://example.com/theme.css", "application/json") == "script-or-data"


def test_headers() -> None:
    url = "https://example.com/data"
    assert classify_request_type(url, headers={"X-Requested-With": "XMLHttpRequest"}) == "fetch"
    assert classify_request_type(url, headers={"accept": "application/json"}) == "script-or-data"
    assert classify_request_type(url, headers={"Accept": "application/xml"}) == "fetch"
    # Browser navigations accept both: not decided by headers
    assert classify_request_type(url, headers={"Accept": "text/html,application/json"}) == "other"


@pytest.mark.parametrize("url,expected", [
    ("https://cdn.example.com/app.min.js?v=3", "script-or-data"),
    ("https://example.com/logo.PNG", "image"),
    ("https://example.com/fonts/inter.woff2", "font"),
    ("https://example.com/movie.mp4#t=10", "media"),
    ("https://example.com/module.wasm", "wasm"),
    ("https://example.com/index.php", "document"),
    ("/static/theme.css", "stylesheet"),
])
def test_extension(url, expected) -> None:
    assert classify_request_type(url) == expected


def test_extension_only_from_last_path_segment() -> None:
    assert classify_request_type("https://example.com/v1.2/users") == "other"
    assert classify_request_type("https://example.com/page?file=app.js") == "other"


def test_url_shape() -> None:
    assert classify_request_type("https://example.com/api/users") == "fetch"
    assert classify_request_type("https://example.com/ajax/load") == "fetch"
    assert classify_request_type("https://example.com/feed.xml") == "fetch"


def test_default_other() -> None:
    assert classify_request_type("https://example.com/") == "other"
    assert classify_request_type("") == "other"
    assert classify_request_type("http://[::1/broken") == "other"


def test_request_type_info() -> None:
    info = get_request_type_info("stylesheet")
    assert info.label == "CSS"
    assert info.to_dict()["type"] == "stylesheet"
    assert get_request_type_info("nonsense") == REQUEST_TYPES["other"]


def test_all_request_types() -> None:
    types = [info.type for info in all_request_types()]
    assert types[0] == "fetch"
    assert "other" in types
    assert len(types) == len(set(types)) == 9


def test_request_types_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        REQUEST_TYPES["xhr"] = REQUEST_TYPES["fetch"]
