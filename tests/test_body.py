from __future__ import annotations

from flowinsight.decoding.body import BodyContent
from flowinsight.decoding.body import bytes_to_text
from flowinsight.decoding.body import content_summary
from flowinsight.decoding.body import generate_hex_view
from flowinsight.decoding.body import is_text_content


def test_bytes_to_text() -> None:
    assert bytes_to_text("café".encode()) == "café"
    assert bytes_to_text(b"\x1f\x8b\x08") == "\x1f\x8b\x08"


class TestBodyContent:
    def test_absent(self):
        body = BodyContent.from_raw(None)
        assert body.kind == "absent"
        assert body.text == ""
        assert body.is_empty

    def test_text(self):
        body = BodyContent.from_raw("SGVsbG8=")
        assert body.kind == "text"
        assert body.text == "SGVsbG8="
        assert body.data == b"SGVsbG8="

    def test_bytes(self):
        body = BodyContent.from_raw(bytearray(b"\x1f\x8b\x08\x00"))
        assert body.kind == "bytes"
        assert body.text.startswith("\x1f\x8b")
        assert body.data == b"\x1f\x8b\x08\x00"

    def test_parsed_json(self):
        body = BodyContent.from_raw({"msg": "你好", "n": 1})
        assert body.kind == "text"
        assert body.text == '{"msg": "你好", "n": 1}'

    def test_not_json_serializable(self):
        body = BodyContent.from_raw({1, 2})
        assert body.kind == "text"
        assert body.text == str({1, 2})


def test_is_text_content() -> None:
    assert is_text_content(b"\x00\x01", "application/json; charset=utf-8")
    assert is_text_content(b"\x00", "text/plain")
    assert is_text_content(b"", None)
    assert is_text_content(b"hello\nworld\t!", None)
    assert not is_text_content(b"\xff\xfe\x00", None)
    assert not is_text_content(b"\x00\x01\x02\x03", "application/octet-stream")


def test_hex_view_line_format() -> None:
    view = generate_hex_view(b"0123456789abcdef")
    assert view == "00000000  30 31 32 33 34 35 36 37  38 39 61 62 63 64 65 66  |0123456789abcdef|\n"


def test_hex_view_partial_line() -> None:
    view = generate_hex_view(b"AB\x00")
    assert view.startswith("00000000  41 42 00 ")
    assert view.endswith("|AB.|\n")
    # Short lines are padded so the ASCII gutter stays aligned
    assert view.index("|") == generate_hex_view(b"0123456789abcdef").index("|")


def test_hex_view_truncation() -> None:
    data = bytes(range(256)) * 2
    view = generate_hex_view(data, max_lines=2)
    lines = view.splitlines()
    assert lines[0].startswith("00000000")
    assert lines[1].startswith("00000010")
    assert view.endswith("\n... (showing first 2 lines of 512 bytes)\n")


def test_hex_view_empty() -> None:
    assert generate_hex_view(b"") == ""


def test_content_summary() -> None:
    assert content_summary(b"", True) == "Empty body"
    assert content_summary(b"\x00\x01", False) == "Binary content (2 bytes)"
    assert content_summary(b"hi", True) == "Text content (2 bytes): hi"

    summary = content_summary(b"a" * 150, True)
    assert summary == "Text content (150 bytes): " + "a" * 100 + "..."
