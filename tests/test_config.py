from __future__ import annotations

import json

import pytest

from flowinsight.config import Config

ENV_VARS = (
    "FLOWINSIGHT_VERBOSE",
    "FLOWINSIGHT_DEV_MODE",
    "FLOWINSIGHT_RULES_FILE",
    "FLOWINSIGHT_BASE64_HINT_MIN_LENGTH",
    "FLOWINSIGHT_HEX_HINT_MIN_LENGTH",
    "FLOWINSIGHT_HEX_VIEW_MAX_LINES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path) -> None:
    cfg = Config(dev_config_path=tmp_path / "dev.json")
    assert cfg.VERBOSE is False
    assert cfg.DEV_MODE is False
    assert cfg.RULES_FILE == ""
    assert cfg.BASE64_HINT_MIN_LENGTH == 100
    assert cfg.HEX_HINT_MIN_LENGTH == 20
    assert cfg.HEX_VIEW_MAX_LINES == 1000


def test_dev_json(tmp_path) -> None:
    path = tmp_path / "dev.json"
    path.write_text(json.dumps({"verbose": True, "rules_file": "~/rules.yaml", "hex_view_max_lines": 50}))

    cfg = Config(dev_config_path=path)
    assert cfg.VERBOSE is True
    assert cfg.RULES_FILE == "~/rules.yaml"
    assert cfg.HEX_VIEW_MAX_LINES == 50


def test_env_beats_dev_json(tmp_path, monkeypatch) -> None:
    path = tmp_path / "dev.json"
    path.write_text(json.dumps({"dev_mode": True, "hex_hint_min_length": 8}))
    monkeypatch.setenv("FLOWINSIGHT_DEV_MODE", "0")
    monkeypatch.setenv("FLOWINSIGHT_HEX_HINT_MIN_LENGTH", "5")

    cfg = Config(dev_config_path=path)
    assert cfg.DEV_MODE is False
    assert cfg.HEX_HINT_MIN_LENGTH == 5


@pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("YES", True), ("off", False), ("", False)])
def test_bool_parsing(tmp_path, monkeypatch, value, expected) -> None:
    monkeypatch.setenv("FLOWINSIGHT_VERBOSE", value)
    assert Config(dev_config_path=tmp_path / "dev.json").VERBOSE is expected


def test_invalid_int_uses_default(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("FLOWINSIGHT_BASE64_HINT_MIN_LENGTH", "lots")
    assert Config(dev_config_path=tmp_path / "dev.json").BASE64_HINT_MIN_LENGTH == 100


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_bad_dev_json_is_ignored(tmp_path, content) -> None:
    path = tmp_path / "dev.json"
    path.write_text(content)
    assert Config(dev_config_path=path).HEX_VIEW_MAX_LINES == 1000
