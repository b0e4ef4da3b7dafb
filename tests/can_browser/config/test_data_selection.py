from __future__ import annotations

from pathlib import Path

import pytest

from can_browser.config.model import GlobalConfig, SourceConfig
from can_browser.config.selection import (
    DATA_OVERRIDE_ENV,
    default_source_key,
    parse_query_string,
    resolve_selection,
)
from can_browser.core.exceptions import ConfigError


def _sources():
    return {
        "mcu2": SourceConfig.from_raw(
            {"key": "mcu2", "label": "Model 3 MCU2 (Intel)", "path": "mcu2.json"}, Path("mcu2.json"), 0
        ),
        "mcu3": SourceConfig.from_raw(
            {"key": "mcu3", "label": "Model 3 MCU3 (AMD)", "path": "mcu3.json"}, Path("mcu3.json"), 1
        ),
    }


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.delenv(DATA_OVERRIDE_ENV, raising=False)


def test_parse_query_string():
    assert parse_query_string("?source=mcu3") == ("mcu3", None)
    assert parse_query_string("?source=mcu3&data=https%3A%2F%2Fx%2Fa.json") == ("mcu3", "https://x/a.json")
    assert parse_query_string("?source=") == (None, None)
    assert parse_query_string(None) == (None, None)


def test_known_source_is_selected():
    sel = resolve_selection(GlobalConfig(default_source="mcu2"), _sources(), "mcu3")

    assert sel.source_key == "mcu3"
    assert sel.source_label == "Model 3 MCU3 (AMD)"
    assert sel.location == "mcu3.json"
    assert sel.is_data_override is False


def test_unknown_or_missing_source_falls_back_to_default():
    cfg = GlobalConfig(default_source="mcu3")

    assert resolve_selection(cfg, _sources(), "bogus").source_key == "mcu3"
    assert resolve_selection(cfg, _sources()).source_key == "mcu3"


def test_unregistered_default_uses_first_source(caplog):
    assert default_source_key(GlobalConfig(default_source="gone"), _sources()) == "mcu2"
    assert "gone" in caplog.text


def test_data_override_wins_and_keeps_label():
    cfg = GlobalConfig(default_source="mcu2", allow_data_override=True)
    sel = resolve_selection(cfg, _sources(), "mcu3", "https://x/custom.json")

    assert sel.location == "https://x/custom.json"
    assert sel.source_key == "mcu3"
    assert sel.source_label == "Model 3 MCU3 (AMD)"
    assert sel.is_data_override is True


def test_data_override_ignored_unless_allowed(caplog):
    sel = resolve_selection(GlobalConfig(default_source="mcu2"), _sources(), "mcu3", "https://x/custom.json")

    assert sel.location == "mcu3.json"
    assert sel.is_data_override is False
    assert "Ignoring data override" in caplog.text


def test_env_override_does_not_need_the_flag(monkeypatch):
    monkeypatch.setenv(DATA_OVERRIDE_ENV, "local.json")

    sel = resolve_selection(GlobalConfig(default_source="mcu2"), _sources(), None, "https://x/custom.json")

    assert sel.location == "local.json"
    assert sel.is_data_override is True


def test_env_override(monkeypatch):
    monkeypatch.setenv(DATA_OVERRIDE_ENV, "local.json")

    sel = resolve_selection(GlobalConfig(), {}, None)

    assert sel.location == "local.json"
    assert sel.is_data_override is True
    assert sel.source_label == "Custom dataset"


def test_nothing_configured_raises():
    with pytest.raises(ConfigError):
        resolve_selection(GlobalConfig(), {})
