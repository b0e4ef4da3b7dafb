from __future__ import annotations

import json
from pathlib import Path

import pytest

from can_browser.config.loader import DATA_ROOT_ENV, load_global_config, load_source_registry, registered_locations
from can_browser.config.selection import DATA_OVERRIDE_ENV, resolve_selection
from can_browser.core.exceptions import ConfigError
from can_browser.core.pager import PAGE_SIZE_OPTIONS


@pytest.fixture(autouse=True)
def _no_env_data_root(monkeypatch):
    monkeypatch.delenv(DATA_ROOT_ENV, raising=False)


def _write_config(root, global_cfg=None, sources=()):
    root.mkdir(parents=True, exist_ok=True)
    (root / "global.json").write_text(json.dumps(global_cfg if global_cfg is not None else {}))
    sources_dir = root / "sources"
    sources_dir.mkdir(exist_ok=True)
    for name, raw in sources:
        (sources_dir / name).write_text(raw if isinstance(raw, str) else json.dumps(raw))
    return root


def test_loads_global_and_sources_in_order(tmp_path):
    root = _write_config(
        tmp_path / "config",
        {"ui_title": "Frames", "default_source": "b", "signal_page_size": 100, "data_root": "../data"},
        [
            ("a.json", {"key": "a", "label": "Source A", "path": "a.json", "order": 2}),
            ("b.json", {"key": "b", "label": "Source B", "url": "https://example.com/b.json", "order": 1}),
        ],
    )

    global_config, cfg_by_key = load_source_registry(root)

    assert global_config.ui_title == "Frames"
    assert global_config.default_source == "b"
    assert global_config.signal_page_size == 100
    assert global_config.page_size_options == PAGE_SIZE_OPTIONS
    assert global_config.data_root == (tmp_path / "data").resolve()
    assert list(cfg_by_key) == ["b", "a"]
    assert cfg_by_key["a"].label == "Source A"
    assert cfg_by_key["b"].location == "https://example.com/b.json"


def test_key_and_label_default_to_file_stem(tmp_path):
    root = _write_config(tmp_path, sources=[("mcu9.json", {"path": "x.json"})])

    _, cfg_by_key = load_source_registry(root)

    assert cfg_by_key["mcu9"].label == "mcu9"


def test_missing_global_json_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_global_config(tmp_path)


def test_broken_source_file_is_skipped(tmp_path, caplog):
    root = _write_config(
        tmp_path,
        sources=[("bad.json", "{nope"), ("list.json", "[1]"), ("ok.json", {"key": "ok", "path": "ok.json"})],
    )

    _, cfg_by_key = load_source_registry(root)

    assert list(cfg_by_key) == ["ok"]
    assert "bad.json" in caplog.text


def test_duplicate_source_keys_raise(tmp_path):
    root = _write_config(
        tmp_path,
        sources=[("a.json", {"key": "dup", "path": "a"}), ("b.json", {"key": "dup", "path": "b"})],
    )

    with pytest.raises(ConfigError, match="dup"):
        load_source_registry(root)


def test_source_without_location_raises_on_access(tmp_path):
    root = _write_config(tmp_path, sources=[("a.json", {"key": "a"})])

    _, cfg_by_key = load_source_registry(root)

    with pytest.raises(ConfigError):
        _ = cfg_by_key["a"].location


def test_data_root_env_overrides_config(tmp_path, monkeypatch):
    root = _write_config(tmp_path / "config", {"data_root": "../data"})
    override = tmp_path / "elsewhere"
    monkeypatch.setenv(DATA_ROOT_ENV, str(override))

    global_config = load_global_config(root)

    assert global_config.data_root == override.resolve()


def test_bad_numeric_settings_fall_back(tmp_path):
    root = _write_config(
        tmp_path,
        {"signal_page_size": "lots", "index_batch_size": 0, "page_size_options": "50,100"},
    )

    global_config = load_global_config(root)

    assert global_config.signal_page_size == 200
    assert global_config.index_batch_size == 20
    assert global_config.page_size_options == PAGE_SIZE_OPTIONS


def test_page_size_options_are_cleaned(tmp_path):
    root = _write_config(tmp_path, {"page_size_options": [25, "x", 25, -1, "100"]})

    assert load_global_config(root).page_size_options == (25, 100)


def test_data_override_is_off_unless_enabled(tmp_path):
    assert load_global_config(_write_config(tmp_path / "off")).allow_data_override is False
    assert load_global_config(_write_config(tmp_path / "str", {"allow_data_override": "yes"})).allow_data_override is False
    assert load_global_config(_write_config(tmp_path / "on", {"allow_data_override": True})).allow_data_override is True


def test_registered_locations_skip_sources_without_a_path(tmp_path, caplog):
    root = _write_config(
        tmp_path,
        sources=[("a.json", {"key": "a", "path": "a.json"}), ("b.json", {"key": "b"})],
    )

    _, cfg_by_key = load_source_registry(root)

    assert registered_locations(cfg_by_key) == ["a.json"]
    assert "'b'" in caplog.text


def test_shipped_default_source_has_its_data_file(monkeypatch):
    monkeypatch.delenv(DATA_OVERRIDE_ENV, raising=False)
    config_root = Path(__file__).resolve().parents[3] / "config"

    global_config, cfg_by_key = load_source_registry(config_root)
    selection = resolve_selection(global_config, cfg_by_key)

    assert selection.source_key == "sample"
    assert (global_config.data_root / selection.location).is_file()
