"""Tests for configuration loading."""

from pathlib import Path

import pytest

from execlens_core.config import load_config, resolve_history_dir


@pytest.fixture(autouse=True)
def _no_output_base(monkeypatch):
    monkeypatch.delenv("EXECLENS_OUTPUT_BASE", raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["store"] == "file"
    assert config["history_dir"] == ".execlens/execlog_history"
    assert config["format"] == "text"
    assert config["details"] is False
    assert config["show_cached"] is False


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("store: sqlite\nstore_path: /tmp/h.db\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "sqlite"
    assert config["store_path"] == "/tmp/h.db"


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("")
    assert load_config(config_path=str(cfg))["store"] == "file"


def test_non_mapping_config_rejected(tmp_path):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config(config_path=str(cfg))


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("format: json\n")
    config = load_config(config_path=str(cfg), cli_overrides={"format": "text"})
    assert config["format"] == "text"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("format: json\n")
    config = load_config(config_path=str(cfg), cli_overrides={"format": None})
    assert config["format"] == "json"


def test_unknown_store_falls_back_to_file(tmp_path, caplog):
    cfg = tmp_path / ".execlens.yml"
    cfg.write_text("store: postgres\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "file"
    assert "postgres" in caplog.text


def test_output_base_env_var(tmp_path, monkeypatch):
    monkeypatch.setenv("EXECLENS_OUTPUT_BASE", str(tmp_path))
    config = load_config(config_path="nonexistent.yml")
    assert resolve_history_dir(config) == tmp_path / "execlog_history"


def test_history_dir_used_without_output_base():
    config = load_config(config_path="nonexistent.yml", cli_overrides={"history_dir": "/var/h"})
    assert resolve_history_dir(config) == Path("/var/h")
