import pathlib

import pytest

from tetris_engine.config import DEFAULT_CONFIG, load_config

REPO_CONFIG = pathlib.Path(__file__).resolve().parent.parent / "config" / "settings.yaml"


def test_defaults_without_file():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("drop_interval_ms: 250\nseed: 7\n")
    config = load_config(path)
    assert config["drop_interval_ms"] == 250
    assert config["seed"] == 7
    assert config["board_width"] == 10


def test_empty_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("")
    assert load_config(path) == DEFAULT_CONFIG


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_shipped_settings_match_defaults():
    assert load_config(REPO_CONFIG) == DEFAULT_CONFIG
