#!/usr/bin/env python3
"""
Tests for config loading and overrides.
"""

from pathlib import Path

import pytest

from doc_sorter.config import DEFAULT_MAX_DEPTH, AppConfig, load_user_config


def test_defaults():
	config = AppConfig()
	assert config.max_depth == DEFAULT_MAX_DEPTH
	assert config.convert_to_pdfa is True
	assert config.follow_symlinks is False


def test_yaml_config_overrides_known_keys(tmp_path: Path):
	path = tmp_path / "config.yaml"
	path.write_text("provider: ollama\nmax_depth: 2\noutput_folder: ~/Renamed\nunknown: 1\n", encoding="utf-8")
	config = AppConfig()
	config.apply_overrides(load_user_config(path))
	assert config.provider == "ollama"
	assert config.max_depth == 2
	assert config.output_folder == Path("~/Renamed").expanduser()
	assert not hasattr(config, "unknown")


def test_json_config(tmp_path: Path):
	path = tmp_path / "config.json"
	path.write_text('{"dry_run": true}', encoding="utf-8")
	assert load_user_config(path) == {"dry_run": True}


def test_missing_config_is_empty(tmp_path: Path):
	assert load_user_config(tmp_path / "none.yaml") == {}
	assert load_user_config(None) == {}


def test_normalized_output_requires_folder():
	with pytest.raises(RuntimeError):
		AppConfig().normalized_output_folder()
