#!/usr/bin/env python3
"""
Tests for the persisted prompts, keys and settings store.
"""

from pathlib import Path

import pytest

from doc_sorter.store import DEFAULT_PROMPT_ID, PROMPT_HISTORY_LIMIT, SettingsStore


def test_missing_file_loads_defaults(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	assert [p["id"] for p in store.prompts] == [DEFAULT_PROMPT_ID]
	assert store.api_keys == []
	assert store.settings["theme"] == "system"


def test_malformed_file_loads_defaults(tmp_path: Path):
	path = tmp_path / "store.yaml"
	path.write_text("prompts: [unclosed", encoding="utf-8")
	store = SettingsStore(path)
	assert store.get_prompt(DEFAULT_PROMPT_ID) is not None


def test_prompts_persist_across_instances(tmp_path: Path):
	path = tmp_path / "nested" / "store.yaml"
	store = SettingsStore(path)
	prompt = store.add_prompt("Invoices", "Name invoices by date.")
	reloaded = SettingsStore(path)
	assert reloaded.get_prompt(prompt["id"])["text"] == "Name invoices by date."
	assert reloaded.get_prompt(prompt["id"])["history"] == ["Name invoices by date."]


def test_prompt_history_is_capped(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	prompt = store.add_prompt("Title", "v0")
	for number in range(1, 15):
		store.update_prompt(prompt["id"], "Title", f"v{number}")
	history = store.get_prompt(prompt["id"])["history"]
	assert len(history) == PROMPT_HISTORY_LIMIT
	assert history[-1] == "v14"
	assert store.prompt_version(prompt["id"], 0) == "v5"


def test_same_text_does_not_grow_history(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	prompt = store.add_prompt("Title", "text")
	store.update_prompt(prompt["id"], "New title", "text")
	assert store.get_prompt(prompt["id"])["history"] == ["text"]
	assert store.get_prompt(prompt["id"])["title"] == "New title"


def test_last_prompt_cannot_be_deleted(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	assert store.delete_prompt(DEFAULT_PROMPT_ID) is False
	extra = store.add_prompt("Other", "other text")
	assert store.delete_prompt(DEFAULT_PROMPT_ID) is True
	assert [p["id"] for p in store.prompts] == [extra["id"]]


def test_empty_prompt_is_rejected(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	with pytest.raises(ValueError):
		store.add_prompt("  ", "text")


def test_new_ids_are_unique(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	ids = {store.add_key(f"key{n}", "openai", f"sk-{n}")["id"] for n in range(5)}
	assert len(ids) == 5


def test_key_crud(tmp_path: Path):
	store = SettingsStore(tmp_path / "store.yaml")
	record = store.add_key("work", "gemini", "abc")
	store.update_key(record["id"], "home", "openai", "def")
	assert store.get_key(record["id"])["provider"] == "openai"
	assert store.delete_key(record["id"]) is True
	assert store.delete_key(record["id"]) is False
	with pytest.raises(KeyError):
		store.update_key("missing", "x", "openai", "y")


def test_theme_cycles(tmp_path: Path):
	path = tmp_path / "store.yaml"
	store = SettingsStore(path)
	assert [store.next_theme() for _ in range(3)] == ["light", "dark", "system"]
	store.next_theme()
	assert SettingsStore(path).settings["theme"] == "light"
