#!/usr/bin/env python3
"""
Persisted prompts, API keys and user settings.

Everything lives in one YAML file under the platform user config folder.
A missing, unreadable or malformed file loads as the defaults.
"""

from __future__ import annotations

# Standard Library
import copy
import logging
import time
from pathlib import Path

# PIP3 modules
import yaml
from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "llm-doc-sorter"
STORE_FILENAME = "store.yaml"
PROMPT_HISTORY_LIMIT = 10
THEMES = ("system", "light", "dark")
DEFAULT_PROMPT_ID = "default-filename"
DEFAULT_PROMPT_TEXT = (
	"Please generate a filename for the document in its original language. "
	"Structure: YYYY MM DD - Sender/Creator - Brief description. "
	"Only output the filename, without the file extension. "
	"Here is the information:"
)
DEFAULTS: dict = {
	"prompts": [
		{
			"id": DEFAULT_PROMPT_ID,
			"title": "Default Filename Prompt",
			"text": DEFAULT_PROMPT_TEXT,
			"history": [DEFAULT_PROMPT_TEXT],
		}
	],
	"api_keys": [],
	"settings": {"theme": "system"},
}

#============================================


def default_store_path() -> Path:
	return Path(user_config_dir(APP_NAME, appauthor=False)) / STORE_FILENAME


def _new_id(prefix: str, records: list[dict]) -> str:
	taken = {record.get("id") for record in records}
	stamp = int(time.time() * 1000)
	while f"{prefix}-{stamp}" in taken:
		stamp += 1
	return f"{prefix}-{stamp}"


#============================================


class SettingsStore:
	"""
	Key-value store for prompts, API keys and settings.
	"""

	#============================================
	def __init__(self, path: Path | None = None) -> None:
		self.path = path or default_store_path()
		self.data = self._load()

	#============================================
	def _load(self) -> dict:
		data = copy.deepcopy(DEFAULTS)
		try:
			with self.path.open("r", encoding="utf-8") as handle:
				loaded = yaml.safe_load(handle)
		except FileNotFoundError:
			return data
		except (OSError, yaml.YAMLError) as exc:
			logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
			return data
		if not isinstance(loaded, dict):
			return data
		for key in ("prompts", "api_keys"):
			if isinstance(loaded.get(key), list):
				data[key] = loaded[key]
		if isinstance(loaded.get("settings"), dict):
			data["settings"].update(loaded["settings"])
		return data

	#============================================
	def save(self) -> None:
		"""
		Write the store back to disk.
		"""
		self.path.parent.mkdir(parents=True, exist_ok=True)
		with self.path.open("w", encoding="utf-8") as handle:
			yaml.safe_dump(self.data, handle, sort_keys=False, allow_unicode=True)

	#============================================
	# prompts
	#============================================

	@property
	def prompts(self) -> list[dict]:
		return self.data["prompts"]

	def get_prompt(self, prompt_id: str) -> dict | None:
		for prompt in self.prompts:
			if prompt.get("id") == prompt_id:
				return prompt
		return None

	def add_prompt(self, title: str, text: str) -> dict:
		"""
		Create a prompt whose history starts with its text.

		Args:
			title: Display title.
			text: Prompt text.

		Returns:
			The new prompt record.
		"""
		title, text = _require_pair(title, text, "Title and text")
		prompt = {"id": _new_id("prompt", self.prompts), "title": title, "text": text, "history": [text]}
		self.prompts.append(prompt)
		self.save()
		return prompt

	def update_prompt(self, prompt_id: str, title: str, text: str) -> dict:
		"""
		Update a prompt, appending to its history when the text changes.

		History keeps the last PROMPT_HISTORY_LIMIT versions.
		"""
		title, text = _require_pair(title, text, "Title and text")
		prompt = self.get_prompt(prompt_id)
		if prompt is None:
			raise KeyError(prompt_id)
		prompt["title"] = title
		if text != prompt.get("text"):
			prompt["text"] = text
			history = prompt.setdefault("history", [])
			history.append(text)
			del history[:-PROMPT_HISTORY_LIMIT]
		self.save()
		return prompt

	def delete_prompt(self, prompt_id: str) -> bool:
		"""
		Delete a prompt. The last remaining prompt is never deleted.

		Returns:
			True when a prompt was removed.
		"""
		if len(self.prompts) <= 1 or self.get_prompt(prompt_id) is None:
			return False
		self.data["prompts"] = [p for p in self.prompts if p.get("id") != prompt_id]
		self.save()
		return True

	def prompt_version(self, prompt_id: str, index: int) -> str:
		prompt = self.get_prompt(prompt_id)
		if prompt is None:
			raise KeyError(prompt_id)
		return prompt.get("history", [])[index]

	#============================================
	# api keys
	#============================================

	@property
	def api_keys(self) -> list[dict]:
		return self.data["api_keys"]

	def get_key(self, key_id: str) -> dict | None:
		for key in self.api_keys:
			if key.get("id") == key_id:
				return key
		return None

	def add_key(self, nickname: str, provider: str, key: str) -> dict:
		nickname, key = _require_pair(nickname, key, "Nickname and key")
		record = {"id": _new_id("key", self.api_keys), "nickname": nickname, "provider": provider, "key": key}
		self.api_keys.append(record)
		self.save()
		return record

	def update_key(self, key_id: str, nickname: str, provider: str, key: str) -> dict:
		nickname, key = _require_pair(nickname, key, "Nickname and key")
		record = self.get_key(key_id)
		if record is None:
			raise KeyError(key_id)
		record.update({"nickname": nickname, "provider": provider, "key": key})
		self.save()
		return record

	def delete_key(self, key_id: str) -> bool:
		if self.get_key(key_id) is None:
			return False
		self.data["api_keys"] = [k for k in self.api_keys if k.get("id") != key_id]
		self.save()
		return True

	#============================================
	# settings
	#============================================

	@property
	def settings(self) -> dict:
		return self.data["settings"]

	def save_settings(self, values: dict) -> None:
		self.settings.update(values)
		self.save()

	def next_theme(self) -> str:
		"""
		Cycle system -> light -> dark and persist the choice.
		"""
		current = self.settings.get("theme", "system")
		index = THEMES.index(current) if current in THEMES else 0
		theme = THEMES[(index + 1) % len(THEMES)]
		self.save_settings({"theme": theme})
		return theme


#============================================


def _require_pair(first: str, second: str, label: str) -> tuple[str, str]:
	first = (first or "").strip()
	second = (second or "").strip()
	if not first or not second:
		raise ValueError(f"{label} cannot be empty.")
	return first, second
