#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import dataclass, fields
from pathlib import Path
import json

# PIP3 modules
import yaml

#============================================


DEFAULT_MAX_DEPTH = 5
DEFAULT_OLLAMA_URL = "http://localhost:11434"
PROVIDERS = ("gemini", "openai", "anthropic", "ollama")


#============================================


@dataclass(slots=True)
class AppConfig:
	"""
	Runtime configuration settings.

	Attributes:
		provider: LLM provider (gemini, openai, anthropic, ollama).
		model: Model id for the provider.
		api_key: Provider API key (unused for ollama).
		prompt_text: Instruction sent ahead of the document text.
		sort_prompt: Optional extra instruction for folder suggestions.
		output_folder: Where renamed files are written.
		save_in_place: Write renamed files next to the source instead.
		archive_original: Keep a copy of the source in <output>/originals.
		convert_to_pdfa: Convert PDFs to PDF/A with Ghostscript.
		max_depth: Folder index depth bound for sorting.
		follow_symlinks: Descend symlinked folders while indexing.
		dry_run: Only print planned work.
		verbose: Verbose logging.
		ollama_url: Base URL of the local Ollama service.
	"""
	provider: str = "gemini"
	model: str = ""
	api_key: str = ""
	prompt_text: str = ""
	sort_prompt: str = ""
	output_folder: Path | None = None
	save_in_place: bool = False
	archive_original: bool = False
	convert_to_pdfa: bool = True
	max_depth: int = DEFAULT_MAX_DEPTH
	follow_symlinks: bool = False
	dry_run: bool = False
	verbose: bool = False
	ollama_url: str = DEFAULT_OLLAMA_URL

	#============================================
	def normalized_output_folder(self) -> Path:
		"""
		Normalize output folder.

		Returns:
			Normalized Path.
		"""
		if self.output_folder is None:
			raise RuntimeError("output_folder is not set.")
		return Path(self.output_folder).expanduser().resolve()

	#============================================
	def apply_overrides(self, values: dict) -> None:
		"""
		Copy known keys from a mapping onto this config.

		Args:
			values: Mapping loaded from a user config file.
		"""
		known = {item.name for item in fields(self)}
		for key, value in values.items():
			if key not in known or value is None:
				continue
			if key == "output_folder":
				value = Path(str(value)).expanduser()
			setattr(self, key, value)


#============================================


def load_user_config(config_path: Path | None) -> dict:
	"""
	Load user configuration from yaml or json.

	Args:
		config_path: Path to config file.

	Returns:
		Dictionary of loaded values or empty dict.
	"""
	if not config_path:
		return {}
	if not config_path.exists():
		return {}
	if config_path.suffix.lower() in {".yml", ".yaml"}:
		with config_path.open("r", encoding="utf-8") as handle:
			loaded = yaml.safe_load(handle)
			return loaded or {}
	with config_path.open("r", encoding="utf-8") as handle:
		return json.load(handle)
