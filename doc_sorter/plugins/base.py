#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

#============================================


DEFAULT_MAX_CHARS = 4000


class UnsupportedFileError(LookupError):
	"""
	Raised when no plugin handles a file extension.
	"""


class ExtractionError(RuntimeError):
	"""
	Raised when text extraction fails for a supported file.
	"""


#============================================


@dataclass(slots=True)
class ExtractedText:
	"""
	Text pulled out of a document.

	Attributes:
		path: Source file path.
		text: Whitespace-collapsed text, possibly truncated.
		plugin_name: Name of plugin used.
		method: Tool or library that produced the text.
		extra: Extra details such as page_count.
	"""
	path: Path
	text: str = ""
	plugin_name: str = "base"
	method: str = ""
	extra: dict[str, object] = field(default_factory=dict)

	#============================================
	def excerpt(self, limit: int = 240) -> str:
		"""
		Short single-line preview of the text.

		Args:
			limit: Maximum characters.

		Returns:
			Preview string.
		"""
		if len(self.text) <= limit:
			return self.text
		return self.text[: limit - 3].rstrip() + "..."


#============================================


def clean_text(text: str | None, max_chars: int = DEFAULT_MAX_CHARS) -> str:
	if not text:
		return ""
	flattened = " ".join(text.split())
	return flattened[:max_chars]


#============================================


class TextPlugin:
	"""
	Base interface for plugins.
	"""

	name: str = "base"
	supported_suffixes: set[str] = set()

	#============================================
	def supports(self, path: Path) -> bool:
		"""
		Determine if this plugin can handle the file.

		Args:
			path: File path.

		Returns:
			True if supported.
		"""
		return path.suffix.lower().lstrip(".") in self.supported_suffixes

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		"""
		Extract text for the file.

		Args:
			path: File path.
			max_chars: Truncation limit.

		Returns:
			ExtractedText payload.
		"""
		return ExtractedText(path=path, plugin_name=self.name)


class PluginRegistry:
	"""
	Registry for extraction plugins.
	"""

	#============================================
	def __init__(self) -> None:
		self._plugins: list[TextPlugin] = []

	#============================================
	def register(self, plugin: TextPlugin) -> None:
		"""
		Register a plugin.

		Args:
			plugin: Plugin instance.
		"""
		self._plugins.append(plugin)

	#============================================
	def for_path(self, path: Path) -> TextPlugin:
		"""
		Find the first plugin that supports the path.

		Args:
			path: File path.

		Returns:
			Plugin instance.
		"""
		for plugin in self._plugins:
			if plugin.supports(path):
				return plugin
		raise UnsupportedFileError(f"No plugin registered for {path.suffix or 'unknown'}")

	#============================================
	def supported_suffixes(self) -> set[str]:
		suffixes: set[str] = set()
		for plugin in self._plugins:
			suffixes.update(plugin.supported_suffixes)
		return suffixes

	#============================================
	def plugins(self) -> list[TextPlugin]:
		return list(self._plugins)
