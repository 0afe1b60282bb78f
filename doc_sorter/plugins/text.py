#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# local repo modules
from .base import DEFAULT_MAX_CHARS, ExtractedText, ExtractionError, TextPlugin, clean_text

#============================================


class TextDocumentPlugin(TextPlugin):
	"""
	Plugin for plain text files.
	"""

	name = "text"
	supported_suffixes: set[str] = {"txt", "md"}

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		"""
		Read the file as UTF-8, ignoring undecodable bytes.

		Args:
			path: File path.
			max_chars: Truncation limit.

		Returns:
			ExtractedText with the file text.
		"""
		try:
			text_blob = path.read_text(encoding="utf-8", errors="ignore")
		except OSError as exc:
			raise ExtractionError(f"Cannot read {path.name}: {exc}") from exc
		return ExtractedText(
			path=path,
			text=clean_text(text_blob, max_chars),
			plugin_name=self.name,
			method="read",
		)
