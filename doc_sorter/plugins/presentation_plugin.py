#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path
import tempfile

# PIP3 modules
from pptx import Presentation
from pptx.exc import PackageNotFoundError

# local repo modules
from .base import DEFAULT_MAX_CHARS, ExtractedText, ExtractionError, TextPlugin, clean_text
from .document_plugin import convert_with_soffice

#============================================


class PresentationPlugin(TextPlugin):
	"""
	Plugin for presentation files.
	"""

	name = "presentation"
	supported_suffixes: set[str] = {"ppt", "pptx"}

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		ext = path.suffix.lower().lstrip(".")
		if ext == "ppt":
			with tempfile.TemporaryDirectory() as tmp_dir:
				converted = convert_with_soffice(path, "pptx", Path(tmp_dir))
				text = self._read_pptx(converted)
			method = "soffice+python-pptx"
		else:
			text = self._read_pptx(path)
			method = "python-pptx"
		return ExtractedText(
			path=path,
			text=clean_text(text, max_chars),
			plugin_name=self.name,
			method=method,
		)

	#============================================
	def _read_pptx(self, path: Path) -> str:
		try:
			prs = Presentation(str(path))
		except (PackageNotFoundError, KeyError, ValueError) as exc:
			raise ExtractionError(f"Cannot open presentation {path.name}: {exc}") from exc
		text_runs: list[str] = []
		for slide in prs.slides:
			for shape in slide.shapes:
				if shape.has_text_frame:
					text = shape.text_frame.text.strip()
					if text:
						text_runs.append(text)
			if len(text_runs) >= 40:
				break
		return " ".join(text_runs)
