#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path
import tempfile

# local repo modules
from .base import DEFAULT_MAX_CHARS, ExtractedText, ExtractionError, TextPlugin, clean_text
from ..tools import ToolError, run_tool

#============================================


def convert_with_soffice(path: Path, target_ext: str, out_dir: Path) -> Path:
	"""
	Convert a legacy office file with LibreOffice.

	Args:
		path: Source file (doc, ppt).
		target_ext: Output format, e.g. docx.
		out_dir: Folder for the converted file.

	Returns:
		Path of the converted file.
	"""
	try:
		run_tool(
			[
				"soffice",
				"--headless",
				"--convert-to",
				target_ext,
				"--outdir",
				str(out_dir),
				str(path),
			],
			timeout=60,
		)
	except ToolError as exc:
		raise ExtractionError(f"LibreOffice conversion failed for {path.name}: {exc}") from exc
	output_path = out_dir / f"{path.stem}.{target_ext}"
	if not output_path.exists():
		raise ExtractionError(f"LibreOffice conversion produced no output for {path.name}")
	return output_path


#============================================


class DocumentPlugin(TextPlugin):
	"""
	Plugin for word-processor documents, read through pandoc.
	"""

	name = "document"
	supported_suffixes: set[str] = {"doc", "docx", "odt", "rtf"}

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		"""
		Extract plain text from a document.
		"""
		ext = path.suffix.lower().lstrip(".")
		if ext == "doc":
			with tempfile.TemporaryDirectory() as tmp_dir:
				converted = convert_with_soffice(path, "docx", Path(tmp_dir))
				text = self._pandoc_plain(converted)
			method = "soffice+pandoc"
		else:
			text = self._pandoc_plain(path)
			method = "pandoc"
		return ExtractedText(
			path=path,
			text=clean_text(text, max_chars),
			plugin_name=self.name,
			method=method,
		)

	#============================================
	def _pandoc_plain(self, path: Path) -> str:
		try:
			return run_tool(["pandoc", "--to", "plain", "--wrap", "none", str(path)], timeout=60)
		except ToolError as exc:
			raise ExtractionError(f"pandoc failed for {path.name}: {exc}") from exc
