#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path
import logging

# PIP3 modules
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

# local repo modules
from .base import DEFAULT_MAX_CHARS, ExtractedText, ExtractionError, TextPlugin, clean_text
from .image_plugin import ocr_image
from ..tools import ToolError, run_tool, tool_available

logger = logging.getLogger(__name__)

#============================================


class PDFPlugin(TextPlugin):
	"""
	PDF text extractor.

	Uses the text layer when there is one and falls back to OCR of the
	rendered pages for scans.
	"""

	name = "pdf"
	supported_suffixes: set[str] = {"pdf"}

	#============================================
	def __init__(self, max_pages: int = 3, dpi: int = 200, lang: str | None = None) -> None:
		self.max_pages = max_pages
		self.dpi = dpi
		self.lang = lang

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		"""
		Extract text from the first pages of a PDF.

		Args:
			path: File path.
			max_chars: Truncation limit.

		Returns:
			ExtractedText populated with text and page_count.
		"""
		result = ExtractedText(path=path, plugin_name=self.name)
		text = self._read_with_pdftotext(path)
		if text:
			result.method = "pdftotext"
		else:
			text = self._read_with_pypdf(path, result)
			if text:
				result.method = "pypdf"
		if not text:
			text = self._read_with_ocr(path)
			result.method = "tesseract"
		result.text = clean_text(text, max_chars)
		return result

	#============================================
	def _read_with_pdftotext(self, path: Path) -> str:
		if not tool_available("pdftotext"):
			return ""
		try:
			output = run_tool(
				["pdftotext", "-f", "1", "-l", str(self.max_pages), "-enc", "UTF-8", str(path), "-"],
				timeout=60,
			)
		except ToolError as exc:
			logger.info("pdftotext failed for %s: %s", path.name, exc)
			return ""
		return output.strip()

	#============================================
	def _read_with_pypdf(self, path: Path, result: ExtractedText) -> str:
		try:
			with path.open("rb") as handle:
				reader = PdfReader(handle)
				pages = reader.pages
				result.extra["page_count"] = len(pages)
				text_bits: list[str] = []
				for page in pages[: self.max_pages]:
					extracted = page.extract_text()
					if extracted:
						text_bits.append(extracted.strip())
		except (OSError, PdfReadError) as exc:
			raise ExtractionError(f"Cannot read PDF {path.name}: {exc}") from exc
		return " ".join(text_bits).strip()

	#============================================
	def _read_with_ocr(self, path: Path) -> str:
		"""
		Render the first pages and OCR them.
		"""
		try:
			images = convert_from_path(
				str(path),
				first_page=1,
				last_page=self.max_pages,
				dpi=self.dpi,
			)
		except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as exc:
			raise ExtractionError(f"Cannot render PDF {path.name}: {exc}") from exc
		ocr_bits: list[str] = []
		for page_idx, image in enumerate(images, start=1):
			ocr_text = ocr_image(image, self.lang)
			if ocr_text:
				ocr_bits.append(f"Page {page_idx}: {ocr_text}")
		return " | ".join(ocr_bits)
