#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# local repo modules
from .base import DEFAULT_MAX_CHARS, ExtractedText, ExtractionError, TextPlugin, clean_text

# PIP3 modules
import pillow_heif
from PIL import Image
import pytesseract

pillow_heif.register_heif_opener()

#============================================


def ocr_image(image: Image.Image, lang: str | None = None) -> str:
	"""
	Run Tesseract on an in-memory image.

	Args:
		image: PIL image.
		lang: Optional Tesseract language string, e.g. "eng+deu".

	Returns:
		Whitespace-collapsed OCR text.
	"""
	try:
		if lang:
			text = pytesseract.image_to_string(image, lang=lang)
		else:
			text = pytesseract.image_to_string(image)
	except pytesseract.TesseractNotFoundError as exc:
		raise ExtractionError("tesseract is not installed") from exc
	except pytesseract.TesseractError as exc:
		raise ExtractionError(f"tesseract failed: {exc}") from exc
	return " ".join(text.split())


#============================================


class ImagePlugin(TextPlugin):
	"""
	Plugin for scanned images.
	"""

	name = "image"
	supported_suffixes: set[str] = {
		"jpg",
		"jpeg",
		"png",
		"heic",
		"tif",
		"tiff",
	}

	#============================================
	def __init__(self, lang: str | None = None) -> None:
		self.lang = lang

	#============================================
	def extract(self, path: Path, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedText:
		try:
			with Image.open(path) as image:
				text = ocr_image(image, self.lang)
		except OSError as exc:
			raise ExtractionError(f"Cannot open image {path.name}: {exc}") from exc
		return ExtractedText(
			path=path,
			text=clean_text(text, max_chars),
			plugin_name=self.name,
			method="tesseract",
		)
