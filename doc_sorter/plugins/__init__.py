#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

from .base import (
	DEFAULT_MAX_CHARS,
	ExtractedText,
	ExtractionError,
	PluginRegistry,
	TextPlugin,
	UnsupportedFileError,
)
from .document_plugin import DocumentPlugin
from .image_plugin import ImagePlugin
from .pdf import PDFPlugin
from .presentation_plugin import PresentationPlugin
from .text import TextDocumentPlugin

__all__ = [
	"ExtractedText",
	"ExtractionError",
	"PluginRegistry",
	"TextPlugin",
	"UnsupportedFileError",
	"build_registry",
	"extract_text",
]


def build_registry(lang: str | None = None) -> PluginRegistry:
	"""
	Build default plugin registry.

	Args:
		lang: Optional Tesseract language string for OCR plugins.

	Returns:
		PluginRegistry with registered plugins.
	"""
	registry = PluginRegistry()
	registry.register(PDFPlugin(lang=lang))
	registry.register(DocumentPlugin())
	registry.register(PresentationPlugin())
	registry.register(ImagePlugin(lang=lang))
	registry.register(TextDocumentPlugin())
	return registry


def extract_text(
	path: Path,
	registry: PluginRegistry | None = None,
	max_chars: int = DEFAULT_MAX_CHARS,
) -> ExtractedText:
	"""
	Extract text from a file with the first plugin that supports it.
	"""
	active = registry or build_registry()
	plugin = active.for_path(path)
	return plugin.extract(path, max_chars=max_chars)
