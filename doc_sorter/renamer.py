#!/usr/bin/env python3
"""
Sequential rename pipeline: extract text -> LLM filename -> write output.

Files are handled strictly one at a time, in input order, and each step is
reported as a FileStatus event so a front end can show per-file progress.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator
import logging
import shutil

# local repo modules
from .config import AppConfig
from .fileops import dedupe_path
from .llm_engine import LLMEngine
from .plugins import ExtractionError, PluginRegistry, build_registry
from .tools import ToolError, run_tool, tool_available

logger = logging.getLogger(__name__)

QUEUED = "Queued"
PROCESSING = "Processing"
DONE = "Done"
ERROR = "Error"
ORIGINALS_FOLDER = "originals"
# formats exiftool can write a Title tag to
_EXIFTOOL_WRITABLE = {"pdf", "jpg", "jpeg", "png", "tif", "tiff"}

#============================================


@dataclass(slots=True, frozen=True)
class FileStatus:
	"""
	One progress event for one file.

	Attributes:
		path: Source file.
		status: Queued, Processing, Done or Error.
		message: Final path when Done, reason when Error.
	"""
	path: Path
	status: str
	message: str = ""


#============================================


def convert_to_pdfa(source: Path, target: Path) -> None:
	"""
	Write a PDF/A-2b copy of source to target with Ghostscript.
	"""
	run_tool(
		[
			"gs",
			"-dPDFA=2",
			"-dBATCH",
			"-dNOPAUSE",
			"-dNOOUTERSAVE",
			"-dQUIET",
			"-sColorConversionStrategy=RGB",
			"-dPDFACompatibilityPolicy=1",
			"-sDEVICE=pdfwrite",
			f"-sOutputFile={target}",
			str(source),
		],
		timeout=300,
	)


def stamp_title(path: Path, title: str) -> bool:
	"""
	Set the document Title metadata with exiftool when possible.

	Returns:
		True when the title was written.
	"""
	if path.suffix.lower().lstrip(".") not in _EXIFTOOL_WRITABLE:
		return False
	if not tool_available("exiftool"):
		return False
	try:
		run_tool(["exiftool", "-overwrite_original", "-q", f"-Title={title}", str(path)], timeout=60)
	except ToolError as exc:
		logger.warning("Could not set title on %s: %s", path.name, exc)
		return False
	return True


#============================================


class RenamePipeline:
	"""
	Renames documents from their content.
	"""

	#============================================
	def __init__(
		self,
		config: AppConfig,
		llm: LLMEngine | None = None,
		registry: PluginRegistry | None = None,
	) -> None:
		if not llm:
			raise RuntimeError("RenamePipeline requires a configured LLM backend.")
		if not config.save_in_place and config.output_folder is None:
			raise ValueError("An output folder is required unless saving in place.")
		self.config = config
		self.llm = llm
		self.registry = registry or build_registry()

	#============================================
	def process(self, files: list[Path]) -> Iterator[FileStatus]:
		"""
		Process files one by one, yielding status events.

		Every file is reported Queued first, then Processing and finally
		Done or Error. An error on one file does not stop the queue.

		Args:
			files: Source files.

		Yields:
			FileStatus events in order.
		"""
		for path in files:
			yield FileStatus(path=path, status=QUEUED)
		for path in files:
			yield FileStatus(path=path, status=PROCESSING)
			try:
				final_path = self.process_one(path)
			except Exception as exc:
				logger.info("Rename failed for %s", path, exc_info=True)
				yield FileStatus(path=path, status=ERROR, message=f"{exc.__class__.__name__}: {exc}")
				continue
			yield FileStatus(path=path, status=DONE, message=str(final_path))

	#============================================
	def process_one(self, path: Path) -> Path:
		"""
		Rename one file.

		Args:
			path: Source file.

		Returns:
			Final path of the renamed file (planned path when dry_run).
		"""
		if not path.is_file():
			raise FileNotFoundError(f"No such file: {path}")
		extracted = self.registry.for_path(path).extract(path)
		if not extracted.text:
			raise ExtractionError(f"No text could be extracted from {path.name}")
		logger.info("Extracted %d chars from %s via %s", len(extracted.text), path.name, extracted.method)
		result = self.llm.rename(path.name, extracted.text, self.config.prompt_text)
		target = self.target_path(path, result.new_name)
		if target == path or self.config.dry_run:
			return target
		target.parent.mkdir(parents=True, exist_ok=True)
		self._write_output(path, target)
		stamp_title(target, result.new_name)
		try:
			if self.config.archive_original:
				self._archive(path)
			else:
				path.unlink()
		except OSError:
			# source is still in place; drop the copy so a retry starts clean
			target.unlink(missing_ok=True)
			raise
		return target

	#============================================
	def target_path(self, path: Path, new_stem: str) -> Path:
		"""
		Build a collision-free destination for the renamed file.
		"""
		folder = path.parent if self.config.save_in_place else self.config.normalized_output_folder()
		candidate = folder / f"{new_stem}{path.suffix.lower()}"
		if candidate.exists() and candidate.resolve() == path.resolve():
			return path
		return dedupe_path(candidate)

	#============================================
	def _write_output(self, source: Path, target: Path) -> None:
		is_pdf = source.suffix.lower() == ".pdf"
		if is_pdf and self.config.convert_to_pdfa:
			if tool_available("gs"):
				convert_to_pdfa(source, target)
				return
			logger.warning("Ghostscript not found; copying %s without PDF/A conversion", source.name)
		shutil.copy2(source, target)

	#============================================
	def _archive(self, source: Path) -> Path:
		if self.config.save_in_place:
			originals = source.parent / ORIGINALS_FOLDER
		else:
			originals = self.config.normalized_output_folder() / ORIGINALS_FOLDER
		originals.mkdir(parents=True, exist_ok=True)
		dest = dedupe_path(originals / source.name)
		shutil.move(str(source), str(dest))
		return dest
