#!/usr/bin/env python3
"""
Sorting workflow: index a destination tree, then ask the LLM where each
incoming file belongs.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator
import logging

# local repo modules
from .config import AppConfig
from .fileops import move_into
from .indexer import FolderIndex, ProgressCallback, index_folders
from .llm_engine import LLMEngine
from .plugins import ExtractionError, PluginRegistry, UnsupportedFileError, build_registry
from .tools import ToolError

logger = logging.getLogger(__name__)
_DESCRIPTION_CHARS = 1500

#============================================


@dataclass(slots=True)
class SortSuggestion:
	"""
	Destination suggestions for one incoming file.

	Attributes:
		file_path: Incoming file.
		suggestions: Candidate folders, best first.
		error: Why no suggestion could be made, if any.
	"""
	file_path: Path
	suggestions: list[Path] = field(default_factory=list)
	error: str = ""


#============================================


def list_input_files(input_folder: Path) -> list[Path]:
	"""
	Regular, non-hidden files directly inside input_folder, by name.
	"""
	files = [
		path
		for path in input_folder.iterdir()
		if path.is_file() and not path.name.startswith(".")
	]
	return sorted(files, key=lambda path: path.name)


#============================================


class Sorter:
	"""
	Suggests destination folders from a pre-built folder index.
	"""

	#============================================
	def __init__(
		self,
		config: AppConfig,
		llm: LLMEngine | None = None,
		registry: PluginRegistry | None = None,
	) -> None:
		if not llm:
			raise RuntimeError("Sorter requires a configured LLM backend.")
		self.config = config
		self.llm = llm
		self.registry = registry or build_registry()
		self.index: FolderIndex | None = None

	#============================================
	def index_target(self, root: Path, progress: ProgressCallback | None = None) -> FolderIndex:
		"""
		Build the destination catalog for root.

		Args:
			root: Destination tree root.
			progress: Optional callback(count, path).

		Returns:
			FolderIndex, also kept on the sorter.
		"""
		self.index = index_folders(
			root,
			self.config.max_depth,
			follow_symlinks=self.config.follow_symlinks,
			progress=progress,
		)
		for skipped in self.index.skipped:
			logger.warning("Not indexed (%s): %s", skipped.kind, skipped.path)
		return self.index

	#============================================
	def describe(self, path: Path) -> str:
		"""
		Short description of a file for the sorting prompt.
		"""
		try:
			extracted = self.registry.for_path(path).extract(path, max_chars=_DESCRIPTION_CHARS)
		except UnsupportedFileError:
			return f"File named {path.name}"
		except (ExtractionError, ToolError) as exc:
			logger.info("No description for %s: %s", path.name, exc)
			return f"File named {path.name}"
		return extracted.text or f"File named {path.name}"

	#============================================
	def suggest(self, input_folder: Path, limit: int = 3) -> Iterator[SortSuggestion]:
		"""
		Yield destination suggestions for each file in input_folder.

		Args:
			input_folder: Folder holding the files to sort.
			limit: Maximum suggestions per file.

		Yields:
			SortSuggestion per file, in name order.
		"""
		if self.index is None:
			raise RuntimeError("Index a target folder before sorting.")
		candidates = [str(folder) for folder in self.index.folders]
		for path in list_input_files(input_folder):
			suggestion = SortSuggestion(file_path=path)
			try:
				result = self.llm.suggest_folders(
					path.name,
					self.describe(path),
					candidates,
					limit=limit,
					instructions=self.config.sort_prompt,
				)
			except Exception as exc:
				logger.info("Sorting failed for %s", path, exc_info=True)
				suggestion.error = f"{exc.__class__.__name__}: {exc}"
			else:
				suggestion.suggestions = [Path(folder) for folder in result.suggestions]
				if not suggestion.suggestions:
					suggestion.error = "No matching folder suggested"
			yield suggestion

	#============================================
	def move(self, source: Path, destination: Path) -> Path:
		"""
		Move source into one of the suggested folders.
		"""
		final = move_into(source, destination)
		logger.info("Moved %s -> %s", source, final)
		return final
