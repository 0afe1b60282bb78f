#!/usr/bin/env python3
"""
Depth-limited folder indexer for the sorter destination catalog.

The root is scanned at depth 0. A folder found while scanning depth k is
recorded, and is itself scanned only when k + 1 < max_depth, so max_depth 0
scans nothing and returns nothing.
"""

from __future__ import annotations

# Standard Library
import asyncio
import errno
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Callable, Iterator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Path], None]

#============================================


@dataclass(slots=True, frozen=True)
class SkippedFolder:
	"""
	A folder whose listing failed during a run.

	Attributes:
		path: Folder that could not be listed.
		kind: One of permission, missing, not_directory, io.
		message: Text of the underlying OSError.
	"""
	path: Path
	kind: str
	message: str


#============================================


@dataclass(slots=True)
class FolderIndex:
	"""
	Result of one indexing run.

	Attributes:
		root: Root the run started from.
		max_depth: Depth bound used for the run.
		folders: Folder paths in pre-order.
		skipped: Folders that failed to list.
	"""
	root: Path
	max_depth: int
	folders: list[Path] = field(default_factory=list)
	skipped: list[SkippedFolder] = field(default_factory=list)

	def __len__(self) -> int:
		return len(self.folders)

	def __iter__(self) -> Iterator[Path]:
		return iter(self.folders)

	#============================================
	def relative_to_root(self) -> list[str]:
		"""
		Folder paths relative to the root, in result order.

		Returns:
			List of POSIX-style relative path strings.
		"""
		return [folder.relative_to(self.root).as_posix() for folder in self.folders]


#============================================


def classify_os_error(exc: OSError) -> str:
	"""
	Map a listing error to a diagnostic kind.
	"""
	if isinstance(exc, PermissionError):
		return "permission"
	if isinstance(exc, FileNotFoundError):
		return "missing"
	if isinstance(exc, NotADirectoryError):
		return "not_directory"
	if exc.errno in (errno.EACCES, errno.EPERM):
		return "permission"
	return "io"


#============================================


def validate_index_args(root: object, max_depth: object) -> Path:
	"""
	Check caller arguments before any filesystem access.

	Args:
		root: Root folder as str or os.PathLike.
		max_depth: Non-negative integer depth bound.

	Returns:
		Root as a Path.

	Raises:
		TypeError: root is not path-like, or max_depth is not an int.
		ValueError: root is empty, or max_depth is negative.
	"""
	if root is None or not isinstance(root, (str, os.PathLike)):
		raise TypeError(f"root must be a str or os.PathLike, got {type(root).__name__}")
	root_text = os.fspath(root)
	if isinstance(root_text, bytes):
		raise TypeError("root must be a text path, not bytes")
	if not root_text:
		raise ValueError("root must not be empty")
	if isinstance(max_depth, bool) or not isinstance(max_depth, int):
		raise TypeError(f"max_depth must be an int, got {type(max_depth).__name__}")
	if max_depth < 0:
		raise ValueError(f"max_depth must be >= 0, got {max_depth}")
	return Path(root_text)


#============================================


def _scan_directory(path: Path, follow_symlinks: bool) -> list[Path]:
	"""
	List the immediate child folders of path, sorted by name.

	Raises OSError when the folder cannot be listed. The listing is fully
	materialized, so a failure part way through drops the whole folder.
	"""
	names: list[str] = []
	with os.scandir(path) as entries:
		for entry in entries:
			if entry.is_dir(follow_symlinks=follow_symlinks):
				names.append(entry.name)
	names.sort()
	return [path / name for name in names]


#============================================


class _Walk:
	"""
	Traversal state shared by the sync and async entry points.

	Stack frames are (folder, depth, emit). A folder is emitted when its
	frame is popped and scanned right after, before any later sibling, which
	keeps the output pre-order. Children are pushed in reverse so the first
	by name is popped first. The root frame is scanned but never emitted.
	"""

	def __init__(
		self,
		root: Path,
		max_depth: int,
		follow_symlinks: bool,
		skipped: list[SkippedFolder] | None,
	) -> None:
		self.max_depth = max_depth
		self.follow_symlinks = follow_symlinks
		self.skipped: list[SkippedFolder] = skipped if skipped is not None else []
		self.stack: list[tuple[Path, int, bool]] = [(root, 0, False)]
		self._visited: set[str] = set()

	#============================================
	def pop(self) -> tuple[Path, int, bool]:
		return self.stack.pop()

	#============================================
	def should_scan(self, path: Path, depth: int) -> bool:
		if depth >= self.max_depth:
			return False
		if not self.follow_symlinks:
			return True
		# symlink cycles: scan each real folder once
		canonical = os.path.realpath(path)
		if canonical in self._visited:
			logger.debug("Already scanned %s; not descending again", path)
			return False
		self._visited.add(canonical)
		return True

	#============================================
	def record_failure(self, path: Path, exc: OSError) -> None:
		kind = classify_os_error(exc)
		self.skipped.append(SkippedFolder(path=path, kind=kind, message=str(exc)))
		logger.info("Skipping unreadable folder %s (%s)", path, kind)

	#============================================
	def push_children(self, children: list[Path], depth: int) -> None:
		for child in reversed(children):
			self.stack.append((child, depth + 1, True))


#============================================


def iter_folders(
	root: str | os.PathLike,
	max_depth: int,
	*,
	follow_symlinks: bool = False,
	skipped: list[SkippedFolder] | None = None,
) -> Iterator[Path]:
	"""
	Yield folders under root in pre-order.

	Args:
		root: Folder to start from.
		max_depth: Exclusive bound on scan depth.
		follow_symlinks: Record and descend symlinked folders.
		skipped: Optional list that receives SkippedFolder diagnostics.

	Yields:
		Folder paths as they are discovered.
	"""
	root_path = validate_index_args(root, max_depth)
	walk = _Walk(root_path, max_depth, follow_symlinks, skipped)
	while walk.stack:
		path, depth, emit = walk.pop()
		if emit:
			yield path
		if not walk.should_scan(path, depth):
			continue
		try:
			children = _scan_directory(path, follow_symlinks)
		except OSError as exc:
			walk.record_failure(path, exc)
			continue
		walk.push_children(children, depth)


#============================================


async def aiter_folders(
	root: str | os.PathLike,
	max_depth: int,
	*,
	follow_symlinks: bool = False,
	skipped: list[SkippedFolder] | None = None,
) -> AsyncIterator[Path]:
	"""
	Async variant of iter_folders.

	Each listing runs in a worker thread and is awaited before the next one
	starts, so the order matches iter_folders exactly.
	"""
	root_path = validate_index_args(root, max_depth)
	walk = _Walk(root_path, max_depth, follow_symlinks, skipped)
	while walk.stack:
		path, depth, emit = walk.pop()
		if emit:
			yield path
		if not walk.should_scan(path, depth):
			continue
		try:
			children = await asyncio.to_thread(_scan_directory, path, follow_symlinks)
		except OSError as exc:
			walk.record_failure(path, exc)
			continue
		walk.push_children(children, depth)


#============================================


def index_folders(
	root: str | os.PathLike,
	max_depth: int,
	*,
	follow_symlinks: bool = False,
	progress: ProgressCallback | None = None,
) -> FolderIndex:
	"""
	Collect every folder under root reachable within max_depth scan levels.

	Unreadable folders never abort the run: they stay in the result when
	their parent listed them, their subtree is left out, and a SkippedFolder
	entry says why.

	Args:
		root: Folder to start from.
		max_depth: Exclusive bound on scan depth. 0 returns nothing.
		follow_symlinks: Record and descend symlinked folders.
		progress: Optional callback(count, path) run for each folder found.

	Returns:
		FolderIndex with folders in pre-order and skip diagnostics.
	"""
	root_path = validate_index_args(root, max_depth)
	result = FolderIndex(root=root_path, max_depth=max_depth)
	for folder in iter_folders(
		root_path,
		max_depth,
		follow_symlinks=follow_symlinks,
		skipped=result.skipped,
	):
		result.folders.append(folder)
		if progress:
			progress(len(result.folders), folder)
	return result


#============================================


async def index_folders_async(
	root: str | os.PathLike,
	max_depth: int,
	*,
	follow_symlinks: bool = False,
	progress: ProgressCallback | None = None,
) -> FolderIndex:
	"""
	Awaitable index_folders. Wrap in asyncio.wait_for to bound latency.
	"""
	root_path = validate_index_args(root, max_depth)
	result = FolderIndex(root=root_path, max_depth=max_depth)
	async for folder in aiter_folders(
		root_path,
		max_depth,
		follow_symlinks=follow_symlinks,
		skipped=result.skipped,
	):
		result.folders.append(folder)
		if progress:
			progress(len(result.folders), folder)
	return result
