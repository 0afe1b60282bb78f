#!/usr/bin/env python3
"""
Safe move and copy utilities.
"""

# Standard Library
import shutil
from pathlib import Path

#============================================


def dedupe_path(target: Path) -> Path:
	"""
	Append counter to avoid collisions.

	Args:
		target: Desired target path.

	Returns:
		Unique target path.
	"""
	counter = 1
	candidate = target
	while candidate.exists():
		candidate = candidate.with_name(f"{target.stem} ({counter}){target.suffix}")
		counter += 1
	return candidate


#============================================


def move_into(source: Path, destination_dir: Path) -> Path:
	"""
	Move a file into a folder, keeping its name.

	Args:
		source: File to move.
		destination_dir: Existing folder.

	Returns:
		Final path of the moved file.

	Raises:
		FileNotFoundError: source is missing.
		NotADirectoryError: destination_dir is not a folder.
	"""
	if not source.is_file():
		raise FileNotFoundError(f"No such file: {source}")
	if not destination_dir.is_dir():
		raise NotADirectoryError(f"Not a folder: {destination_dir}")
	target = destination_dir / source.name
	if target.resolve() == source.resolve():
		return source
	dest = dedupe_path(target)
	try:
		source.rename(dest)
	except OSError:
		# cross-device moves
		shutil.move(str(source), str(dest))
	return dest
