#!/usr/bin/env python3
"""
External command-line tools used by the renamer.
"""

from __future__ import annotations

# Standard Library
import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("gs", "tesseract", "pdftotext", "exiftool", "pandoc")
DEFAULT_TIMEOUT = 120

#============================================


class ToolError(RuntimeError):
	"""
	Raised when an external tool is missing, fails or times out.
	"""

	def __init__(self, tool: str, message: str, stderr: str = "") -> None:
		super().__init__(f"{tool}: {message}")
		self.tool = tool
		self.stderr = stderr


#============================================


def tool_available(name: str) -> bool:
	return shutil.which(name) is not None


def check_dependencies(tools: tuple[str, ...] = REQUIRED_TOOLS) -> list[str]:
	"""
	List required tools that are not on PATH.

	Returns:
		Missing tool names, in the order they were checked.
	"""
	return [name for name in tools if not tool_available(name)]


def install_hint(missing: list[str]) -> str:
	if not missing:
		return ""
	return f"brew install {' '.join(missing)}"


#============================================


def run_tool(args: list[str], timeout: int = DEFAULT_TIMEOUT) -> str:
	"""
	Run an external tool and return its stdout.

	Args:
		args: Command and arguments; args[0] is looked up on PATH.
		timeout: Seconds before the process is killed.

	Returns:
		Decoded stdout.

	Raises:
		ToolError: Tool missing, non-zero exit, or timeout.
	"""
	tool = args[0]
	executable = shutil.which(tool)
	if not executable:
		raise ToolError(tool, "not found on PATH")
	logger.info("Running %s", " ".join(args))
	try:
		completed = subprocess.run(
			[executable, *args[1:]],
			capture_output=True,
			text=True,
			errors="replace",
			timeout=timeout,
			check=False,
		)
	except subprocess.TimeoutExpired as exc:
		raise ToolError(tool, f"timed out after {timeout}s") from exc
	if completed.returncode != 0:
		stderr = (completed.stderr or "").strip()
		raise ToolError(tool, f"exit status {completed.returncode}: {stderr[:300]}", stderr)
	return completed.stdout
