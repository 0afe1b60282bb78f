"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

import pytest  # noqa: E402

from doc_sorter.llm_parsers import RenameResult, SortResult  # noqa: E402
from doc_sorter.plugins.base import ExtractedText, PluginRegistry, TextPlugin  # noqa: E402


class DummyTransport:
	"""
	Test-only transport that replays queued responses.
	"""

	name = "Dummy"

	def __init__(self, responses=None, error: Exception | None = None):
		self.responses = list(responses or [])
		self.error = error
		self.calls: list[tuple[str, str]] = []

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		self.calls.append((purpose, prompt))
		if self.error:
			raise self.error
		if not self.responses:
			raise RuntimeError("No response queued")
		return self.responses.pop(0)


class StubLLM:
	"""
	Test-only stub LLM for pipeline and sorter tests.
	"""

	def __init__(self, names=None, folders=None) -> None:
		self.names = dict(names or {})
		self.folders = dict(folders or {})
		self.rename_calls: list[str] = []

	def rename(self, current_name: str, text: str, instructions: str) -> RenameResult:
		self.rename_calls.append(current_name)
		value = self.names.get(current_name, "stub name")
		if isinstance(value, Exception):
			raise value
		return RenameResult(new_name=value, raw_text="")

	def suggest_folders(self, file_name, description, candidates, limit=3, instructions=""):
		value = self.folders.get(file_name, [])
		if isinstance(value, Exception):
			raise value
		return SortResult(suggestions=[c for c in value if c in candidates][:limit])


class StubPlugin(TextPlugin):
	"""
	Reads files as text without any external tools.
	"""

	name = "stub"
	supported_suffixes = {"txt", "pdf", "md"}

	def extract(self, path: Path, max_chars: int = 4000) -> ExtractedText:
		return ExtractedText(path=path, text=path.read_text(encoding="utf-8")[:max_chars], plugin_name=self.name, method="stub")


@pytest.fixture
def stub_registry() -> PluginRegistry:
	registry = PluginRegistry()
	registry.register(StubPlugin())
	return registry
