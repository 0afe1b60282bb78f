#!/usr/bin/env python3
"""
Provider-agnostic prompt builders.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass

# local repo modules
from .llm_utils import _prompt_excerpt, _sanitize_prompt_text

#============================================


@dataclass(slots=True)
class RenameRequest:
	instructions: str
	current_name: str
	text: str
	extension: str = ""


@dataclass(slots=True)
class SortRequest:
	file_name: str
	description: str
	candidates: list[str]
	limit: int = 3
	instructions: str = ""


RENAME_EXAMPLE_OUTPUT = "<new_name>2024 03 18 - ACME GmbH - Invoice 4711</new_name>"
SORT_EXAMPLE_OUTPUT = (
	"<folder>/path/to/best/folder</folder>\n"
	"<folder>/path/to/second/folder</folder>"
)


def build_rename_prompt(req: RenameRequest) -> str:
	lines: list[str] = []
	lines.append(req.instructions.strip())
	lines.append("Return only the tag shown below with the filename inside.")
	lines.append("Do not add the file extension. Do not include code fences.")
	lines.append(RENAME_EXAMPLE_OUTPUT)
	lines.append(f"current_name: {req.current_name}")
	if req.extension:
		lines.append(f"extension: {req.extension}")
	content = _sanitize_prompt_text(req.text, max_chars=3000)
	if content:
		lines.append("document_text:")
		lines.append(content)
	else:
		lines.append("document_text: (no text could be extracted)")
	return "\n".join(lines)


def build_rename_prompt_minimal(req: RenameRequest) -> str:
	lines: list[str] = []
	lines.append(req.instructions.strip())
	lines.append("Return only the tag shown below with the filename inside.")
	lines.append(RENAME_EXAMPLE_OUTPUT)
	lines.append(f"current_name: {req.current_name}")
	excerpt = _prompt_excerpt(req.text)
	if excerpt:
		lines.append(f"excerpt: {excerpt}")
	return "\n".join(lines)


def build_sort_prompt(req: SortRequest) -> str:
	lines: list[str] = []
	if req.instructions:
		lines.append(req.instructions.strip())
	lines.append(
		f"Sorting mode: pick up to {req.limit} destination folders for the file, best first."
	)
	lines.append("Choose only from the candidate folders listed below, copied exactly.")
	lines.append(f"file_name: {req.file_name}")
	description = _sanitize_prompt_text(req.description, max_chars=1500)
	if description:
		lines.append(f"description: {description}")
	lines.append("Candidate folders:")
	for folder in req.candidates:
		lines.append(f"- {folder}")
	lines.append("Return only the tags shown below, one per folder. Do not include code fences.")
	lines.append(SORT_EXAMPLE_OUTPUT)
	return "\n".join(lines)


def build_format_fix_prompt(original_prompt: str, schema_xml: str) -> str:
	lines = [
		"Your previous reply did not match the required tags.",
		"Reply with tags only, no extra text.",
		schema_xml,
		"",
		original_prompt,
	]
	return "\n".join(lines)
