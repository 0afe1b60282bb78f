#!/usr/bin/env python3
"""
Provider-agnostic response parsers.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass, field
import html
import re

# local repo modules
from .llm_utils import extract_all_xml_tags, extract_xml_tag_content

#============================================


class ParseError(RuntimeError):
	"""
	Raised when a model response does not match the required tags.
	"""

	def __init__(self, message: str, raw_text: str = "") -> None:
		super().__init__(message)
		self.raw_text = raw_text


@dataclass(slots=True)
class RenameResult:
	new_name: str
	raw_text: str


@dataclass(slots=True)
class SortResult:
	suggestions: list[str] = field(default_factory=list)
	rejected: list[str] = field(default_factory=list)
	raw_text: str = ""


_CODE_FENCE_RE = re.compile(r"```[a-zA-Z0-9_+-]*\n(.*?)```", re.DOTALL)


def _strip_code_fences(text: str) -> str:
	if not text:
		return ""
	cleaned = text.strip()
	if "```" not in cleaned:
		return cleaned
	def _unwrap(match: re.Match) -> str:
		return match.group(1)
	cleaned = _CODE_FENCE_RE.sub(_unwrap, cleaned)
	return cleaned.strip()


def _coerce_body(text: str) -> str:
	cleaned = _strip_code_fences(text).strip().strip('"').strip("'")
	if "&lt;" in cleaned:
		cleaned = html.unescape(cleaned)
	response_body = extract_xml_tag_content(cleaned, "response")
	return response_body or cleaned


def parse_rename_response(text: str) -> RenameResult:
	body = _coerce_body(text)
	new_name = extract_xml_tag_content(body, "new_name")
	if not new_name:
		raise ParseError("Missing <new_name> in rename response.", text)
	return RenameResult(new_name=new_name, raw_text=text)


def _normalize_folder(value: str) -> str:
	cleaned = html.unescape(value).strip().strip('"').strip("'").strip()
	if len(cleaned) > 1:
		cleaned = cleaned.rstrip("/\\")
	return cleaned


def parse_sort_response(text: str, candidates: list[str], limit: int = 3) -> SortResult:
	"""
	Parse <folder> suggestions and keep those that are known candidates.

	Unknown folders are reported in rejected, duplicates are dropped and
	model order is kept. A reply without any <folder> tag is a ParseError;
	a reply whose folders are all unknown yields no suggestions.
	"""
	body = _coerce_body(text)
	raw_folders = extract_all_xml_tags(body, "folder")
	if not raw_folders:
		raise ParseError("Missing <folder> in sort response.", text)
	known = {_normalize_folder(candidate): candidate for candidate in candidates}
	result = SortResult(raw_text=text)
	for raw in raw_folders:
		folder = _normalize_folder(raw)
		match = known.get(folder)
		if match is None:
			result.rejected.append(folder)
			continue
		if match in result.suggestions:
			continue
		result.suggestions.append(match)
		if len(result.suggestions) >= limit:
			break
	return result
