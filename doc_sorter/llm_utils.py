#!/usr/bin/env python3
"""
Shared LLM helpers (provider-agnostic).
"""

from __future__ import annotations

# Standard Library
import re
import sys
import unicodedata

#============================================


MAX_FILENAME_CHARS = 100
_PROMPT_MAX_TOKEN_LEN = 40
_PROMPT_EXCERPT_CHARS = 240
# characters that are illegal or troublesome on macOS, Windows or Linux
_FORBIDDEN_CHARS_RE = re.compile(r"[\\/:*?\"<>|\x00-\x1f\x7f]")
_NONPRINTABLE_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_CONTEXT_WINDOW_MARKERS = (
	"context window",
	"context_length_exceeded",
	"maximum context length",
	"too many tokens",
	"prompt is too long",
)
_RETRYABLE_STATUS = {429, 500, 502, 503, 504, 529}


def _print_llm(label: str) -> None:
	if sys.stdout.isatty():
		print(f"\033[36m[LLM]\033[0m {label}")
	else:
		print(f"[LLM] {label}")


#============================================


def sanitize_filename(name: str) -> str:
	"""
	Make an LLM-proposed name safe to use as a filename stem.

	Keeps spaces and unicode letters so names such as
	"2024 05 01 - ACME - Invoice" survive.
	"""
	text = unicodedata.normalize("NFC", name or "")
	first_line = text.strip().splitlines()[0] if text.strip() else ""
	cleaned = _FORBIDDEN_CHARS_RE.sub(" ", first_line)
	cleaned = " ".join(cleaned.split())
	cleaned = cleaned.strip(" .-_'`")
	if len(cleaned) > MAX_FILENAME_CHARS:
		cleaned = cleaned[:MAX_FILENAME_CHARS].rstrip(" .-_")
	return cleaned or "file"


def strip_known_extension(name: str, extension: str) -> str:
	"""
	Drop a trailing copy of the source extension from a proposed stem.
	"""
	if not extension:
		return name
	suffix = "." + extension.lower().lstrip(".")
	while name.lower().endswith(suffix):
		name = name[: -len(suffix)]
	return name


#============================================


def _sanitize_prompt_text(value: object, max_token_len: int = _PROMPT_MAX_TOKEN_LEN, max_chars: int | None = None) -> str:
	if value is None:
		return ""
	text = str(value)
	if not text:
		return ""
	text = text.replace("\r\n", "\n").replace("\r", "\n")
	text = _NONPRINTABLE_RE.sub(" ", text)
	text = text.replace("\t", " ")
	lines: list[str] = []
	seen: set[str] = set()
	for raw in text.splitlines():
		compact = " ".join(raw.split())
		if not compact:
			continue
		tokens = [token for token in compact.split(" ") if len(token) <= max_token_len]
		if not tokens:
			continue
		line = " ".join(tokens)
		key = line.lower()
		if key in seen:
			continue
		seen.add(key)
		lines.append(line)
	joined = "\n".join(lines)
	if max_chars is not None and len(joined) > max_chars:
		joined = joined[:max_chars].rstrip()
	return joined


def _prompt_excerpt(text: str) -> str:
	cleaned = _sanitize_prompt_text(text)
	if len(cleaned) > _PROMPT_EXCERPT_CHARS:
		return cleaned[: _PROMPT_EXCERPT_CHARS - 3].rstrip() + "..."
	return cleaned


#============================================


def extract_xml_tag_content(raw_text: str, tag: str) -> str:
	"""
	Extract the last occurrence of a given XML-like tag.
	"""
	if not raw_text:
		return ""
	lower = raw_text.lower()
	open_token = f"<{tag}"
	close_token = f"</{tag}"
	start_idx = lower.rfind(open_token)
	if start_idx == -1:
		return ""
	gt_idx = raw_text.find(">", start_idx)
	if gt_idx == -1:
		return ""
	close_idx = lower.find(close_token, gt_idx + 1)
	if close_idx == -1:
		content = raw_text[gt_idx + 1 :]
		return content.strip()
	content = raw_text[gt_idx + 1 : close_idx]
	return content.strip()


def extract_all_xml_tags(raw_text: str, tag: str) -> list[str]:
	"""
	Extract every occurrence of a given XML-like tag, in order.
	"""
	if not raw_text:
		return []
	pattern = re.compile(rf"<{tag}\b[^>]*>(.*?)</{tag}\s*>", re.IGNORECASE | re.DOTALL)
	return [match.group(1).strip() for match in pattern.finditer(raw_text)]


#============================================


def _is_context_window_error(exc: Exception) -> bool:
	msg = str(exc).lower()
	return any(marker in msg for marker in _CONTEXT_WINDOW_MARKERS)


def _is_retryable_error(exc: Exception) -> bool:
	"""
	True for rate limits, overloads and server errors from a provider.
	"""
	status = getattr(exc, "status", None)
	if status is None:
		status = getattr(exc, "code", None)
	if isinstance(status, int) and status in _RETRYABLE_STATUS:
		return True
	name = exc.__class__.__name__.lower()
	return "timeout" in name or "urlerror" in name or isinstance(exc, ConnectionError)
