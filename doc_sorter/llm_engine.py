#!/usr/bin/env python3
"""
Provider-agnostic LLM engine with fallback and strict parsing.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from pathlib import Path
import logging

# local repo modules
from .llm_parsers import ParseError, RenameResult, SortResult, parse_rename_response, parse_sort_response
from .llm_prompts import (
	RenameRequest,
	SortRequest,
	RENAME_EXAMPLE_OUTPUT,
	SORT_EXAMPLE_OUTPUT,
	build_format_fix_prompt,
	build_rename_prompt,
	build_rename_prompt_minimal,
	build_sort_prompt,
)
from .llm_utils import (
	_is_context_window_error,
	_is_retryable_error,
	_print_llm,
	sanitize_filename,
	strip_known_extension,
)
from .transports.base import LLMTransport

logger = logging.getLogger(__name__)

#============================================


@dataclass(slots=True)
class LLMEngine:
	transports: list[LLMTransport]
	quiet: bool = False

	#============================================
	def rename(self, current_name: str, text: str, instructions: str) -> RenameResult:
		"""
		Ask for a descriptive filename stem for a document.

		Args:
			current_name: Current filename with extension.
			text: Extracted document text.
			instructions: User prompt text.

		Returns:
			RenameResult with a sanitized stem (no extension).
		"""
		extension = Path(current_name).suffix.lstrip(".")
		req = RenameRequest(
			instructions=instructions,
			current_name=current_name,
			text=text,
			extension=extension,
		)
		prompt = build_rename_prompt(req)
		raw = self._generate_with_fallback(
			prompt,
			purpose="filename based on content",
			max_tokens=200,
			retry_prompt=build_rename_prompt_minimal(req),
		)
		result = self._parse_with_retry(
			parse_rename_response,
			prompt,
			RENAME_EXAMPLE_OUTPUT,
			raw,
			purpose="filename based on content",
			max_tokens=200,
		)
		result.new_name = sanitize_filename(strip_known_extension(result.new_name, extension))
		return result

	#============================================
	def suggest_folders(
		self,
		file_name: str,
		description: str,
		candidates: list[str],
		limit: int = 3,
		instructions: str = "",
	) -> SortResult:
		"""
		Ask for up to limit destination folders among candidates.
		"""
		if not candidates:
			return SortResult()
		req = SortRequest(
			file_name=file_name,
			description=description,
			candidates=candidates,
			limit=limit,
			instructions=instructions,
		)
		prompt = build_sort_prompt(req)
		raw = self._generate_with_fallback(
			prompt,
			purpose="destination folder",
			max_tokens=400,
			retry_prompt=None,
		)
		result = self._parse_with_retry(
			lambda text: parse_sort_response(text, candidates, limit=limit),
			prompt,
			SORT_EXAMPLE_OUTPUT,
			raw,
			purpose="destination folder",
			max_tokens=400,
		)
		if result.rejected:
			logger.info("Dropped unknown folders from suggestion: %s", result.rejected[:3])
		return result

	#============================================
	def _announce(self, label: str) -> None:
		if not self.quiet:
			_print_llm(label)

	#============================================
	def _generate_with_fallback(
		self,
		prompt: str,
		*,
		purpose: str,
		max_tokens: int,
		retry_prompt: str | None,
	) -> str:
		last_exc: Exception | None = None
		for idx, transport in enumerate(self.transports):
			try:
				self._announce(f"asking {transport.name} for {purpose}")
				return self._generate_on_transport(transport, prompt, purpose, max_tokens)
			except Exception as exc:
				last_exc = exc
				if _is_context_window_error(exc):
					if retry_prompt and idx == 0:
						try:
							self._announce(
								f"retrying {transport.name} with minimal prompt for {purpose}"
							)
							return self._generate_on_transport(
								transport, retry_prompt, purpose, max_tokens
							)
						except Exception as retry_exc:
							last_exc = retry_exc
							if _is_context_window_error(retry_exc) or _is_retryable_error(retry_exc):
								continue
							raise
					continue
				if _is_retryable_error(exc):
					logger.warning("%s failed for %s: %s", transport.name, purpose, exc)
					continue
				raise
		if last_exc:
			raise last_exc
		raise RuntimeError("No LLM transports available.")

	#============================================
	def _parse_with_retry(
		self,
		parser,
		original_prompt: str,
		example_output: str,
		raw_text: str,
		*,
		purpose: str,
		max_tokens: int,
	):
		try:
			return parser(raw_text)
		except ParseError as exc:
			excerpt = " ".join(raw_text.split())[:160]
			logger.info("parse_error for %s: %s (excerpt: %s)", purpose, exc, excerpt)
			fix_prompt = build_format_fix_prompt(original_prompt, example_output)
			last_parse: ParseError | None = None
			last_transport: Exception | None = None
			last_fixed: str | None = None
			for transport in self.transports:
				try:
					self._announce(f"asking {transport.name} for {purpose} (format fix)")
					fixed = self._generate_on_transport(
						transport,
						fix_prompt,
						f"{purpose} (format fix)",
						max_tokens,
					)
					last_fixed = fixed
				except Exception as transport_exc:
					last_transport = transport_exc
					continue
				try:
					return parser(fixed)
				except ParseError as parse_exc:
					last_parse = parse_exc
					continue
			if last_parse:
				text = last_fixed or raw_text
				raise ParseError(str(last_parse), raw_text=text)
			if last_transport:
				raise last_transport
			raise ParseError("Format-fix retry failed.")

	#============================================
	def _generate_on_transport(
		self,
		transport: LLMTransport,
		prompt: str,
		purpose: str,
		max_tokens: int,
	) -> str:
		return transport.generate(prompt, purpose=purpose, max_tokens=max_tokens)
