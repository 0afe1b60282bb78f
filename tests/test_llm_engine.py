#!/usr/bin/env python3
"""
Tests for LLMEngine retry and fallback behavior.
"""

import pytest

from conftest import DummyTransport
from doc_sorter.llm_engine import LLMEngine
from doc_sorter.transports.base import TransportError


def test_rename_strips_extension_and_sanitizes():
	transport = DummyTransport(responses=["<new_name>2024 01 05 - ACME: Invoice.pdf</new_name>"])
	engine = LLMEngine(transports=[transport], quiet=True)
	result = engine.rename("scan.pdf", "Invoice 4711 from ACME", "Name it.")
	assert result.new_name == "2024 01 05 - ACME Invoice"
	assert "Invoice 4711 from ACME" in transport.calls[0][1]


def test_format_fix_retry_on_parse_error():
	transport = DummyTransport(responses=["not xml", "<new_name>Good</new_name>"])
	engine = LLMEngine(transports=[transport], quiet=True)
	result = engine.rename("old.pdf", "text", "Name it.")
	assert result.new_name == "Good"
	assert len(transport.calls) == 2
	assert "format fix" in transport.calls[1][0]


def test_retryable_error_falls_back_to_second_transport():
	busy = DummyTransport(error=TransportError("HTTP 503: overloaded", status=503))
	ok = DummyTransport(responses=["<new_name>Ok</new_name>"])
	engine = LLMEngine(transports=[busy, ok], quiet=True)
	assert engine.rename("old.pdf", "text", "Name it.").new_name == "Ok"
	assert len(ok.calls) == 1


def test_non_retryable_error_propagates():
	bad = DummyTransport(error=TransportError("HTTP 401: bad key", status=401))
	engine = LLMEngine(transports=[bad, DummyTransport(responses=["<new_name>x</new_name>"])], quiet=True)
	with pytest.raises(TransportError):
		engine.rename("old.pdf", "text", "Name it.")


def test_context_window_error_retries_with_minimal_prompt():
	class TooLong(DummyTransport):
		def generate(self, prompt, *, purpose, max_tokens):
			if not self.calls:
				self.calls.append((purpose, prompt))
				raise TransportError("maximum context length exceeded", status=400)
			return super().generate(prompt, purpose=purpose, max_tokens=max_tokens)

	transport = TooLong(responses=["<new_name>Short</new_name>"])
	engine = LLMEngine(transports=[transport], quiet=True)
	assert engine.rename("old.pdf", "word " * 500, "Name it.").new_name == "Short"
	assert transport.calls[0][1] != transport.calls[1][1]


def test_suggest_folders_validates_candidates():
	transport = DummyTransport(
		responses=["<folder>/t/b</folder><folder>/t/zzz</folder><folder>/t/a</folder>"]
	)
	engine = LLMEngine(transports=[transport], quiet=True)
	result = engine.suggest_folders("bill.pdf", "electricity bill", ["/t/a", "/t/b"])
	assert result.suggestions == ["/t/b", "/t/a"]
	assert "- /t/a" in transport.calls[0][1]


def test_suggest_folders_without_candidates_skips_llm():
	transport = DummyTransport()
	engine = LLMEngine(transports=[transport], quiet=True)
	assert engine.suggest_folders("bill.pdf", "text", []).suggestions == []
	assert transport.calls == []
