#!/usr/bin/env python3
"""
Tests for provider transports without network access.
"""

import pytest

from doc_sorter.transports import (
	AnthropicTransport,
	GeminiTransport,
	OllamaTransport,
	OpenAITransport,
	TransportError,
	build_transport,
)
from doc_sorter.transports import anthropic, gemini, ollama, openai


def test_build_transport_selects_provider():
	assert isinstance(build_transport("ollama", "llama3"), OllamaTransport)
	assert isinstance(build_transport("openai", "gpt-4o", api_key="k"), OpenAITransport)
	assert isinstance(build_transport("anthropic", "claude", api_key="k"), AnthropicTransport)
	assert isinstance(build_transport("gemini", "gemini-pro", api_key="k"), GeminiTransport)


@pytest.mark.parametrize(
	"provider, model, key",
	[
		("openai", "gpt-4o", ""),
		("gemini", "", "k"),
		("unknown", "m", "k"),
	],
)
def test_build_transport_rejects_bad_input(provider, model, key):
	with pytest.raises(ValueError):
		build_transport(provider, model, api_key=key)


def test_openai_reads_first_choice(monkeypatch):
	monkeypatch.setattr(
		openai,
		"request_json",
		lambda url, payload, headers=None, timeout=60: {"choices": [{"message": {"content": " <new_name>A</new_name> "}}]},
	)
	transport = OpenAITransport(model="gpt-4o", api_key="k")
	assert transport.generate("p", purpose="t", max_tokens=10) == "<new_name>A</new_name>"


def test_anthropic_joins_text_blocks(monkeypatch):
	seen = {}

	def fake(url, payload, headers=None, timeout=60):
		seen["headers"] = headers
		return {"content": [{"type": "text", "text": "one "}, {"type": "text", "text": "two"}]}

	monkeypatch.setattr(anthropic, "request_json", fake)
	transport = AnthropicTransport(model="claude", api_key="secret")
	assert transport.generate("p", purpose="t", max_tokens=10) == "one two"
	assert seen["headers"]["x-api-key"] == "secret"


def test_gemini_blocked_prompt_raises(monkeypatch):
	monkeypatch.setattr(
		gemini,
		"request_json",
		lambda url, payload, headers=None, timeout=60: {"promptFeedback": {"blockReason": "SAFETY"}},
	)
	transport = GeminiTransport(model="gemini-pro", api_key="k")
	with pytest.raises(TransportError) as excinfo:
		transport.generate("p", purpose="t", max_tokens=10)
	assert "SAFETY" in str(excinfo.value)


def test_ollama_sends_system_message(monkeypatch):
	seen = {}

	def fake(url, payload, timeout=60):
		seen["url"] = url
		seen["payload"] = payload
		return {"message": {"content": "hi"}}

	monkeypatch.setattr(ollama, "request_json", fake)
	transport = OllamaTransport(model="llama3", base_url="http://host:1/", system_message="be brief")
	assert transport.generate("p", purpose="t", max_tokens=5) == "hi"
	assert seen["url"] == "http://host:1/api/chat"
	assert seen["payload"]["messages"][0] == {"role": "system", "content": "be brief"}
