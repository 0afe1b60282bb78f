#!/usr/bin/env python3
from __future__ import annotations

from .anthropic import AnthropicTransport
from .base import LLMTransport, TransportError
from .gemini import GeminiTransport
from .ollama import OllamaTransport, ollama_available
from .openai import OpenAITransport

__all__ = [
	"AnthropicTransport",
	"GeminiTransport",
	"LLMTransport",
	"OllamaTransport",
	"OpenAITransport",
	"TransportError",
	"build_transport",
	"ollama_available",
]


def build_transport(
	provider: str,
	model: str,
	api_key: str = "",
	ollama_url: str = "http://localhost:11434",
) -> LLMTransport:
	"""
	Instantiate the transport for a provider name.

	Raises:
		ValueError: Unknown provider, missing model, or missing API key.
	"""
	if not model:
		raise ValueError(f"A model is required for provider {provider!r}.")
	if provider == "ollama":
		return OllamaTransport(model=model, base_url=ollama_url)
	if not api_key:
		raise ValueError(f"An API key is required for provider {provider!r}.")
	if provider == "openai":
		return OpenAITransport(model=model, api_key=api_key)
	if provider == "anthropic":
		return AnthropicTransport(model=model, api_key=api_key)
	if provider == "gemini":
		return GeminiTransport(model=model, api_key=api_key)
	raise ValueError(f"Unsupported provider: {provider}")
