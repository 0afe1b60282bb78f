#!/usr/bin/env python3
"""
Ollama chat transport.
"""

from __future__ import annotations

# local repo modules
from .base import TransportError, request_json


class OllamaTransport:
	name = "Ollama"

	def __init__(
		self,
		model: str,
		base_url: str = "http://localhost:11434",
		system_message: str = "",
	) -> None:
		self.model = model
		self.base_url = base_url.rstrip("/")
		self.system_message = system_message

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		messages: list[dict[str, str]] = []
		if self.system_message:
			messages.append({"role": "system", "content": self.system_message})
		messages.append({"role": "user", "content": prompt})
		payload: dict[str, object] = {
			"model": self.model,
			"messages": messages,
			"stream": False,
			"options": {"num_predict": max_tokens},
		}
		parsed = request_json(f"{self.base_url}/api/chat", payload, timeout=120)
		assistant_message = parsed.get("message", {}).get("content", "")
		if not assistant_message:
			raise TransportError("Ollama chat returned empty content")
		return assistant_message


def ollama_available(base_url: str) -> bool:
	"""
	Check if Ollama service is up.
	"""
	try:
		request_json(f"{base_url.rstrip('/')}/api/tags", timeout=2)
	except TransportError:
		return False
	return True
