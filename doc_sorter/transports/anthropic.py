#!/usr/bin/env python3
"""
Anthropic messages transport.
"""

from __future__ import annotations

# local repo modules
from .base import TransportError, request_json

ANTHROPIC_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicTransport:
	name = "Anthropic"

	def __init__(self, model: str, api_key: str, base_url: str = ANTHROPIC_URL) -> None:
		self.model = model
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		payload = {
			"model": self.model,
			"max_tokens": max_tokens,
			"messages": [{"role": "user", "content": prompt}],
		}
		parsed = request_json(
			f"{self.base_url}/messages",
			payload,
			headers={
				"x-api-key": self.api_key,
				"anthropic-version": ANTHROPIC_VERSION,
			},
		)
		blocks = parsed.get("content") or []
		text = "".join(block.get("text", "") for block in blocks if block.get("type") == "text")
		if not text.strip():
			raise TransportError("Anthropic returned empty content")
		return text.strip()
