#!/usr/bin/env python3
"""
OpenAI chat completions transport.
"""

from __future__ import annotations

# local repo modules
from .base import TransportError, request_json

OPENAI_URL = "https://api.openai.com/v1"


class OpenAITransport:
	name = "OpenAI"

	def __init__(self, model: str, api_key: str, base_url: str = OPENAI_URL) -> None:
		self.model = model
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		payload = {
			"model": self.model,
			"messages": [{"role": "user", "content": prompt}],
			"max_tokens": max_tokens,
			"temperature": 0.2,
		}
		parsed = request_json(
			f"{self.base_url}/chat/completions",
			payload,
			headers={"Authorization": f"Bearer {self.api_key}"},
		)
		choices = parsed.get("choices") or []
		if not choices:
			raise TransportError("OpenAI returned no choices")
		content = (choices[0].get("message") or {}).get("content") or ""
		if not content.strip():
			raise TransportError("OpenAI returned empty content")
		return content.strip()
