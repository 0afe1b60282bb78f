#!/usr/bin/env python3
"""
Google Gemini generateContent transport.
"""

from __future__ import annotations

# Standard Library
import urllib.parse

# local repo modules
from .base import TransportError, request_json

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiTransport:
	name = "Gemini"

	def __init__(self, model: str, api_key: str, base_url: str = GEMINI_URL) -> None:
		self.model = model
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		payload = {
			"contents": [{"role": "user", "parts": [{"text": prompt}]}],
			"generationConfig": {"maxOutputTokens": max_tokens, "temperature": 0.2},
		}
		model = urllib.parse.quote(self.model, safe="")
		parsed = request_json(
			f"{self.base_url}/models/{model}:generateContent",
			payload,
			headers={"x-goog-api-key": self.api_key},
		)
		candidates = parsed.get("candidates") or []
		if not candidates:
			feedback = parsed.get("promptFeedback") or {}
			reason = feedback.get("blockReason", "no candidates")
			raise TransportError(f"Gemini returned no candidates ({reason})")
		parts = (candidates[0].get("content") or {}).get("parts") or []
		text = "".join(part.get("text", "") for part in parts)
		if not text.strip():
			raise TransportError("Gemini returned empty content")
		return text.strip()
