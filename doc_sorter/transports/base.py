#!/usr/bin/env python3
"""
Transport interface for LLM providers.
"""

from __future__ import annotations

# Standard Library
import json
import urllib.error
import urllib.request
from typing import Protocol

DEFAULT_TIMEOUT = 60


class LLMTransport(Protocol):
	name: str

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		"""
		Send a prompt and return raw model text.
		"""


class TransportError(RuntimeError):
	"""
	Raised when a provider returns an error or an unusable reply.
	"""

	def __init__(self, message: str, status: int | None = None) -> None:
		super().__init__(message)
		self.status = status


#============================================


def _error_message(body: bytes) -> str:
	try:
		parsed = json.loads(body.decode("utf-8"))
	except (UnicodeDecodeError, json.JSONDecodeError):
		return body.decode("utf-8", errors="replace")[:300]
	error = parsed.get("error") if isinstance(parsed, dict) else None
	if isinstance(error, dict):
		return str(error.get("message") or error)
	if error:
		return str(error)
	return str(parsed)[:300]


def request_json(
	url: str,
	payload: dict | None = None,
	headers: dict[str, str] | None = None,
	timeout: int = DEFAULT_TIMEOUT,
) -> dict:
	"""
	GET (no payload) or POST JSON and decode the JSON reply.

	Raises:
		TransportError: HTTP error status, unreachable host or bad JSON.
	"""
	all_headers = {"Content-Type": "application/json"}
	all_headers.update(headers or {})
	data = json.dumps(payload).encode("utf-8") if payload is not None else None
	request = urllib.request.Request(
		url,
		data=data,
		headers=all_headers,
		method="POST" if payload is not None else "GET",
	)
	try:
		with urllib.request.urlopen(request, timeout=timeout) as response:
			body = response.read()
	except urllib.error.HTTPError as exc:
		raise TransportError(
			f"HTTP {exc.code}: {_error_message(exc.read())}", status=exc.code
		) from exc
	except urllib.error.URLError as exc:
		raise TransportError(f"Cannot reach {url.split('?')[0]}: {exc.reason}") from exc
	try:
		return json.loads(body.decode("utf-8"))
	except (UnicodeDecodeError, json.JSONDecodeError) as exc:
		raise TransportError("Provider returned invalid JSON") from exc
