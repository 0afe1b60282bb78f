#!/usr/bin/env python3
"""
Model listing per provider.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass

# local repo modules
from .transports.base import TransportError, request_json
from .transports.gemini import GEMINI_URL
from .transports.openai import OPENAI_URL

MAX_MODELS = 20
ANTHROPIC_MODELS = [
	("claude-3-opus-20240229", "Claude 3 Opus"),
	("claude-3-sonnet-20240229", "Claude 3 Sonnet"),
	("claude-3-haiku-20240307", "Claude 3 Haiku"),
]

#============================================


class ModelListError(RuntimeError):
	"""
	Raised when models cannot be listed for a provider.
	"""


@dataclass(slots=True, frozen=True)
class ModelInfo:
	id: str
	name: str


#============================================


def filter_openai_models(data: list[dict]) -> list[ModelInfo]:
	"""
	Keep chat gpt-* models, newest first.
	"""
	kept = [
		item
		for item in data
		if item.get("id", "").startswith("gpt-")
		and "instruct" not in item["id"]
		and "vision" not in item["id"]
		and "dall-e" not in item["id"]
	]
	kept.sort(key=lambda item: item.get("created", 0), reverse=True)
	return [ModelInfo(id=item["id"], name=item["id"]) for item in kept[:MAX_MODELS]]


def filter_gemini_models(data: list[dict]) -> list[ModelInfo]:
	"""
	Keep generateContent models that are neither vision nor preview.
	"""
	models: list[ModelInfo] = []
	for item in data:
		methods = item.get("supportedGenerationMethods") or []
		name = item.get("name", "")
		display = item.get("displayName", "")
		if "generateContent" not in methods:
			continue
		if "vision" in display.lower() or "preview" in name:
			continue
		models.append(ModelInfo(id=name.split("/", 1)[-1], name=display or name))
	models.sort(key=lambda model: model.id, reverse=True)
	return models[:MAX_MODELS]


#============================================


def fetch_models(provider: str, api_key: str = "", ollama_url: str = "http://localhost:11434") -> list[ModelInfo]:
	"""
	List models for a provider.

	Args:
		provider: gemini, openai, anthropic or ollama.
		api_key: Provider key; not needed for ollama.
		ollama_url: Base URL of the local Ollama service.

	Returns:
		List of ModelInfo.

	Raises:
		ModelListError: Missing key, unsupported provider or request failure.
	"""
	if provider == "ollama":
		return _fetch(lambda: request_json(f"{ollama_url.rstrip('/')}/api/tags", timeout=5), _ollama_models)
	if not api_key:
		raise ModelListError("API Key is required.")
	if provider == "anthropic":
		models = [ModelInfo(id=model_id, name=name) for model_id, name in ANTHROPIC_MODELS]
		return sorted(models, key=lambda model: model.id, reverse=True)
	if provider == "openai":
		return _fetch(
			lambda: request_json(
				f"{OPENAI_URL}/models",
				headers={"Authorization": f"Bearer {api_key}"},
				timeout=15,
			),
			lambda parsed: filter_openai_models(parsed.get("data") or []),
		)
	if provider == "gemini":
		return _fetch(
			lambda: request_json(
				f"{GEMINI_URL}/models",
				headers={"x-goog-api-key": api_key},
				timeout=15,
			),
			lambda parsed: filter_gemini_models(parsed.get("models") or []),
		)
	raise ModelListError("Unsupported provider.")


def _ollama_models(parsed: dict) -> list[ModelInfo]:
	names = sorted(item.get("name", "") for item in parsed.get("models") or [])
	return [ModelInfo(id=name, name=name) for name in names if name]


def _fetch(request, convert) -> list[ModelInfo]:
	try:
		parsed = request()
	except TransportError as exc:
		raise ModelListError(str(exc)) from exc
	try:
		return convert(parsed)
	except (AttributeError, KeyError, TypeError) as exc:
		raise ModelListError("Failed to parse model list.") from exc
