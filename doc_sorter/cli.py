#!/usr/bin/env python3
"""
Command line interface for llm-doc-sorter.
"""

from __future__ import annotations

# Standard Library
import argparse
import logging
from pathlib import Path
import sys

# local repo modules
from .config import DEFAULT_MAX_DEPTH, PROVIDERS, AppConfig, load_user_config
from .indexer import index_folders
from .llm_engine import LLMEngine
from .models import ModelListError, fetch_models
from .renamer import DONE, ERROR, RenamePipeline
from .sorter import Sorter
from .store import SettingsStore
from .tools import check_dependencies, install_hint
from .transports import build_transport

#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


def _tag(label: str, code: str) -> str:
	return _color(f"[{label}]", code)


#============================================


def _add_common_llm_args(parser: argparse.ArgumentParser) -> None:
	parser.add_argument(
		"--provider",
		dest="provider",
		choices=list(PROVIDERS),
		help="LLM provider (default from config, else gemini).",
	)
	parser.add_argument(
		"-m",
		"--model",
		dest="model",
		help="Model id for the provider.",
	)
	key_group = parser.add_mutually_exclusive_group()
	key_group.add_argument(
		"--api-key",
		dest="api_key",
		help="Provider API key.",
	)
	key_group.add_argument(
		"--key-id",
		dest="key_id",
		help="Use a stored API key by id.",
	)
	parser.add_argument(
		"--ollama-url",
		dest="ollama_url",
		help="Base URL of the local Ollama service.",
	)


#============================================


def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser with all subcommands.
	"""
	parser = argparse.ArgumentParser(
		description="Rename documents from their content and sort them into folders using an LLM."
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_path",
		help="Optional JSON or YAML config file.",
	)
	parser.add_argument(
		"--store",
		dest="store_path",
		help="Override the prompts/keys store file.",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	sub = parser.add_subparsers(dest="command", required=True)

	index_parser = sub.add_parser("index", help="List folders under a root up to a depth.")
	index_parser.add_argument("root", help="Folder to index.")
	index_parser.add_argument(
		"-D",
		"--max-depth",
		dest="max_depth",
		type=int,
		help=f"Maximum folder depth (default {DEFAULT_MAX_DEPTH}).",
	)
	index_parser.add_argument(
		"--follow-symlinks",
		dest="follow_symlinks",
		action="store_true",
		help="Descend symlinked folders.",
	)

	rename_parser = sub.add_parser("rename", help="Rename documents from their content.")
	rename_parser.add_argument("files", nargs="+", help="Files to rename.")
	place_group = rename_parser.add_mutually_exclusive_group()
	place_group.add_argument(
		"-o",
		"--output",
		dest="output_folder",
		help="Folder that receives renamed files.",
	)
	place_group.add_argument(
		"--in-place",
		dest="save_in_place",
		action="store_true",
		help="Write renamed files next to the source.",
	)
	rename_parser.add_argument(
		"--archive",
		dest="archive_original",
		action="store_true",
		help="Keep originals in an originals/ folder.",
	)
	rename_parser.add_argument(
		"--no-pdfa",
		dest="no_pdfa",
		action="store_true",
		help="Copy PDFs as-is instead of converting to PDF/A.",
	)
	rename_parser.add_argument(
		"--prompt-id",
		dest="prompt_id",
		help="Stored prompt to use (default: first stored prompt).",
	)
	rename_parser.add_argument(
		"-d",
		"--dry-run",
		dest="dry_run",
		action="store_true",
		help="Only print planned renames.",
	)
	_add_common_llm_args(rename_parser)

	sort_parser = sub.add_parser("sort", help="Suggest destination folders for files.")
	sort_parser.add_argument(
		"-t",
		"--target",
		dest="target",
		required=True,
		help="Destination tree to index.",
	)
	sort_parser.add_argument(
		"-i",
		"--input",
		dest="input_folder",
		required=True,
		help="Folder holding the files to sort.",
	)
	sort_parser.add_argument(
		"-D",
		"--max-depth",
		dest="max_depth",
		type=int,
		help=f"Maximum folder depth (default {DEFAULT_MAX_DEPTH}).",
	)
	sort_parser.add_argument(
		"--follow-symlinks",
		dest="follow_symlinks",
		action="store_true",
		help="Descend symlinked folders while indexing.",
	)
	sort_parser.add_argument(
		"-a",
		"--apply",
		dest="apply",
		action="store_true",
		help="Move each file into its first suggestion.",
	)
	sort_parser.add_argument(
		"-x",
		"--context",
		dest="sort_prompt",
		help="Extra instruction for folder suggestions.",
	)
	_add_common_llm_args(sort_parser)

	prompts_parser = sub.add_parser("prompts", help="Manage stored rename prompts.")
	prompts_sub = prompts_parser.add_subparsers(dest="action", required=True)
	prompts_sub.add_parser("list", help="List prompts.")
	add_prompt = prompts_sub.add_parser("add", help="Add a prompt.")
	add_prompt.add_argument("title")
	add_prompt.add_argument("text")
	update_prompt = prompts_sub.add_parser("update", help="Update a prompt.")
	update_prompt.add_argument("prompt_id")
	update_prompt.add_argument("title")
	update_prompt.add_argument("text")
	delete_prompt = prompts_sub.add_parser("delete", help="Delete a prompt.")
	delete_prompt.add_argument("prompt_id")
	history_prompt = prompts_sub.add_parser("history", help="Show prompt versions.")
	history_prompt.add_argument("prompt_id")

	keys_parser = sub.add_parser("keys", help="Manage stored API keys.")
	keys_sub = keys_parser.add_subparsers(dest="action", required=True)
	keys_sub.add_parser("list", help="List keys (masked).")
	add_key = keys_sub.add_parser("add", help="Add a key.")
	add_key.add_argument("nickname")
	add_key.add_argument("provider", choices=[p for p in PROVIDERS if p != "ollama"])
	add_key.add_argument("key")
	delete_key = keys_sub.add_parser("delete", help="Delete a key.")
	delete_key.add_argument("key_id")

	models_parser = sub.add_parser("models", help="List models for a provider.")
	models_parser.add_argument("provider", choices=list(PROVIDERS))
	models_key_group = models_parser.add_mutually_exclusive_group()
	models_key_group.add_argument("--api-key", dest="api_key", help="Provider API key.")
	models_key_group.add_argument("--key-id", dest="key_id", help="Use a stored API key by id.")
	models_parser.add_argument("--ollama-url", dest="ollama_url", help="Base URL of the local Ollama service.")

	sub.add_parser("doctor", help="Check for required external tools.")
	return parser


#============================================


def build_config(args: argparse.Namespace, store: SettingsStore) -> AppConfig:
	"""
	Build runtime config from the config file, the store and CLI args.

	CLI args win over the config file, which wins over defaults.
	"""
	config = AppConfig()
	if args.config_path:
		config.apply_overrides(load_user_config(Path(args.config_path).expanduser()))
	overrides = {
		name: getattr(args, name, None)
		for name in ("provider", "model", "api_key", "ollama_url", "max_depth", "sort_prompt")
	}
	config.apply_overrides(overrides)
	key_id = getattr(args, "key_id", None)
	if key_id:
		record = store.get_key(key_id)
		if record is None:
			raise SystemExit(f"Unknown key id: {key_id}")
		config.api_key = record["key"]
		config.provider = record.get("provider") or config.provider
	elif not config.api_key and config.provider != "ollama":
		config.api_key = _stored_key_for(store, config.provider)
	if getattr(args, "output_folder", None):
		config.output_folder = Path(args.output_folder).expanduser()
	for flag in ("save_in_place", "archive_original", "follow_symlinks", "dry_run"):
		if getattr(args, flag, False):
			setattr(config, flag, True)
	if getattr(args, "no_pdfa", False):
		config.convert_to_pdfa = False
	if args.command == "rename":
		config.prompt_text = _prompt_text(store, args.prompt_id)
	config.verbose = args.verbose
	return config


#============================================


def _stored_key_for(store: SettingsStore, provider: str) -> str:
	for record in store.api_keys:
		if record.get("provider") == provider:
			return record.get("key", "")
	return ""


def _prompt_text(store: SettingsStore, prompt_id: str | None) -> str:
	if prompt_id:
		prompt = store.get_prompt(prompt_id)
		if prompt is None:
			raise SystemExit(f"Unknown prompt id: {prompt_id}")
		return prompt["text"]
	if store.prompts:
		return store.prompts[0].get("text", "")
	return ""


#============================================


def build_llm(config: AppConfig) -> LLMEngine:
	"""
	Instantiate the LLM engine for the configured provider.
	"""
	transport = build_transport(
		config.provider,
		config.model,
		api_key=config.api_key,
		ollama_url=config.ollama_url,
	)
	return LLMEngine(transports=[transport], quiet=not config.verbose)


#============================================


def _mask(key: str) -> str:
	if len(key) <= 8:
		return "*" * len(key)
	return f"{key[:4]}...{key[-4:]}"


#============================================


def run_index(config: AppConfig, root: str) -> int:
	def report(count: int, path: Path) -> None:
		if config.verbose:
			print(f"{_tag('INDEX', '34')} {count}: {path}")

	result = index_folders(
		root,
		config.max_depth,
		follow_symlinks=config.follow_symlinks,
		progress=report,
	)
	for folder in result.folders:
		print(folder)
	print(f"{_tag('INDEX', '34')} Found {len(result)} folders under {result.root}")
	for skipped in result.skipped:
		print(f"{_tag('SKIP', '33')} {skipped.path} ({skipped.kind}): {skipped.message}")
	return 0


def run_rename(config: AppConfig, files: list[str]) -> int:
	pipeline = RenamePipeline(config=config, llm=build_llm(config))
	paths = [Path(item).expanduser() for item in files]
	failures = 0
	for event in pipeline.process(paths):
		if event.status == DONE:
			label = _tag("DRY RUN", "33") if config.dry_run else _tag("DONE", "32")
			print(f"{label} {event.path.name} -> {event.message}")
		elif event.status == ERROR:
			failures += 1
			print(f"{_tag('ERROR', '31')} {event.path.name}: {event.message}")
		elif config.verbose:
			print(f"{_tag(event.status.upper(), '34')} {event.path.name}")
	return 1 if failures else 0


def run_sort(config: AppConfig, target: str, input_folder: str, apply: bool) -> int:
	inbox = Path(input_folder).expanduser()
	if not inbox.is_dir():
		print(f"{_tag('ERROR', '31')} Input folder not found: {inbox}")
		return 2
	sorter = Sorter(config=config, llm=build_llm(config))
	index = sorter.index_target(Path(target).expanduser())
	print(f"{_tag('INDEX', '34')} {len(index)} candidate folders under {index.root}")
	failures = 0
	for suggestion in sorter.suggest(inbox):
		name = suggestion.file_path.name
		if suggestion.error:
			failures += 1
			print(f"{_tag('ERROR', '31')} {name}: {suggestion.error}")
			continue
		choices = ", ".join(str(folder) for folder in suggestion.suggestions)
		print(f"{_tag('SUGGEST', '36')} {name}: {choices}")
		if not apply:
			continue
		# folders can disappear between indexing and the move
		try:
			final = sorter.move(suggestion.file_path, suggestion.suggestions[0])
		except OSError as exc:
			failures += 1
			print(f"{_tag('ERROR', '31')} {name}: {exc.__class__.__name__}: {exc}")
			continue
		print(f"{_tag('MOVE', '32')} {name} -> {final}")
	return 1 if failures else 0


def run_prompts(store: SettingsStore, args: argparse.Namespace) -> int:
	if args.action == "list":
		for prompt in store.prompts:
			print(f"{prompt['id']}\t{prompt['title']}")
	elif args.action == "add":
		prompt = store.add_prompt(args.title, args.text)
		print(f"{_tag('ADD', '32')} {prompt['id']}")
	elif args.action == "update":
		prompt = store.update_prompt(args.prompt_id, args.title, args.text)
		print(f"{_tag('UPDATE', '32')} {prompt['id']} ({len(prompt.get('history', []))} versions)")
	elif args.action == "delete":
		if not store.delete_prompt(args.prompt_id):
			print(f"{_tag('ERROR', '31')} Cannot delete {args.prompt_id}")
			return 1
		print(f"{_tag('DELETE', '32')} {args.prompt_id}")
	elif args.action == "history":
		prompt = store.get_prompt(args.prompt_id)
		if prompt is None:
			print(f"{_tag('ERROR', '31')} Unknown prompt {args.prompt_id}")
			return 1
		for number, text in enumerate(prompt.get("history", []), start=1):
			print(f"v{number}: {text}")
	return 0


def run_keys(store: SettingsStore, args: argparse.Namespace) -> int:
	if args.action == "list":
		for record in store.api_keys:
			print(f"{record['id']}\t{record['nickname']}\t{record['provider']}\t{_mask(record['key'])}")
	elif args.action == "add":
		record = store.add_key(args.nickname, args.provider, args.key)
		print(f"{_tag('ADD', '32')} {record['id']}")
	elif args.action == "delete":
		if not store.delete_key(args.key_id):
			print(f"{_tag('ERROR', '31')} Unknown key {args.key_id}")
			return 1
		print(f"{_tag('DELETE', '32')} {args.key_id}")
	return 0


def run_models(config: AppConfig) -> int:
	try:
		models = fetch_models(config.provider, config.api_key, ollama_url=config.ollama_url)
	except ModelListError as exc:
		print(f"{_tag('ERROR', '31')} {exc}")
		return 1
	for model in models:
		print(f"{model.id}\t{model.name}")
	return 0


def run_doctor() -> int:
	missing = check_dependencies()
	if not missing:
		print(f"{_tag('OK', '32')} All external tools found.")
		return 0
	print(f"{_tag('MISSING', '33')} {', '.join(missing)}")
	print(f"{_tag('HINT', '34')} {install_hint(missing)}")
	return 1


#============================================


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	store = SettingsStore(Path(args.store_path).expanduser() if args.store_path else None)
	config = build_config(args, store)
	try:
		if args.command == "index":
			return run_index(config, args.root)
		if args.command == "rename":
			return run_rename(config, args.files)
		if args.command == "sort":
			return run_sort(config, args.target, args.input_folder, args.apply)
		if args.command == "prompts":
			return run_prompts(store, args)
		if args.command == "keys":
			return run_keys(store, args)
		if args.command == "models":
			return run_models(config)
		return run_doctor()
	except (KeyError, ValueError, TypeError, RuntimeError, OSError) as exc:
		print(f"{_tag('ERROR', '31')} {exc}")
		return 2


#============================================


if __name__ == "__main__":
	sys.exit(main())
