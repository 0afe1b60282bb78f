#!/usr/bin/env python3
"""
Repo-root runner for doc_sorter.

Examples:
	python run_doc_sorter.py index ~/Documents --max-depth 3
	python run_doc_sorter.py rename scan.pdf --output ~/Renamed --dry-run
	python run_doc_sorter.py sort --target ~/Documents --input ~/Downloads
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from doc_sorter.cli import main as cli_main

	sys.exit(cli_main())


if __name__ == "__main__":
	main()
