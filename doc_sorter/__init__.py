"""
doc_sorter
==========

Rename documents from their content and sort them into an indexed folder tree.
"""

__all__ = [
	"config",
	"indexer",
	"llm_engine",
	"plugins",
	"renamer",
	"sorter",
	"store",
	"transports",
]
