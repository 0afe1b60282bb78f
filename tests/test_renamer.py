#!/usr/bin/env python3
"""
Tests for the sequential rename pipeline.
"""

from pathlib import Path

import pytest

from conftest import StubLLM
from doc_sorter.config import AppConfig
from doc_sorter import renamer
from doc_sorter.renamer import DONE, ERROR, PROCESSING, QUEUED, RenamePipeline, stamp_title
from doc_sorter.tools import ToolError


def _config(tmp_path: Path, **overrides) -> AppConfig:
	config = AppConfig(output_folder=tmp_path / "out", convert_to_pdfa=False)
	for key, value in overrides.items():
		setattr(config, key, value)
	return config


def _write(folder: Path, name: str, text: str = "Invoice 4711") -> Path:
	folder.mkdir(parents=True, exist_ok=True)
	path = folder / name
	path.write_text(text, encoding="utf-8")
	return path


def test_requires_llm(tmp_path: Path):
	with pytest.raises(RuntimeError):
		RenamePipeline(config=_config(tmp_path), llm=None)


def test_requires_output_unless_in_place(tmp_path: Path, stub_registry):
	with pytest.raises(ValueError):
		RenamePipeline(config=AppConfig(), llm=StubLLM(), registry=stub_registry)
	RenamePipeline(config=AppConfig(save_in_place=True), llm=StubLLM(), registry=stub_registry)


def test_events_are_queued_then_processed_in_order(tmp_path: Path, stub_registry):
	first = _write(tmp_path / "in", "a.txt")
	second = _write(tmp_path / "in", "b.txt")
	llm = StubLLM(names={"a.txt": "Alpha", "b.txt": "Beta"})
	pipeline = RenamePipeline(config=_config(tmp_path), llm=llm, registry=stub_registry)
	events = list(pipeline.process([first, second]))
	assert [(e.path.name, e.status) for e in events] == [
		("a.txt", QUEUED),
		("b.txt", QUEUED),
		("a.txt", PROCESSING),
		("a.txt", DONE),
		("b.txt", PROCESSING),
		("b.txt", DONE),
	]
	assert (tmp_path / "out" / "Alpha.txt").read_text(encoding="utf-8") == "Invoice 4711"
	assert not first.exists()


def test_error_on_one_file_does_not_stop_queue(tmp_path: Path, stub_registry):
	broken = _write(tmp_path / "in", "a.txt")
	fine = _write(tmp_path / "in", "b.txt")
	llm = StubLLM(names={"a.txt": RuntimeError("model down"), "b.txt": "Beta"})
	pipeline = RenamePipeline(config=_config(tmp_path), llm=llm, registry=stub_registry)
	finals = [e for e in pipeline.process([broken, fine]) if e.status in (DONE, ERROR)]
	assert finals[0].status == ERROR
	assert finals[0].message == "RuntimeError: model down"
	assert finals[1].status == DONE
	assert broken.exists()


def test_unsupported_and_empty_files_are_errors(tmp_path: Path, stub_registry):
	odd = _write(tmp_path / "in", "a.xyz")
	empty = _write(tmp_path / "in", "b.txt", text="")
	pipeline = RenamePipeline(config=_config(tmp_path), llm=StubLLM(), registry=stub_registry)
	finals = [e for e in pipeline.process([odd, empty]) if e.status == ERROR]
	assert finals[0].message.startswith("UnsupportedFileError")
	assert finals[1].message.startswith("ExtractionError")


def test_dry_run_leaves_files_alone(tmp_path: Path, stub_registry):
	source = _write(tmp_path / "in", "scan.txt")
	config = _config(tmp_path, dry_run=True)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.txt": "Letter"}), registry=stub_registry)
	final = pipeline.process_one(source)
	assert final == (tmp_path / "out").resolve() / "Letter.txt"
	assert source.exists()
	assert not (tmp_path / "out").exists()


def test_collision_gets_counter(tmp_path: Path, stub_registry):
	_write(tmp_path / "out", "Letter.txt", text="existing")
	source = _write(tmp_path / "in", "scan.txt")
	pipeline = RenamePipeline(config=_config(tmp_path), llm=StubLLM(names={"scan.txt": "Letter"}), registry=stub_registry)
	assert pipeline.process_one(source).name == "Letter (1).txt"
	assert (tmp_path / "out" / "Letter.txt").read_text(encoding="utf-8") == "existing"


def test_archive_moves_original(tmp_path: Path, stub_registry):
	source = _write(tmp_path / "in", "scan.txt")
	config = _config(tmp_path, archive_original=True)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.txt": "Letter"}), registry=stub_registry)
	pipeline.process_one(source)
	assert (tmp_path / "out" / "originals" / "scan.txt").exists()
	assert not source.exists()


def test_save_in_place(tmp_path: Path, stub_registry):
	source = _write(tmp_path / "in", "scan.txt")
	config = AppConfig(save_in_place=True, convert_to_pdfa=False)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.txt": "Letter"}), registry=stub_registry)
	assert pipeline.process_one(source) == tmp_path / "in" / "Letter.txt"


def test_unchanged_name_is_a_no_op(tmp_path: Path, stub_registry):
	source = _write(tmp_path / "in", "Letter.txt")
	config = AppConfig(save_in_place=True, convert_to_pdfa=False)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"Letter.txt": "Letter"}), registry=stub_registry)
	assert pipeline.process_one(source) == source
	assert source.exists()


def test_pdf_is_converted_to_pdfa_with_ghostscript(tmp_path: Path, stub_registry, monkeypatch):
	source = _write(tmp_path / "in", "scan.pdf")
	calls: list[list[str]] = []

	def fake_run(args, timeout=120):
		calls.append(args)
		output = next(arg for arg in args if arg.startswith("-sOutputFile="))
		Path(output.split("=", 1)[1]).write_text("pdfa", encoding="utf-8")
		return ""

	monkeypatch.setattr(renamer, "tool_available", lambda name: name == "gs")
	monkeypatch.setattr(renamer, "run_tool", fake_run)
	config = _config(tmp_path, convert_to_pdfa=True)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.pdf": "Letter"}), registry=stub_registry)
	final = pipeline.process_one(source)
	assert final == (tmp_path / "out").resolve() / "Letter.pdf"
	assert len(calls) == 1
	argv = calls[0]
	assert argv[0] == "gs"
	assert "-dPDFA=2" in argv
	assert f"-sOutputFile={final}" in argv
	assert argv[-1] == str(source)
	assert final.read_text(encoding="utf-8") == "pdfa"
	assert not source.exists()


def test_missing_ghostscript_copies_pdf_and_warns(tmp_path: Path, stub_registry, monkeypatch, caplog):
	source = _write(tmp_path / "in", "scan.pdf", text="original bytes")

	def never_run(args, timeout=120):
		raise AssertionError(f"unexpected tool call: {args}")

	monkeypatch.setattr(renamer, "tool_available", lambda name: False)
	monkeypatch.setattr(renamer, "run_tool", never_run)
	config = _config(tmp_path, convert_to_pdfa=True)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.pdf": "Letter"}), registry=stub_registry)
	with caplog.at_level("WARNING", logger="doc_sorter.renamer"):
		final = pipeline.process_one(source)
	assert final.read_text(encoding="utf-8") == "original bytes"
	assert "Ghostscript not found" in caplog.text


def test_stamp_title_writes_pdf_title(tmp_path: Path, monkeypatch):
	target = _write(tmp_path, "Letter.pdf")
	calls: list[list[str]] = []
	monkeypatch.setattr(renamer, "tool_available", lambda name: True)
	monkeypatch.setattr(renamer, "run_tool", lambda args, timeout=60: calls.append(args) or "")
	assert stamp_title(target, "Letter") is True
	assert calls[0][0] == "exiftool"
	assert "-Title=Letter" in calls[0]
	assert calls[0][-1] == str(target)


def test_stamp_title_skips_unwritable_formats(tmp_path: Path, monkeypatch):
	target = _write(tmp_path, "notes.txt")
	calls: list[list[str]] = []
	monkeypatch.setattr(renamer, "tool_available", lambda name: True)
	monkeypatch.setattr(renamer, "run_tool", lambda args, timeout=60: calls.append(args) or "")
	assert stamp_title(target, "Notes") is False
	assert calls == []


def test_stamp_title_tolerates_exiftool_failure(tmp_path: Path, monkeypatch):
	target = _write(tmp_path, "Letter.jpg")

	def fail(args, timeout=60):
		raise ToolError("exiftool", "exit status 1: bad file", "bad file")

	monkeypatch.setattr(renamer, "tool_available", lambda name: True)
	monkeypatch.setattr(renamer, "run_tool", fail)
	assert stamp_title(target, "Letter") is False


def test_failed_archive_removes_new_copy(tmp_path: Path, stub_registry):
	source = _write(tmp_path / "in", "scan.txt")
	_write(tmp_path / "out", "originals", text="a file where the folder should be")
	config = _config(tmp_path, archive_original=True)
	pipeline = RenamePipeline(config=config, llm=StubLLM(names={"scan.txt": "Letter"}), registry=stub_registry)
	events = list(pipeline.process([source]))
	assert events[-1].status == ERROR
	assert events[-1].message.startswith("FileExistsError")
	assert source.exists()
	assert not (tmp_path / "out" / "Letter.txt").exists()
