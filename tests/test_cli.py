"""Tests for the docflux CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from docflux import cli
from docflux.cli import JsonFormatter, app
from docflux.remote.models import ExportedFile
from docflux.service import DocumentService

from conftest import FakeTranslator, FakeVendor

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No config files and no vendor key leak in from the real environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    monkeypatch.delenv("CLOUDCONVERT_API_KEY", raising=False)


@pytest.fixture
def patched_service(monkeypatch, no_sleep):
    """Swap the service factory for one wired to fakes."""
    def _patch(vendor=None, translator=None):
        monkeypatch.setattr(
            cli,
            "_build_service",
            lambda cfg: DocumentService(cfg, vendor=vendor, translator=translator, sleep=no_sleep),
        )
    return _patch


# ── docflux convert ──────────────────────────────────────────────────


def test_convert_writes_next_to_source(tmp_path: Path):
    src = tmp_path / "notes.txt"
    src.write_text("Hello\nWorld")
    result = runner.invoke(app, ["convert", str(src), "--to", "html"])
    assert result.exit_code == 0, result.output
    html = (tmp_path / "notes.html").read_text()
    assert "<p>Hello</p>" in html
    assert "<p>World</p>" in html


def test_convert_custom_output(tmp_path: Path):
    src = tmp_path / "people.csv"
    src.write_text("name,age\nAlice,30\n")
    out = tmp_path / "out" / "people.json"
    out.parent.mkdir()
    result = runner.invoke(app, ["convert", str(src), "--to", "json", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert '"_rowIndex": 1' in out.read_text()


def test_convert_remote_pair_without_key_fails(tmp_path: Path):
    src = tmp_path / "deck.pdf"
    src.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["convert", str(src), "--to", "pptx"])
    assert result.exit_code == 1
    assert "Unsupported conversion" in result.output


def test_convert_remote_pair_prints_download(tmp_path: Path, patched_service):
    patched_service(vendor=FakeVendor())
    src = tmp_path / "deck.pdf"
    src.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["convert", str(src), "--to", "pptx"])
    assert result.exit_code == 0, result.output
    assert "https://files.example/out" in result.output


def test_convert_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["convert", str(tmp_path / "ghost.txt"), "--to", "html"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_convert_malformed_json(tmp_path: Path):
    src = tmp_path / "bad.json"
    src.write_text("{bad")
    result = runner.invoke(app, ["convert", str(src), "--to", "csv"])
    assert result.exit_code == 1
    assert "Invalid JSON" in result.output


# ── docflux summarize / translate ────────────────────────────────────


def test_summarize_prints_panel(tmp_path: Path, long_text: str):
    src = tmp_path / "report.txt"
    src.write_text(long_text)
    result = runner.invoke(app, ["summarize", str(src)])
    assert result.exit_code == 0, result.output
    assert "Summary of report.txt" in result.output


def test_summarize_binary_fails(tmp_path: Path):
    src = tmp_path / "blob.txt"
    src.write_bytes(bytes(range(1, 32)) * 4)
    result = runner.invoke(app, ["summarize", str(src)])
    assert result.exit_code == 1


def test_translate_prints_result(tmp_path: Path, patched_service):
    patched_service(translator=FakeTranslator("Hallo Welt"))
    src = tmp_path / "hello.txt"
    src.write_text("Hello world")
    result = runner.invoke(app, ["translate", str(src), "--lang", "de"])
    assert result.exit_code == 0, result.output
    assert "Hallo Welt" in result.output


def test_translate_to_file(tmp_path: Path, patched_service):
    patched_service(translator=FakeTranslator("Ciao mondo"))
    src = tmp_path / "hello.txt"
    src.write_text("Hello world")
    out = tmp_path / "hello.it.txt"
    result = runner.invoke(app, ["translate", str(src), "--lang", "it", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text() == "Ciao mondo"


# ── docflux merge / split ────────────────────────────────────────────


def test_merge(tmp_path: Path, patched_service):
    patched_service(vendor=FakeVendor())
    files = []
    for name in ("a.pdf", "b.pdf"):
        path = tmp_path / name
        path.write_bytes(b"%PDF-1.4")
        files.append(str(path))
    result = runner.invoke(app, ["merge", *files])
    assert result.exit_code == 0, result.output
    assert "merged_" in result.output


def test_merge_single_file_rejected(tmp_path: Path, patched_service):
    patched_service(vendor=FakeVendor())
    path = tmp_path / "a.pdf"
    path.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["merge", str(path)])
    assert result.exit_code == 1
    assert "At least 2" in result.output


def test_split_by_range(tmp_path: Path, patched_service):
    vendor = FakeVendor(files=[
        ExportedFile(url="https://x/1", filename="p1.pdf"),
        ExportedFile(url="https://x/2", filename="p2.pdf"),
    ])
    patched_service(vendor=vendor)
    path = tmp_path / "book.pdf"
    path.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["split", str(path), "--range", "1-2", "--range", "3-4"])
    assert result.exit_code == 0, result.output
    assert "book_part_1.pdf" in result.output
    assert "book_part_2.pdf" in result.output


def test_split_needs_exactly_one_selector(tmp_path: Path):
    path = tmp_path / "book.pdf"
    path.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["split", str(path)])
    assert result.exit_code == 1
    assert "exactly one" in result.output


def test_split_bad_range_is_usage_error(tmp_path: Path):
    path = tmp_path / "book.pdf"
    path.write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["split", str(path), "--range", "7"])
    assert result.exit_code != 0


# ── docflux formats / config ─────────────────────────────────────────


def test_formats_lists_local_pairs():
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0
    assert "Local conversions" in result.output
    assert "xml" in result.output


def test_config_init_and_refuse_overwrite(tmp_path: Path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "docflux.yaml").exists()

    again = runner.invoke(app, ["config", "init"])
    assert again.exit_code == 1
    assert "already exists" in again.output

    forced = runner.invoke(app, ["config", "init", "--force"])
    assert forced.exit_code == 0


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "cloudconvert" in result.output


def test_missing_config_file(tmp_path: Path):
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "formats"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


# ── logging ──────────────────────────────────────────────────────────


def test_json_formatter_emits_one_object():
    import json

    record = logging.LogRecord("docflux.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    entry = json.loads(JsonFormatter().format(record))
    assert entry["message"] == "hello x"
    assert entry["level"] == "info"


def test_setup_logging_quiets_httpx():
    cli.setup_logging("debug", "json")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
