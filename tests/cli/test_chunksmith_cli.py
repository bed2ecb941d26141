"""Tests for the chunksmith CLI."""

import json

import pytest
import structlog
from typer.testing import CliRunner

from chunksmith.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_structlog():
    """The CLI configures structlog globally; undo it after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def notes(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("a b c", encoding="utf-8")
    return path


def test_chunk_prints_ndjson(notes):
    """One JSON object per chunk on stdout."""
    result = runner.invoke(
        app,
        ["chunk", str(notes), "--strategy", "token", "--max-tokens", "2", "--tokenizer", "whitespace"],
    )

    assert result.exit_code == 0, result.output
    lines = [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
    assert [c["content"] for c in lines] == ["a b", "c"]
    assert [c["id"] for c in lines] == ["token-0", "token-1"]
    assert all(c["metadata"]["doc_id"].startswith("doc-") for c in lines)
    assert lines[0]["metadata"]["source_type"] == "token"


def test_chunk_table_output(notes):
    """Table output has a title with the chunk count."""
    result = runner.invoke(
        app,
        [
            "chunk",
            str(notes),
            "-s",
            "token",
            "--max-tokens",
            "2",
            "--tokenizer",
            "whitespace",
            "-f",
            "table",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "notes.txt: 2 chunks" in result.stdout
    assert "token-1" in result.stdout


def test_config_file_supplies_defaults(tmp_path, notes):
    """Settings from --config apply when flags are omitted."""
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        "CHUNK_TOKENIZER: whitespace\nCHUNK_STRATEGY: token\nCHUNK_MAX_TOKENS: 1\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["--config", str(config_file), "chunk", str(notes)])

    assert result.exit_code == 0, result.output
    assert len([line for line in result.stdout.splitlines() if line.strip()]) == 3


def test_auto_strategy_detects_markdown(tmp_path):
    path = tmp_path / "readme.md"
    path.write_text("# Title\n\nSome body text.", encoding="utf-8")

    result = runner.invoke(app, ["chunk", str(path), "--tokenizer", "whitespace"])

    assert result.exit_code == 0, result.output
    chunk = json.loads(result.stdout.splitlines()[0])
    assert chunk["metadata"]["format"] == "markdown"
    assert chunk["metadata"]["heading_path"] == ["Title"]


def test_detect(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('{"a": [1, 2]}', encoding="utf-8")

    result = runner.invoke(app, ["detect", str(path)])

    assert result.exit_code == 0
    assert result.stdout.strip() == "json"


def test_missing_file_exits_1(tmp_path):
    result = runner.invoke(app, ["chunk", str(tmp_path / "nope.txt"), "--tokenizer", "whitespace"])

    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_unknown_strategy_exits_2(notes):
    result = runner.invoke(
        app, ["chunk", str(notes), "--strategy", "bogus", "--tokenizer", "whitespace"]
    )

    assert result.exit_code == 2
    assert "Unknown strategy" in result.output


def test_unknown_tokenizer_exits_2(notes):
    result = runner.invoke(app, ["chunk", str(notes), "--tokenizer", "bpe"])

    assert result.exit_code == 2
    assert "Unknown tokenizer" in result.output
