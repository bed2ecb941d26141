import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..chunking.format_detector import detect_format
from ..chunking.tokenizer import Tokenizer, TiktokenTokenizer, WhitespaceTokenizer
from ..core import config
from ..core.errors import ChunkingError
from ..core.logging import log, setup_logging
from ..document import ChunkStrategy, StructuredDocument

app = typer.Typer(add_completion=False, help="Chunksmith CLI")


@app.callback()
def _init(
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.chunksmith.yaml auto-discovered)",
    ),
) -> None:
    config.SETTINGS = config.Settings.load_config(config_file)
    setup_logging(config.SETTINGS.LOG_FORMAT, config.SETTINGS.LOG_LEVEL)  # type: ignore[arg-type]


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"❌ Cannot read {path}: {e}", err=True)
        raise typer.Exit(1) from e


def _build_tokenizer(name: str) -> Tokenizer:
    if name == "whitespace":
        return WhitespaceTokenizer()
    if name == "tiktoken":
        return TiktokenTokenizer(
            model=config.SETTINGS.TIKTOKEN_MODEL,
            encoding=config.SETTINGS.TIKTOKEN_ENCODING,
        )
    typer.echo(f"❌ Unknown tokenizer: {name} (expected tiktoken|whitespace)", err=True)
    raise typer.Exit(2)


@app.command()
def chunk(
    path: Path = typer.Argument(..., help="UTF-8 text file to chunk"),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Chunking strategy (auto, markdown, html, json, latex, code, table, sentence, token, recursive)",
    ),
    max_tokens: int | None = typer.Option(
        None, "--max-tokens", help="Token budget per chunk"
    ),
    tokenizer: str | None = typer.Option(
        None, "--tokenizer", help="Tokenizer: tiktoken|whitespace"
    ),
    output_format: str = typer.Option(
        "json", "--format", "-f", help="Output format: json (NDJSON) or table"
    ),
) -> None:
    """
    Chunk a file and print the chunks.

    JSON output is one chunk per line on stdout; diagnostics go to stderr.
    """
    text = _read_text(path)
    strategy = strategy or config.SETTINGS.CHUNK_STRATEGY
    max_tokens = max_tokens or config.SETTINGS.CHUNK_MAX_TOKENS
    tokenizer_name = (tokenizer or config.SETTINGS.CHUNK_TOKENIZER).lower()

    valid = [s.value for s in ChunkStrategy]
    if strategy not in valid:
        typer.echo(
            f"❌ Unknown strategy: {strategy} (expected one of {', '.join(valid)})",
            err=True,
        )
        raise typer.Exit(2)

    try:
        doc = StructuredDocument.from_text(text, metadata={"path": str(path)})
        chunks = doc.chunk(
            strategy=strategy,
            max_tokens=max_tokens,
            tokenizer=_build_tokenizer(tokenizer_name),
        )
    except ChunkingError as e:
        typer.echo(f"❌ Chunking failed: {e}", err=True)
        raise typer.Exit(1) from e

    log.debug("cli.chunk.done", path=str(path), chunks=len(chunks))

    if output_format == "table":
        table = Table(title=f"{path.name}: {len(chunks)} chunks")
        table.add_column("ID", style="cyan")
        table.add_column("Tokens", justify="right")
        table.add_column("Source", style="magenta")
        table.add_column("Content")
        for c in chunks:
            preview = c.content.replace("\n", " ")
            if len(preview) > 60:
                preview = preview[:57] + "..."
            table.add_row(
                c.id,
                str(c.tokens if c.tokens is not None else ""),
                str(c.metadata.get("source_type", "")),
                preview,
            )
        Console().print(table)
        return

    for c in chunks:
        typer.echo(json.dumps(c.model_dump(), ensure_ascii=False))


@app.command()
def detect(path: Path = typer.Argument(..., help="File to inspect")) -> None:
    """Print the detected format of a file."""
    typer.echo(detect_format(_read_text(path)).value)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
