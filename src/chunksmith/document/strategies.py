"""
Named chunking strategies and their dispatch.
"""

from enum import Enum
from typing import Any, Dict, List, Type, Union

from ..chunking.chunkers import (
    CodeChunker,
    HtmlChunker,
    JsonChunker,
    LatexChunker,
    MarkdownChunker,
    RecursiveChunker,
    SentenceChunker,
    TableChunker,
    TokenChunker,
)
from ..chunking.format_detector import DetectedFormat, detect_format
from ..core.logging import log
from ..core.models import Chunk


class ChunkStrategy(str, Enum):
    """Chunking strategies selectable by name."""

    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"
    LATEX = "latex"
    CODE = "code"
    TABLE = "table"
    SENTENCE = "sentence"
    TOKEN = "token"
    RECURSIVE = "recursive"
    AUTO = "auto"


STRATEGY_CHUNKERS: Dict[ChunkStrategy, Type[Any]] = {
    ChunkStrategy.MARKDOWN: MarkdownChunker,
    ChunkStrategy.HTML: HtmlChunker,
    ChunkStrategy.JSON: JsonChunker,
    ChunkStrategy.LATEX: LatexChunker,
    ChunkStrategy.CODE: CodeChunker,
    ChunkStrategy.TABLE: TableChunker,
    ChunkStrategy.SENTENCE: SentenceChunker,
    ChunkStrategy.TOKEN: TokenChunker,
    ChunkStrategy.RECURSIVE: RecursiveChunker,
}

# Plain text has no dedicated chunker
FORMAT_STRATEGIES: Dict[DetectedFormat, ChunkStrategy] = {
    DetectedFormat.JSON: ChunkStrategy.JSON,
    DetectedFormat.HTML: ChunkStrategy.HTML,
    DetectedFormat.LATEX: ChunkStrategy.LATEX,
    DetectedFormat.CODE: ChunkStrategy.CODE,
    DetectedFormat.TABLE: ChunkStrategy.TABLE,
    DetectedFormat.MARKDOWN: ChunkStrategy.MARKDOWN,
    DetectedFormat.TEXT: ChunkStrategy.RECURSIVE,
}


def resolve_strategy(strategy: Union[ChunkStrategy, str], text: str) -> ChunkStrategy:
    """Map a strategy (or its name) to a concrete one; auto runs the detector."""
    try:
        selected = ChunkStrategy(strategy)
    except ValueError:
        log.debug("chunk.strategy.unknown", strategy=str(strategy))
        return ChunkStrategy.RECURSIVE

    if selected is ChunkStrategy.AUTO:
        return FORMAT_STRATEGIES[detect_format(text)]
    return selected


def chunk_by_strategy(
    strategy: Union[ChunkStrategy, str], text: str, **options: Any
) -> List[Chunk]:
    """
    Chunk text with the chunker registered for strategy.

    Accepted options: max_tokens, tokenizer, label, doc_id, source_id and
    base_metadata. Unknown strategies fall back to RecursiveChunker.
    """
    selected = resolve_strategy(strategy, text)
    chunker = STRATEGY_CHUNKERS[selected](options.pop("tokenizer", None))
    return chunker.chunk(text, **options)
