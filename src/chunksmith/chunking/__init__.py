"""
Chunksmith Chunking Package

Tokenizer-agnostic chunkers for prose, markdown, code, HTML, JSON, LaTeX and
tables, plus the code-parser registry and format detection they share.
"""

from .chunkers import (
    CodeChunker,
    HtmlChunker,
    JsonChunker,
    LateChunker,
    LatexChunker,
    MarkdownChunker,
    NeuralChunker,
    RecursiveChunker,
    SemanticChunker,
    SemanticMarkdownChunker,
    SentenceChunker,
    SlumberChunker,
    TableChunker,
    TokenChunker,
)
from .code_parsers import get_code_parser, register_code_parser, register_parser_alias
from .format_detector import DetectedFormat, detect_format
from .tokenizer import (
    TiktokenTokenizer,
    Tokenizer,
    WhitespaceTokenizer,
    get_default_tokenizer,
    slice_by_token_range,
)

__all__ = [
    "CodeChunker",
    "HtmlChunker",
    "JsonChunker",
    "LateChunker",
    "LatexChunker",
    "MarkdownChunker",
    "NeuralChunker",
    "RecursiveChunker",
    "SemanticChunker",
    "SemanticMarkdownChunker",
    "SentenceChunker",
    "SlumberChunker",
    "TableChunker",
    "TokenChunker",
    "DetectedFormat",
    "detect_format",
    "get_code_parser",
    "register_code_parser",
    "register_parser_alias",
    "TiktokenTokenizer",
    "Tokenizer",
    "WhitespaceTokenizer",
    "get_default_tokenizer",
    "slice_by_token_range",
]
