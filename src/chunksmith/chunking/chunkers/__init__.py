from .code_chunker import CodeChunker
from .html_chunker import HtmlChunker
from .json_chunker import JsonChunker
from .late_chunker import LateChunker
from .latex_chunker import LatexChunker
from .markdown_chunker import MarkdownChunker
from .neural_chunker import NeuralChunker
from .recursive_chunker import RecursiveChunker
from .semantic_chunker import SemanticChunker
from .semantic_markdown_chunker import SemanticMarkdownChunker
from .sentence_chunker import SentenceChunker
from .slumber_chunker import SlumberChunker
from .table_chunker import TableChunker
from .token_chunker import TokenChunker

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
]
