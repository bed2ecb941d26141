"""
Shared chunker plumbing: tokenizer resolution and option clamping.
"""

from typing import Any, Awaitable, List, Optional, Protocol, Union

from ...core.models import Chunk
from ..tokenizer import Tokenizer, get_default_tokenizer

ChunkResult = Union[List[Chunk], Awaitable[List[Chunk]]]


class Chunker(Protocol):
    """Anything exposing chunk(text, **options) -> chunks (or an awaitable)."""

    def chunk(self, text: str, **options: Any) -> ChunkResult: ...


class BaseChunker:
    """Holds the tokenizer a chunker was built with; defaults lazily."""

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        self._tokenizer = tokenizer

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer or get_default_tokenizer()

    def resolve_tokenizer(self, tokenizer: Optional[Tokenizer]) -> Tokenizer:
        return tokenizer or self.tokenizer

    def resolve_max_tokens(self, max_tokens: Optional[int]) -> int:
        if max_tokens is None:
            max_tokens = self.default_max_tokens
        return max(1, int(max_tokens))
