"""
Offset-preserving tokenizers used for token budget accounting.
"""

import re
from functools import lru_cache
from typing import List, Optional, Protocol, runtime_checkable

import tiktoken

from ..core import config
from ..core.errors import TokenizerLoadError
from ..core.logging import log
from ..core.models import Token

TOKEN_PATTERN = re.compile(r"\S+")


@runtime_checkable
class Tokenizer(Protocol):
    """Tokenization contract shared by every chunker."""

    def tokenize(self, text: str) -> List[Token]: ...

    def count_tokens(self, text: str) -> int: ...


def tokenize_with_positions(text: str) -> List[Token]:
    """Split text on runs of non-whitespace, keeping absolute offsets."""
    return [
        Token(match.group(0), match.start(), match.end())
        for match in TOKEN_PATTERN.finditer(text)
    ]


class WhitespaceTokenizer:
    """Tokenizer treating each run of non-whitespace as one token."""

    def tokenize(self, text: str) -> List[Token]:
        return tokenize_with_positions(text)

    def count_tokens(self, text: str) -> int:
        return len(TOKEN_PATTERN.findall(text))


class TiktokenTokenizer:
    """
    Byte-pair-encoding tokenizer backed by tiktoken.

    Token offsets are reconstructed by decoding every id on its own and laying
    the pieces end to end. Pieces of multi-byte characters may decode to
    replacement characters, so offsets are approximate for such input but
    always deterministic.
    """

    def __init__(
        self, model: Optional[str] = None, encoding: str = "cl100k_base"
    ):
        try:
            if model:
                self.encoding = tiktoken.encoding_for_model(model)
            else:
                self.encoding = tiktoken.get_encoding(encoding)
        except (KeyError, ValueError) as e:
            raise TokenizerLoadError(
                f"Could not load tiktoken encoding (model={model!r}, "
                f"encoding={encoding!r}): {e}"
            ) from e
        self.name = model or encoding

    def encode(self, text: str) -> List[int]:
        return self.encoding.encode(text, disallowed_special=())

    def tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        cursor = 0
        for token_id in self.encode(text):
            piece = self.encoding.decode([token_id])
            tokens.append(Token(piece, cursor, cursor + len(piece)))
            cursor += len(piece)
        return tokens

    def count_tokens(self, text: str) -> int:
        return len(self.encode(text))


def slice_by_token_range(
    text: str, tokens: List[Token], start: int, end: int
) -> str:
    """Return the text spanned by tokens[start]..tokens[end] (clamped)."""
    if not tokens:
        return ""
    start = max(0, start)
    end = min(len(tokens) - 1, end)
    if start > end:
        return ""
    return text[tokens[start].start : tokens[end].end]


@lru_cache(maxsize=None)
def _cached_tokenizer(
    kind: str, model: Optional[str], encoding: str
) -> Tokenizer:
    log.debug("tokenizer.create", kind=kind, model=model, encoding=encoding)
    if kind == "whitespace":
        return WhitespaceTokenizer()
    return TiktokenTokenizer(model=model, encoding=encoding)


def get_default_tokenizer() -> Tokenizer:
    """Tokenizer selected by settings (tiktoken unless configured otherwise)."""
    return _cached_tokenizer(
        config.SETTINGS.CHUNK_TOKENIZER.lower(),
        config.SETTINGS.TIKTOKEN_MODEL,
        config.SETTINGS.TIKTOKEN_ENCODING,
    )
