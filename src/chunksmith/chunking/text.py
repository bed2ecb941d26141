"""
Text normalization and sentence/paragraph segmentation.
"""

import re
import unicodedata
from typing import List, NamedTuple, Optional

from .tokenizer import Tokenizer, WhitespaceTokenizer

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+|[^.!?]+\Z")
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\ufeff]")


class Segment(NamedTuple):
    """A span of the input with its token count."""

    text: str
    start: int
    end: int
    tokens: int


def normalize_text(text: str, collapse_newlines: bool = True) -> str:
    """Normalize text for consistent chunking.

    With collapse_newlines=False only trailing line whitespace is removed, so
    blank lines and indentation survive (needed for block-structured input).
    """
    text = unicodedata.normalize("NFC", text)
    text = ZERO_WIDTH.sub("", text)
    text = text.replace("\u00a0", " ")
    # Normalize line endings CRLF -> LF
    text = re.sub(r"\r\n?", "\n", text)
    if collapse_newlines:
        text = re.sub(r"\s+\n", "\n", text)
        text = re.sub(r"\n\s+", "\n", text)
    else:
        text = re.sub(r"[ \t]+\n", "\n", text)
    return text.strip()


def split_into_sentences(
    text: str, tokenizer: Optional[Tokenizer] = None
) -> List[Segment]:
    """Split text on terminal punctuation; the whole text if none is found."""
    tokenizer = tokenizer or WhitespaceTokenizer()
    segments: List[Segment] = []
    for match in SENTENCE_PATTERN.finditer(text):
        sentence = match.group(0).strip()
        if not sentence:
            continue
        segments.append(
            Segment(
                text=match.group(0),
                start=match.start(),
                end=match.end(),
                tokens=tokenizer.count_tokens(sentence),
            )
        )

    if not segments and text.strip():
        segments.append(
            Segment(text.strip(), 0, len(text), tokenizer.count_tokens(text))
        )

    return segments


def split_into_paragraphs(
    text: str, tokenizer: Optional[Tokenizer] = None
) -> List[Segment]:
    """Split text on blank lines, recovering each paragraph's offsets."""
    tokenizer = tokenizer or WhitespaceTokenizer()
    parts = [part.strip() for part in PARAGRAPH_BREAK.split(text)]

    segments: List[Segment] = []
    cursor = 0
    for part in parts:
        if not part:
            continue
        idx = text.find(part, cursor)
        start = cursor if idx == -1 else idx
        end = start + len(part)
        segments.append(
            Segment(text[start:end], start, end, tokenizer.count_tokens(part))
        )
        cursor = end

    if not segments and text.strip():
        segments.append(
            Segment(text.strip(), 0, len(text), tokenizer.count_tokens(text))
        )

    return segments
