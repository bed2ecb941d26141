"""
HTML to text normalization followed by recursive chunking.
"""

import re
from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .recursive_chunker import RecursiveChunker

BLOCK_TAGS = [
    "p",
    "div",
    "section",
    "article",
    "header",
    "footer",
    "main",
    "nav",
    "ul",
    "ol",
    "li",
    "table",
    "tr",
    "td",
    "th",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "br",
]

SCRIPT_OR_STYLE = re.compile(r"<(script|style)[^>]*>[\s\S]*?</\1>", re.IGNORECASE)
BLOCK_TAG = re.compile(rf"</?({'|'.join(BLOCK_TAGS)})\b[^>]*>", re.IGNORECASE)
ANY_TAG = re.compile(r"<[^>]+>")
ENTITY = re.compile(r"&(nbsp|amp|lt|gt|quot|apos|#39|#\d+|#[xX][0-9a-fA-F]+);")

NAMED_ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "#39": "'",
}


def _decode_entity(match: "re.Match[str]") -> str:
    name = match.group(1)
    if name in NAMED_ENTITIES:
        return NAMED_ENTITIES[name]
    try:
        if name[1] in "xX":
            return chr(int(name[2:], 16))
        return chr(int(name[1:]))
    except (ValueError, OverflowError):
        return match.group(0)


def normalize_html(html: str) -> str:
    """Reduce HTML to text, keeping block boundaries as newlines."""
    text = SCRIPT_OR_STYLE.sub("", html)
    text = BLOCK_TAG.sub("\n", text)
    text = ANY_TAG.sub("", text)
    # One pass so "&amp;lt;" decodes to "&lt;", not "<".
    text = ENTITY.sub(_decode_entity, text)
    text = re.sub(r"\s+\n", "\n", text)
    text = re.sub(r"\n\s+", "\n", text)
    return text.strip()


class HtmlChunker(BaseChunker):
    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.recursive_chunker = RecursiveChunker(tokenizer)

    def chunk(
        self,
        text: str,
        max_tokens: Optional[int] = None,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        label = label or "html"
        base = MetadataBase(doc_id, source_id, base_metadata)

        cleaned = normalize_html(text)
        if not cleaned:
            return []

        return [
            chunk.model_copy(
                update={
                    "id": f"{label}-{i}",
                    "metadata": build_metadata(
                        format="html",
                        source_type="html",
                        base=base,
                        extra=carry_metadata(chunk.metadata),
                    ),
                }
            )
            for i, chunk in enumerate(
                self.recursive_chunker.chunk(
                    cleaned,
                    max_tokens=max_tokens,
                    tokenizer=tokenizer,
                    label=label,
                    **base._asdict(),
                )
            )
        ]
