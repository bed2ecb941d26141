"""
Chunking for prose interleaved with pipe or comma-separated tables.
"""

import re
from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .sentence_chunker import SentenceChunker
from .token_chunker import TokenChunker

SENTENCE_END = re.compile(r"[.;!?]$")


def is_table_line(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed:
        return False
    if trimmed.startswith("|"):
        return True
    return trimmed.count(",") >= 2 and not SENTENCE_END.search(trimmed)


class TableChunker(BaseChunker):
    """
    Emit table runs as single chunks and prose runs through SentenceChunker.

    A table run over budget is token-split; the pieces are still marked as
    table chunks but may cut through rows.
    """

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.sentence_chunker = SentenceChunker(tokenizer)
        self.token_chunker = TokenChunker(tokenizer)

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
        label = label or "table"
        base = MetadataBase(doc_id, source_id, base_metadata)

        lines = text.split("\n")
        line_starts: List[int] = []
        cursor = 0
        for line in lines:
            line_starts.append(cursor)
            cursor += len(line) + 1

        chunks: List[Chunk] = []

        def flush_text(first: int, last: int) -> None:
            raw = "\n".join(lines[first:last])
            if not raw.strip():
                return
            offset = line_starts[first]
            for piece in self.sentence_chunker.chunk(
                raw,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label="text",
                **base._asdict(),
            ):
                chunks.append(
                    piece.model_copy(
                        update={
                            "id": f"{label}-text-{len(chunks)}",
                            "start": offset + piece.start,
                            "end": offset + piece.end,
                            "metadata": build_metadata(
                                format="table",
                                source_type="text",
                                base=base,
                                extra=carry_metadata(piece.metadata),
                            ),
                        }
                    )
                )

        def flush_table(first: int, last: int) -> None:
            table_text = "\n".join(lines[first:last])
            offset = line_starts[first]
            table_tokens = tokenizer.count_tokens(table_text)
            if table_tokens <= max_tokens:
                chunks.append(
                    Chunk(
                        id=f"{label}-{len(chunks)}",
                        content=table_text,
                        start=offset,
                        end=offset + len(table_text),
                        tokens=table_tokens,
                        label=label,
                        metadata=build_metadata(
                            format="table",
                            source_type="table",
                            base=base,
                            extra={"type": "table"},
                        ),
                    )
                )
                return

            for piece in self.token_chunker.chunk(
                table_text,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=f"{label}-row",
                **base._asdict(),
            ):
                chunks.append(
                    piece.model_copy(
                        update={
                            "id": f"{label}-{len(chunks)}",
                            "start": offset + piece.start,
                            "end": offset + piece.end,
                            "metadata": build_metadata(
                                format="table",
                                source_type="table",
                                base=base,
                                extra={"type": "table", **carry_metadata(piece.metadata)},
                            ),
                        }
                    )
                )

        i = 0
        prose_start = 0
        while i < len(lines):
            if not is_table_line(lines[i]):
                i += 1
                continue
            flush_text(prose_start, i)
            j = i
            while j < len(lines) and is_table_line(lines[j]):
                j += 1
            flush_table(i, j)
            i = prose_start = j

        flush_text(prose_start, len(lines))
        return chunks
