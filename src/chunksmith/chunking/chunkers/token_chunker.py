"""
Fixed-size token window chunking with overlap.
"""

from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata
from ..position import build_line_map, position_for_range
from ..tokenizer import Tokenizer, slice_by_token_range
from .base import BaseChunker


class TokenChunker(BaseChunker):
    """Slide a window of max_tokens tokens over the text, step max_tokens - overlap."""

    default_max_tokens = 200

    def chunk(
        self,
        text: str,
        max_tokens: Optional[int] = None,
        overlap: int = 0,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        overlap = max(0, min(overlap or 0, max_tokens - 1))
        label = label or "token"
        base = MetadataBase(doc_id, source_id, base_metadata)

        tokens = tokenizer.tokenize(text)
        if not tokens:
            return []

        line_map = build_line_map(text)
        step = max(1, max_tokens - overlap)
        chunks: List[Chunk] = []
        start_index = 0

        while start_index < len(tokens):
            end_index = min(len(tokens) - 1, start_index + max_tokens - 1)
            start = tokens[start_index].start
            end = tokens[end_index].end

            chunks.append(
                Chunk(
                    id=f"token-{len(chunks)}",
                    content=slice_by_token_range(
                        text, tokens, start_index, end_index
                    ),
                    start=start,
                    end=end,
                    tokens=end_index - start_index + 1,
                    label=label,
                    metadata=build_metadata(
                        format="text",
                        source_type="token",
                        base=base,
                        extra={
                            "token_start": start_index,
                            "token_end": end_index,
                            **position_for_range(start, end, line_map),
                        },
                    ),
                )
            )

            if end_index == len(tokens) - 1:
                break
            start_index += step

        return chunks
