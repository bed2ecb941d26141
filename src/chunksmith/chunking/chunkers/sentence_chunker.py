"""
Greedy sentence packing with optional sentence overlap.
"""

from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata
from ..position import build_line_map, position_for_range
from ..text import Segment, split_into_sentences
from ..tokenizer import Tokenizer, slice_by_token_range
from .base import BaseChunker


class SentenceChunker(BaseChunker):
    """
    Pack consecutive sentences into chunks of at most max_tokens tokens.

    When a group overflows and holds more than one sentence, the overflowing
    sentence is pushed into the next group, seeded with the last
    overlap_sentences sentences of the emitted one. A single sentence larger
    than the budget is emitted on its own.
    """

    default_max_tokens = 200

    def chunk(
        self,
        text: str,
        max_tokens: Optional[int] = None,
        overlap_sentences: int = 0,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        overlap_sentences = max(0, overlap_sentences or 0)
        label = label or "sentence"
        base = MetadataBase(doc_id, source_id, base_metadata)

        sentences = split_into_sentences(text, tokenizer)
        if not sentences:
            return []

        tokens = tokenizer.tokenize(text)
        line_map = build_line_map(text)
        chunks: List[Chunk] = []

        def emit(group: List[Segment]) -> None:
            if not group:
                return
            first, last = group[0], group[-1]
            # Token indices come from prefix counts so the content is sliced
            # from the full text, inter-sentence whitespace included.
            start_index = tokenizer.count_tokens(text[: first.start])
            end_index = tokenizer.count_tokens(text[: last.end]) - 1
            content = slice_by_token_range(text, tokens, start_index, end_index)
            # Offsets follow the sliced content, not the whitespace-led match.
            start, end = first.start, last.end
            if content:
                start_index = max(0, start_index)
                start = tokens[min(start_index, len(tokens) - 1)].start
                end = start + len(content)
            chunk_index = len(chunks)
            chunks.append(
                Chunk(
                    id=f"sentence-{chunk_index}",
                    content=content,
                    start=start,
                    end=end,
                    tokens=sum(s.tokens for s in group),
                    label=label,
                    metadata=build_metadata(
                        format="text",
                        source_type="sentence",
                        base=base,
                        extra={
                            "chunk_index": chunk_index,
                            "sentence_count": len(group),
                            **position_for_range(start, end, line_map),
                        },
                    ),
                )
            )

        current: List[Segment] = []
        for sentence in sentences:
            current.append(sentence)
            if sum(s.tokens for s in current) > max_tokens and len(current) > 1:
                overflow = current.pop()
                emit(current)
                seed = current[-overlap_sentences:] if overlap_sentences else []
                current = seed + [overflow]

        emit(current)
        return chunks
