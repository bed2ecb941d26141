"""
Paragraph -> sentence -> token cascade.

This is the general decomposition most format-specific chunkers fall back on:
structural units that fit the budget are emitted whole, oversized ones are
handed one level down.
"""

from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..text import split_into_paragraphs
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .sentence_chunker import SentenceChunker
from .token_chunker import TokenChunker


class RecursiveChunker(BaseChunker):
    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.sentence_chunker = SentenceChunker(tokenizer)
        self.token_chunker = TokenChunker(tokenizer)

    def chunk(
        self,
        text: str,
        max_tokens: Optional[int] = None,
        overlap_tokens: int = 0,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        overlap_tokens = max(0, overlap_tokens or 0)
        label = label or "recursive"
        base = MetadataBase(doc_id, source_id, base_metadata)

        paragraphs = split_into_paragraphs(text, tokenizer)
        if not paragraphs:
            return []

        chunks: List[Chunk] = []

        def append(chunk: Chunk, source_type: str, paragraph_index: int) -> None:
            chunks.append(
                chunk.model_copy(
                    update={
                        "id": f"recursive-{len(chunks)}",
                        "metadata": build_metadata(
                            format="text",
                            source_type=source_type,
                            base=base,
                            extra={
                                **carry_metadata(chunk.metadata),
                                "paragraph_index": paragraph_index,
                            },
                        ),
                    }
                )
            )

        for paragraph_index, paragraph in enumerate(paragraphs):
            if paragraph.tokens <= max_tokens:
                append(
                    Chunk(
                        id="",
                        content=paragraph.text,
                        start=paragraph.start,
                        end=paragraph.end,
                        tokens=paragraph.tokens,
                        label=label,
                    ),
                    "paragraph",
                    paragraph_index,
                )
                continue

            sentence_chunks = self.sentence_chunker.chunk(
                paragraph.text,
                max_tokens=max_tokens,
                overlap_sentences=1,
                tokenizer=tokenizer,
                label=f"{label}-sentence",
                **base._asdict(),
            )
            for sentence_chunk in sentence_chunks:
                if (sentence_chunk.tokens or 0) <= max_tokens:
                    append(
                        sentence_chunk.model_copy(
                            update={
                                "start": paragraph.start + sentence_chunk.start,
                                "end": paragraph.start + sentence_chunk.end,
                            }
                        ),
                        "sentence",
                        paragraph_index,
                    )
                    continue

                # Oversized sentence group: split by tokens, translating
                # offsets through the sentence chunk and the paragraph.
                content_start = paragraph.text.find(
                    sentence_chunk.content, sentence_chunk.start
                )
                offset = paragraph.start + max(sentence_chunk.start, content_start)
                for token_chunk in self.token_chunker.chunk(
                    sentence_chunk.content,
                    max_tokens=max_tokens,
                    overlap=overlap_tokens,
                    tokenizer=tokenizer,
                    label=f"{label}-token",
                    **base._asdict(),
                ):
                    append(
                        token_chunk.model_copy(
                            update={
                                "start": offset + token_chunk.start,
                                "end": offset + token_chunk.end,
                            }
                        ),
                        "sentence-token",
                        paragraph_index,
                    )

        if overlap_tokens > 0 and len(chunks) > 1:
            return self._interleave_overlap(chunks, overlap_tokens, label, base)
        return chunks

    def _interleave_overlap(
        self,
        chunks: List[Chunk],
        overlap_tokens: int,
        label: str,
        base: MetadataBase,
    ) -> List[Chunk]:
        """Insert a filler chunk holding the head of the following chunk."""
        smoothed: List[Chunk] = []
        for i, current in enumerate(chunks):
            smoothed.append(current)
            if i == len(chunks) - 1:
                break
            following = chunks[i + 1]
            overlap_content = following.content[:overlap_tokens]
            if not overlap_content:
                continue
            smoothed.append(
                Chunk(
                    id=f"{label}-overlap-{i}",
                    content=overlap_content,
                    start=following.start,
                    end=following.start + len(overlap_content),
                    label=f"{label}-overlap",
                    metadata=build_metadata(
                        format="text", source_type="overlap", base=base
                    ),
                )
            )
        return smoothed
