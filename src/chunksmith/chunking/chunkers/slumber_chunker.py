"""
Smoothing of small sentence chunks towards a minimum token target.
"""

from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .sentence_chunker import SentenceChunker
from .token_chunker import TokenChunker


class SlumberChunker(BaseChunker):
    """
    Buffer sentence chunks until they reach min_tokens, then emit them merged.

    Useful when upstream chunking produces many tiny fragments. A buffer that
    ends up over max_tokens is token-split.
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
        min_tokens: Optional[int] = None,
        overlap_tokens: int = 0,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        if min_tokens is None:
            min_tokens = max_tokens // 2
        min_tokens = max(1, min(min_tokens, max_tokens))
        overlap_tokens = max(0, overlap_tokens or 0)
        label = label or "slumber"
        base = MetadataBase(doc_id, source_id, base_metadata)

        seeds = self.sentence_chunker.chunk(
            text,
            max_tokens=max_tokens,
            tokenizer=tokenizer,
            label=f"{label}-seed",
            **base._asdict(),
        )

        merged: List[Chunk] = []
        buffer: List[Chunk] = []

        def flush() -> None:
            if not buffer:
                return
            content = "\n".join(c.content for c in buffer)
            start = buffer[0].start
            tokens = tokenizer.count_tokens(content)

            if tokens <= max_tokens:
                merged.append(
                    Chunk(
                        id=f"{label}-{len(merged)}",
                        content=content,
                        start=start,
                        end=buffer[-1].end,
                        tokens=tokens,
                        label=label,
                        metadata=build_metadata(
                            format="slumber",
                            source_type="slumber",
                            base=base,
                            extra={"smoothed": len(buffer) > 1},
                        ),
                    )
                )
            else:
                for piece in self.token_chunker.chunk(
                    content,
                    max_tokens=max_tokens,
                    overlap=overlap_tokens,
                    tokenizer=tokenizer,
                    label=f"{label}-token",
                    **base._asdict(),
                ):
                    merged.append(
                        piece.model_copy(
                            update={
                                "id": f"{label}-{len(merged)}",
                                "start": start + piece.start,
                                "end": start + piece.end,
                                "label": label,
                                "metadata": build_metadata(
                                    format="slumber",
                                    source_type="slumber-token",
                                    base=base,
                                    extra=carry_metadata(piece.metadata),
                                ),
                            }
                        )
                    )
            buffer.clear()

        for seed in seeds:
            buffer.append(seed)
            buffered = sum(
                c.tokens if c.tokens is not None else tokenizer.count_tokens(c.content)
                for c in buffer
            )
            if buffered >= min_tokens:
                flush()
        flush()

        if overlap_tokens > 0 and len(merged) > 1:
            return self._interleave_overlap(merged, overlap_tokens, label, base)
        return merged

    def _interleave_overlap(
        self,
        chunks: List[Chunk],
        overlap_tokens: int,
        label: str,
        base: MetadataBase,
    ) -> List[Chunk]:
        smoothed: List[Chunk] = []
        for i, current in enumerate(chunks):
            smoothed.append(current)
            if i == len(chunks) - 1:
                break
            following = chunks[i + 1]
            overlap_content = " ".join(following.content.split()[:overlap_tokens])
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
                        format="slumber", source_type="slumber-overlap", base=base
                    ),
                )
            )
        return smoothed
