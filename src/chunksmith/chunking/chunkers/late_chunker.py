"""
Late chunking: overlapping windows over an existing chunk sequence.
"""

import inspect
from typing import Any, Dict, List, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata
from .base import Chunker
from .recursive_chunker import RecursiveChunker


class LateChunker:
    """
    Merge window_size consecutive base chunks into one, advancing by stride.

    The base chunker may be synchronous or return an awaitable; it defaults to
    RecursiveChunker.
    """

    def __init__(self, base_chunker: Optional[Chunker] = None):
        self.base_chunker = base_chunker or RecursiveChunker()

    async def chunk(
        self,
        text: str,
        base_chunker: Optional[Chunker] = None,
        window_size: int = 2,
        stride: int = 1,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        base_chunker = base_chunker or self.base_chunker
        window_size = max(1, window_size or 1)
        stride = max(1, stride or 1)
        label = label or "late"
        base = MetadataBase(doc_id, source_id, base_metadata)

        base_chunks = base_chunker.chunk(text)
        if inspect.isawaitable(base_chunks):
            base_chunks = await base_chunks
        if not base_chunks:
            return []

        merged: List[Chunk] = []
        for i in range(0, len(base_chunks), stride):
            window = base_chunks[i : i + window_size]
            merged.append(
                Chunk(
                    id=f"{label}-{len(merged)}",
                    content="\n".join(c.content for c in window),
                    start=window[0].start,
                    end=window[-1].end,
                    tokens=sum(c.tokens or 0 for c in window),
                    label=label,
                    metadata=build_metadata(
                        format="late",
                        source_type="late-window",
                        base=base,
                        extra={"merged_from": [c.id for c in window]},
                    ),
                )
            )
        return merged
