"""
Chunking at boundaries proposed by an external detector.
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from ...core.errors import MissingCollaboratorError
from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .token_chunker import TokenChunker

BoundaryDetector = Callable[[str], Union[Sequence[int], Awaitable[Sequence[int]]]]


class NeuralChunker(BaseChunker):
    """
    Slice text between detector offsets, token-splitting oversized slices.

    Offsets outside (0, len(text)) are ignored and the text length is always
    a final boundary. Whitespace-only slices are dropped.
    """

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.token_chunker = TokenChunker(tokenizer)

    async def chunk(
        self,
        text: str,
        detector: Optional[BoundaryDetector] = None,
        max_tokens: Optional[int] = None,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        if detector is None:
            raise MissingCollaboratorError("NeuralChunker", "a boundary detector")

        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        label = label or "neural"
        base = MetadataBase(doc_id, source_id, base_metadata)

        boundaries = detector(text)
        if inspect.isawaitable(boundaries):
            boundaries = await boundaries

        cuts = sorted({int(b) for b in boundaries if 0 < int(b) < len(text)} | {len(text)})

        chunks: List[Chunk] = []
        start = 0
        for boundary in cuts:
            content = text[start:boundary]
            segment_start = start
            start = boundary
            if not content.strip():
                continue

            tokens = tokenizer.count_tokens(content)
            if tokens <= max_tokens:
                chunks.append(
                    Chunk(
                        id=f"{label}-{len(chunks)}",
                        content=content,
                        start=segment_start,
                        end=boundary,
                        tokens=tokens,
                        label=label,
                        metadata=build_metadata(
                            format="neural", source_type="neural", base=base
                        ),
                    )
                )
                continue

            for piece in self.token_chunker.chunk(
                content,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=f"{label}-token",
                **base._asdict(),
            ):
                chunks.append(
                    piece.model_copy(
                        update={
                            "id": f"{label}-{len(chunks)}",
                            "start": segment_start + piece.start,
                            "end": segment_start + piece.end,
                            "metadata": build_metadata(
                                format="neural",
                                source_type="neural-token",
                                base=base,
                                extra=carry_metadata(piece.metadata),
                            ),
                        }
                    )
                )

        return chunks
