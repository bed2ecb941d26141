"""
Similarity-driven merging of sentence chunks.
"""

import inspect
from typing import Any, Awaitable, Dict, List, Optional, Protocol, Sequence, Union

from ...core.errors import MissingCollaboratorError
from ...core.logging import log
from ...core.models import Chunk
from ..similarity import cosine_sim, mean_vector
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .sentence_chunker import SentenceChunker

Vector = Sequence[float]


class SemanticEmbedder(Protocol):
    """Anything with embed(text) returning a vector, or an awaitable of one."""

    def embed(self, text: str) -> Union[Vector, Awaitable[Vector]]: ...


async def embed_text(embedder: SemanticEmbedder, text: str) -> List[float]:
    result = embedder.embed(text)
    if inspect.isawaitable(result):
        result = await result
    return list(result)


def stamp_caller_metadata(
    metadata: Dict[str, Any],
    doc_id: Optional[str],
    source_id: Optional[str],
    base_metadata: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Caller ids overwrite; caller base_metadata only fills missing keys."""
    if doc_id:
        metadata["doc_id"] = doc_id
    if source_id:
        metadata["source_id"] = source_id
    for key, value in (base_metadata or {}).items():
        metadata.setdefault(key, value)
    return metadata


class SemanticChunker(BaseChunker):
    """
    Seed with SentenceChunker, embed each seed, then merge left to right.

    The running chunk absorbs the next seed when their cosine similarity is at
    least similarity_threshold and the combined token count stays within
    1.5 * max_tokens; its embedding becomes the element-wise mean of the two.
    Embeddings are requested one at a time in document order.
    """

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.sentence_chunker = SentenceChunker(tokenizer)

    async def chunk(
        self,
        text: str,
        embedder: Optional[SemanticEmbedder] = None,
        max_tokens: Optional[int] = None,
        similarity_threshold: float = 0.85,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        if embedder is None:
            raise MissingCollaboratorError("SemanticChunker", "an embedder")

        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        label = label or "semantic"
        merge_limit = max_tokens * 1.5

        seeds = self.sentence_chunker.chunk(
            text,
            max_tokens=max_tokens,
            tokenizer=tokenizer,
            label=f"{label}-seed",
            doc_id=doc_id,
            source_id=source_id,
            base_metadata=base_metadata,
        )
        if not seeds:
            return []

        embeddings = [await embed_text(embedder, seed.content) for seed in seeds]

        def token_count(chunk: Chunk) -> int:
            return chunk.tokens if chunk.tokens is not None else tokenizer.count_tokens(chunk.content)

        merged: List[Chunk] = []
        current, current_embedding = seeds[0], embeddings[0]
        for candidate, candidate_embedding in zip(seeds[1:], embeddings[1:]):
            sim = cosine_sim(current_embedding, candidate_embedding)
            combined_tokens = token_count(current) + token_count(candidate)

            if sim >= similarity_threshold and combined_tokens <= merge_limit:
                metadata = {**current.metadata, "merged": True, "similarity": sim}
                if "position" in current.metadata and "position" in candidate.metadata:
                    metadata["position"] = {
                        "start": current.metadata["position"]["start"],
                        "end": candidate.metadata["position"]["end"],
                    }
                current = current.model_copy(
                    update={
                        "content": f"{current.content}\n{candidate.content}",
                        "end": candidate.end,
                        "tokens": combined_tokens,
                        "metadata": metadata,
                    }
                )
                current_embedding = mean_vector(current_embedding, candidate_embedding)
            else:
                merged.append(current)
                current, current_embedding = candidate, candidate_embedding
        merged.append(current)

        log.debug(
            "chunk.semantic.merged",
            seeds=len(seeds),
            chunks=len(merged),
            threshold=similarity_threshold,
        )

        return [
            chunk.model_copy(
                update={
                    "id": f"{label}-{idx}",
                    "label": label,
                    "metadata": stamp_caller_metadata(
                        {**chunk.metadata, "source_type": "semantic", "chunk_index": idx},
                        doc_id,
                        source_id,
                        base_metadata,
                    ),
                }
            )
            for idx, chunk in enumerate(merged)
        ]
