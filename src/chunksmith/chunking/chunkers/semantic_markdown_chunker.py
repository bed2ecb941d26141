"""
Structure-aware seeding followed by semantic re-merging.
"""

from typing import Any, Dict, List, Optional

from ...core.errors import MissingCollaboratorError
from ...core.models import Chunk
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .markdown_chunker import MarkdownChunker
from .semantic_chunker import SemanticChunker, SemanticEmbedder


class SemanticMarkdownChunker(BaseChunker):
    """Run MarkdownChunker, join its chunks with newlines, re-chunk semantically."""

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.markdown_chunker = MarkdownChunker(tokenizer)
        self.semantic_chunker = SemanticChunker(tokenizer)

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
            raise MissingCollaboratorError("SemanticMarkdownChunker", "an embedder")

        tokenizer = self.resolve_tokenizer(tokenizer)
        label = label or "semantic-markdown"

        markdown_chunks = self.markdown_chunker.chunk(
            text,
            max_tokens=max_tokens,
            tokenizer=tokenizer,
            label=label,
            doc_id=doc_id,
            source_id=source_id,
            base_metadata=base_metadata,
        )
        merged = await self.semantic_chunker.chunk(
            "\n".join(chunk.content for chunk in markdown_chunks),
            embedder=embedder,
            max_tokens=max_tokens,
            similarity_threshold=similarity_threshold,
            tokenizer=tokenizer,
            label=label,
            doc_id=doc_id,
            source_id=source_id,
            base_metadata=base_metadata,
        )

        results: List[Chunk] = []
        for idx, chunk in enumerate(merged):
            metadata = {**chunk.metadata, "source_type": "semantic-markdown"}
            metadata["doc_id"] = doc_id or chunk.metadata.get("doc_id")
            metadata["source_id"] = source_id or chunk.metadata.get("source_id")
            results.append(
                chunk.model_copy(update={"id": f"{label}-{idx}", "metadata": metadata})
            )
        return results
