"""
StructuredDocument: document nodes, metadata extraction and chunk links.
"""

import uuid
from typing import Any, Dict, List, Optional, Sequence, Union

from ..chunking.tokenizer import Tokenizer
from ..core.logging import log
from ..core.models import Chunk, DocInput, DocNode, Link, LinkType
from .extractors import (
    extract_keywords,
    extract_questions,
    extract_summary,
    extract_title,
)
from .strategies import ChunkStrategy, chunk_by_strategy


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class StructuredDocument:
    """
    Owns one node per input text block.

    Extraction and chunking replace the node list with updated copies rather
    than mutating nodes. The link graph is derived from node links on demand.
    """

    def __init__(self, docs: Sequence[Union[DocInput, Dict[str, Any]]]):
        self._nodes: List[DocNode] = []
        for doc in docs:
            doc = DocInput.model_validate(doc)
            metadata = dict(doc.metadata)
            if doc.doc_id:
                metadata["doc_id"] = doc.doc_id
            self._nodes.append(
                DocNode(
                    id=doc.doc_id or generate_id("doc"),
                    text=doc.text,
                    metadata=metadata,
                    links=[],
                )
            )

    @classmethod
    def from_text(
        cls, text: str, metadata: Optional[Dict[str, Any]] = None
    ) -> "StructuredDocument":
        return cls([DocInput(text=text, metadata=metadata or {})])

    def add_link(self, node_id: str, related_id: str, type: LinkType) -> None:
        self._nodes = [
            node.model_copy(
                update={"links": [*node.links, Link(node_id=related_id, type=type)]}
            )
            if node.id == node_id
            else node
            for node in self._nodes
        ]

    def extract(
        self,
        title: bool = False,
        summary: bool = False,
        keywords: bool = False,
        questions: bool = False,
        keyword_count: int = 5,
    ) -> "StructuredDocument":
        """Run the selected extractors in the order title, summary, keywords, questions."""
        nodes = list(self._nodes)
        if title:
            nodes = extract_title(nodes)
        if summary:
            nodes = extract_summary(nodes)
        if keywords:
            nodes = extract_keywords(nodes, keyword_count)
        if questions:
            nodes = extract_questions(nodes)
        self._nodes = nodes
        return self

    def chunk(
        self,
        strategy: Union[ChunkStrategy, str] = ChunkStrategy.AUTO,
        max_tokens: Optional[int] = None,
        tokenizer: Optional[Tokenizer] = None,
    ) -> List[Chunk]:
        """Chunk every node, stamping doc_id and linking the node to its chunks."""
        chunks: List[Chunk] = []
        for node in list(self._nodes):
            node_chunks = [
                chunk.model_copy(
                    update={"metadata": {**chunk.metadata, "doc_id": node.id}}
                )
                for chunk in chunk_by_strategy(
                    strategy, node.text, max_tokens=max_tokens, tokenizer=tokenizer
                )
            ]
            for chunk in node_chunks:
                self.add_link(node.id, chunk.id, "chunk")
            chunks.extend(node_chunks)

        log.debug(
            "document.chunked",
            strategy=str(getattr(strategy, "value", strategy)),
            nodes=len(self._nodes),
            chunks=len(chunks),
        )
        return chunks

    def get_nodes(self) -> List[DocNode]:
        return list(self._nodes)

    def get_link_graph(self) -> Dict[str, List[str]]:
        """Node id -> ids of everything the node links to, in link order."""
        graph: Dict[str, List[str]] = {}
        for node in self._nodes:
            for link in node.links:
                graph.setdefault(node.id, []).append(link.node_id)
        return graph
