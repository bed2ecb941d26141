"""
JSON chunking over flattened "path: value" leaf lines.
"""

import json
from typing import Any, Dict, List, NamedTuple, Optional

from ...core.logging import log
from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .token_chunker import TokenChunker

SAMPLE_PATH_LIMIT = 5


class PathValue(NamedTuple):
    path: str
    value: str
    line: int


def walk_json(value: Any, path: Optional[List[str]] = None) -> List[PathValue]:
    """Depth-first list of scalar leaves with dotted paths, in document order."""
    leaves: List[PathValue] = []

    def visit(node: Any, parts: List[str]) -> None:
        if isinstance(node, dict):
            for key, child in node.items():
                visit(child, parts + [str(key)])
            return
        if isinstance(node, list):
            for idx, child in enumerate(node):
                visit(child, parts + [str(idx)])
            return

        if node is None:
            rendered = "null"
        elif isinstance(node, str):
            rendered = node
        else:
            rendered = json.dumps(node)
        leaves.append(PathValue(".".join(parts), rendered, len(leaves) + 1))

    visit(value, list(path or []))
    return leaves


class JsonChunker(BaseChunker):
    """
    Flatten a JSON document to one "path: value" line per leaf and token-chunk it.

    Input that does not parse is chunked as plain text instead.
    """

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
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
        label = label or "json"
        base = MetadataBase(doc_id, source_id, base_metadata)

        try:
            parsed = json.loads(text)
        except ValueError as e:
            log.debug("chunk.json.fallback", error=str(e), length=len(text))
            return self.token_chunker.chunk(
                text,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=label,
                **base._asdict(),
            )

        leaves = walk_json(parsed)
        if not leaves:
            return []

        combined = "\n".join(f"{leaf.path}: {leaf.value}" for leaf in leaves)
        sample_paths = [
            {"path": leaf.path, "line": leaf.line} for leaf in leaves[:SAMPLE_PATH_LIMIT]
        ]

        return [
            chunk.model_copy(
                update={
                    "id": f"{label}-{i}",
                    "metadata": build_metadata(
                        format="json",
                        source_type="json",
                        base=base,
                        extra={
                            **carry_metadata(chunk.metadata),
                            "fields": len(leaves),
                            "sample_paths": sample_paths,
                        },
                    ),
                }
            )
            for i, chunk in enumerate(
                self.token_chunker.chunk(
                    combined,
                    max_tokens=max_tokens,
                    tokenizer=tokenizer,
                    label=label,
                    **base._asdict(),
                )
            )
        ]
