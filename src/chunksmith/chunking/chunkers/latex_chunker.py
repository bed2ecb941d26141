"""
LaTeX chunking by sectioning commands.
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .recursive_chunker import RecursiveChunker

SECTION_COMMAND = re.compile(r"\\(section|subsection|subsubsection)\*?\{([^}]*)\}")


class LatexSection(NamedTuple):
    heading: Optional[str]
    content: str
    kind: str  # section | subsection | subsubsection | none


def split_latex(text: str) -> List[LatexSection]:
    """Split on sectioning commands; text before the first one has no heading."""
    sections: List[LatexSection] = []
    heading: Optional[str] = None
    kind = "none"
    last_index = 0

    for match in SECTION_COMMAND.finditer(text):
        body = text[last_index : match.start()].strip()
        if body:
            sections.append(LatexSection(heading, body, kind))
        heading = match.group(2).strip()
        kind = match.group(1)
        last_index = match.end()

    tail = text[last_index:].strip()
    if tail:
        sections.append(LatexSection(heading, tail, kind))
    return sections


class LatexChunker(BaseChunker):
    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.recursive_chunker = RecursiveChunker(tokenizer)

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
        label = label or "latex"
        base = MetadataBase(doc_id, source_id, base_metadata)

        chunks: List[Chunk] = []
        for idx, section in enumerate(split_latex(text)):
            section_chunks = self.recursive_chunker.chunk(
                section.content,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=f"{label}-section",
                **base._asdict(),
            )
            for cidx, chunk in enumerate(section_chunks):
                chunks.append(
                    chunk.model_copy(
                        update={
                            "id": f"{label}-{idx}-{cidx}",
                            "label": label,
                            "metadata": build_metadata(
                                format="latex",
                                source_type="latex",
                                base=base,
                                path=[section.heading] if section.heading else None,
                                extra={
                                    **carry_metadata(chunk.metadata),
                                    "heading": section.heading,
                                    "section_type": section.kind,
                                },
                            ),
                        }
                    )
                )
        return chunks
