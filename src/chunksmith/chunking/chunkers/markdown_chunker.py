"""
Markdown chunking driven by block structure and the heading stack.
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional

from ...core.models import Chunk
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..text import normalize_text
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .code_chunker import CodeChunker
from .recursive_chunker import RecursiveChunker

HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
CODE_FENCE_OPEN = re.compile(r"^```([\w+#.-]+)?\s*$")
BLOCKQUOTE = re.compile(r"^>")
LIST_ITEM = re.compile(r"^(-|\*|\d+\.)\s+")


class MarkdownBlock(NamedTuple):
    type: str  # heading | code | blockquote | list | paragraph
    content: str
    level: int = 0
    language: Optional[str] = None


class MarkdownSection(NamedTuple):
    heading_path: List[str]
    blocks: List[MarkdownBlock]


def parse_blocks(markdown: str) -> List[MarkdownBlock]:
    """Parse markdown line by line into a typed block stream."""
    blocks: List[MarkdownBlock] = []
    lines = markdown.split("\n")
    buffer: List[str] = []

    def flush_paragraph() -> None:
        content = " ".join(buffer).strip()
        if content:
            blocks.append(MarkdownBlock("paragraph", content))
        buffer.clear()

    i = 0
    while i < len(lines):
        trimmed = lines[i].strip()

        heading = HEADING.match(trimmed)
        if heading:
            flush_paragraph()
            blocks.append(
                MarkdownBlock("heading", heading.group(2).strip(), level=len(heading.group(1)))
            )
            i += 1
            continue

        fence = CODE_FENCE_OPEN.match(trimmed)
        if fence:
            flush_paragraph()
            code_lines: List[str] = []
            i += 1
            while i < len(lines) and not lines[i].strip().startswith("```"):
                code_lines.append(lines[i])
                i += 1
            blocks.append(
                MarkdownBlock("code", "\n".join(code_lines), language=fence.group(1))
            )
            i += 1  # closing fence
            continue

        if BLOCKQUOTE.match(trimmed):
            flush_paragraph()
            quote_lines: List[str] = []
            while i < len(lines) and BLOCKQUOTE.match(lines[i].strip()):
                quote_lines.append(re.sub(r"^>\s?", "", lines[i].strip()))
                i += 1
            blocks.append(MarkdownBlock("blockquote", " ".join(quote_lines).strip()))
            continue

        if LIST_ITEM.match(trimmed):
            flush_paragraph()
            items: List[str] = []
            while i < len(lines) and LIST_ITEM.match(lines[i].strip()):
                items.append(LIST_ITEM.sub("", lines[i].strip()))
                i += 1
            blocks.append(MarkdownBlock("list", " ".join(items).strip()))
            continue

        if not trimmed:
            flush_paragraph()
        else:
            buffer.append(trimmed)
        i += 1

    flush_paragraph()
    return blocks


def to_sections(blocks: List[MarkdownBlock]) -> List[MarkdownSection]:
    """Group blocks under the heading stack active when they appear."""
    sections: List[MarkdownSection] = []
    stack: List[str] = []
    current = MarkdownSection([], [])

    for block in blocks:
        if block.type == "heading":
            if current.blocks:
                sections.append(current)
            stack = stack[: block.level - 1] + [block.content]
            current = MarkdownSection(list(stack), [])
            continue
        current.blocks.append(block)

    if current.blocks or current.heading_path:
        sections.append(current)
    return sections


class MarkdownChunker(BaseChunker):
    """
    Chunk markdown block by block.

    Headings are not emitted; they set the heading_path of the blocks that
    follow. Code blocks go through CodeChunker (so registered parsers apply),
    everything else through RecursiveChunker. Offsets are relative to the
    block a chunk came from.
    """

    default_max_tokens = 300

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.recursive_chunker = RecursiveChunker(tokenizer)
        self.code_chunker = CodeChunker(tokenizer)

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
        label = label or "markdown"
        base = MetadataBase(doc_id, source_id, base_metadata)

        sections = to_sections(parse_blocks(normalize_text(text, collapse_newlines=False)))
        chunks: List[Chunk] = []
        block_index = 0

        for section_index, section in enumerate(sections):
            for b_index, block in enumerate(section.blocks):
                produced = self._chunk_block(block, max_tokens, tokenizer, label, base)
                for i, chunk in enumerate(produced):
                    carried = carry_metadata(chunk.metadata)
                    # path is the heading path; code symbols stay in block_path
                    carried.pop("path", None)
                    extra: Dict[str, Any] = {
                        **carried,
                        "heading_path": list(section.heading_path),
                        "block_type": block.type,
                        "block_index": block_index,
                    }
                    if block.type == "code":
                        extra["language"] = block.language
                    chunks.append(
                        chunk.model_copy(
                            update={
                                "id": f"{label}-{section_index}-{b_index}-{i}",
                                "label": label,
                                "metadata": build_metadata(
                                    format="markdown",
                                    source_type="code" if block.type == "code" else "markdown",
                                    base=base,
                                    path=section.heading_path,
                                    extra=extra,
                                ),
                            }
                        )
                    )
                    block_index += 1

        return chunks

    def _chunk_block(
        self,
        block: MarkdownBlock,
        max_tokens: int,
        tokenizer: Tokenizer,
        label: str,
        base: MetadataBase,
    ) -> List[Chunk]:
        if block.type != "code":
            return self.recursive_chunker.chunk(
                block.content,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=f"{label}-{block.type}",
                **base._asdict(),
            )

        opening = f"```{block.language or ''}\n"
        produced = self.code_chunker.chunk(
            f"{opening}{block.content}\n```",
            max_tokens=max_tokens,
            tokenizer=tokenizer,
            label=f"{label}-code",
            **base._asdict(),
        )
        # Shift offsets back so they are relative to the code body.
        return [
            chunk.model_copy(
                update={
                    "start": max(0, chunk.start - len(opening)),
                    "end": max(0, chunk.end - len(opening)),
                }
            )
            for chunk in produced
        ]
