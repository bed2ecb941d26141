"""
Fenced-code aware chunking with pluggable structural parsers.
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional

from ...core.models import Chunk, CodeBlock
from ..code_parsers import ParserFn, get_code_parser
from ..metadata import MetadataBase, build_metadata, carry_metadata
from ..position import build_line_map, position_for_range
from ..tokenizer import Tokenizer
from .base import BaseChunker
from .recursive_chunker import RecursiveChunker
from .token_chunker import TokenChunker

CODE_FENCE = re.compile(r"```([\w+#.-]+)?[ \t]*\n?([\s\S]*?)```")


class CodeSegment(NamedTuple):
    """A fenced code body or a run of text between fences."""

    type: str  # "code" | "text"
    content: str
    start: int
    end: int
    language: Optional[str] = None
    fence_start: int = 0
    fence_end: int = 0


def split_code_and_text(text: str) -> List[CodeSegment]:
    segments: List[CodeSegment] = []
    last_index = 0

    for match in CODE_FENCE.finditer(text):
        if match.start() > last_index:
            segments.append(
                CodeSegment("text", text[last_index : match.start()], last_index, match.start())
            )
        segments.append(
            CodeSegment(
                "code",
                match.group(2),
                match.start(2),
                match.end(2),
                language=match.group(1) or None,
                fence_start=match.start(),
                fence_end=match.end(),
            )
        )
        last_index = match.end()

    if last_index < len(text):
        segments.append(CodeSegment("text", text[last_index:], last_index, len(text)))

    return segments


class CodeChunker(BaseChunker):
    """
    Chunk source code embedded in fences.

    Text between fences goes through RecursiveChunker. Each code body is split
    into structural blocks when a parser is available (the explicit parser
    argument first, then the registry by language tag); blocks over budget are
    token-split. Without blocks a body is emitted whole or token-split.
    """

    default_max_tokens = 400

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        super().__init__(tokenizer)
        self.recursive_chunker = RecursiveChunker(tokenizer)
        self.token_chunker = TokenChunker(tokenizer)

    def chunk(
        self,
        text: str,
        max_tokens: Optional[int] = None,
        parser: Optional[ParserFn] = None,
        tokenizer: Optional[Tokenizer] = None,
        label: Optional[str] = None,
        doc_id: Optional[str] = None,
        source_id: Optional[str] = None,
        base_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[Chunk]:
        tokenizer = self.resolve_tokenizer(tokenizer)
        max_tokens = self.resolve_max_tokens(max_tokens)
        label = label or "code"
        base = MetadataBase(doc_id, source_id, base_metadata)

        line_map = build_line_map(text)
        chunks: List[Chunk] = []

        def code_metadata(
            segment: CodeSegment,
            start: int,
            end: int,
            block: Optional[CodeBlock] = None,
            inner: Optional[Dict[str, Any]] = None,
        ) -> Dict[str, Any]:
            extra: Dict[str, Any] = {
                **carry_metadata(inner),
                "type": "code",
                "language": segment.language,
            }
            if block is not None:
                extra.update(
                    block_kind=block.kind,
                    block_name=block.name,
                    block_path=list(block.path),
                    block_parent=list(block.path[:-1]),
                )
            extra.update(position_for_range(start, end, line_map))
            extra["fence_position"] = position_for_range(
                segment.fence_start, segment.fence_end, line_map
            )["position"]
            return build_metadata(
                format="code",
                source_type="code",
                base=base,
                path=list(block.path) if block is not None else None,
                extra=extra,
            )

        def emit_split(
            segment: CodeSegment,
            body: str,
            offset: int,
            sub_label: str,
            block: Optional[CodeBlock] = None,
        ) -> None:
            for piece in self.token_chunker.chunk(
                body,
                max_tokens=max_tokens,
                tokenizer=tokenizer,
                label=sub_label,
                **base._asdict(),
            ):
                start = offset + piece.start
                end = offset + piece.end
                chunks.append(
                    piece.model_copy(
                        update={
                            "id": f"{label}-{len(chunks)}",
                            "start": start,
                            "end": end,
                            "label": label,
                            "metadata": code_metadata(
                                segment, start, end, block, piece.metadata
                            ),
                        }
                    )
                )

        for segment in split_code_and_text(text):
            if segment.type == "text":
                for piece in self.recursive_chunker.chunk(
                    segment.content,
                    max_tokens=max_tokens,
                    tokenizer=tokenizer,
                    label=f"{label}-text",
                    **base._asdict(),
                ):
                    start = segment.start + piece.start
                    end = segment.start + piece.end
                    chunks.append(
                        piece.model_copy(
                            update={
                                "id": f"{label}-{len(chunks)}",
                                "start": start,
                                "end": end,
                                "metadata": build_metadata(
                                    format="code",
                                    source_type="text",
                                    base=base,
                                    extra={
                                        **carry_metadata(piece.metadata),
                                        **position_for_range(start, end, line_map),
                                    },
                                ),
                            }
                        )
                    )
                continue

            if not segment.content.strip():
                continue

            segment_parser = parser or get_code_parser(segment.language)
            blocks = [
                CodeBlock.model_validate(block)
                for block in (segment_parser(segment.content) if segment_parser else [])
            ]

            if blocks:
                for block in blocks:
                    block_text = segment.content[block.start : block.end]
                    block_tokens = tokenizer.count_tokens(block_text)
                    offset = segment.start + block.start
                    if block_tokens > max_tokens:
                        emit_split(segment, block_text, offset, f"{label}-ast", block)
                        continue
                    chunks.append(
                        Chunk(
                            id=f"{label}-{len(chunks)}",
                            content=block_text,
                            start=offset,
                            end=segment.start + block.end,
                            tokens=block_tokens,
                            label=label,
                            metadata=code_metadata(
                                segment, offset, segment.start + block.end, block
                            ),
                        )
                    )
                continue

            token_count = tokenizer.count_tokens(segment.content)
            if token_count <= max_tokens:
                chunks.append(
                    Chunk(
                        id=f"{label}-{len(chunks)}",
                        content=segment.content,
                        start=segment.start,
                        end=segment.end,
                        tokens=token_count,
                        label=label,
                        metadata=code_metadata(segment, segment.start, segment.end),
                    )
                )
            else:
                emit_split(segment, segment.content, segment.start, f"{label}-block")

        return chunks
