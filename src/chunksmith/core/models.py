from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, Field


class Token(NamedTuple):
    """A contiguous span of source text produced by a tokenizer."""

    value: str
    start: int
    end: int


class Chunk(BaseModel):
    id: str
    content: str
    start: int = 0  # offsets into the segment that was chunked
    end: int = 0
    tokens: int | None = None
    label: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float | None = None


class CodeBlock(BaseModel):
    kind: Literal["function", "class", "method"]
    name: str | None = None
    start: int
    end: int
    path: list[str] = []  # enclosing symbols, e.g. ["MyClass", "method"]


LinkType = Literal["document", "section", "chunk"]


class Link(BaseModel):
    node_id: str
    type: LinkType
    metadata: dict[str, Any] | None = None


class DocNode(BaseModel):
    id: str
    text: str
    metadata: dict[str, Any] = {}
    links: list[Link] = []


class DocInput(BaseModel):
    text: str
    metadata: dict[str, Any] = {}
    doc_id: str | None = None
