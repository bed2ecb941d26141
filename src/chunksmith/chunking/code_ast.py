"""
Structural block extraction for Python source using the standard ast module.
"""

import ast
from typing import Dict, List, Tuple

from ..core.models import CodeBlock
from .position import build_line_map


class _Offsets:
    """Translate ast (line, utf-8 byte column) pairs into character offsets."""

    def __init__(self, source: str):
        self.source = source
        self.line_starts = build_line_map(source)

    def to_offset(self, lineno: int, col_offset: int) -> int:
        line_start = self.line_starts[min(lineno - 1, len(self.line_starts) - 1)]
        line_bytes = self.source[line_start:].encode("utf-8")[:col_offset]
        return line_start + len(line_bytes.decode("utf-8", errors="ignore"))

    def span(self, node: ast.AST) -> Tuple[int, int]:
        start = self.to_offset(node.lineno, node.col_offset)
        decorators = getattr(node, "decorator_list", None)
        if decorators:
            first = decorators[0]
            # col_offset points at the decorator expression, after the "@"
            expr_start = self.to_offset(first.lineno, first.col_offset)
            line_start = self.line_starts[min(first.lineno - 1, len(self.line_starts) - 1)]
            at = self.source.rfind("@", line_start, expr_start)
            start = at if at != -1 else expr_start
        end = self.to_offset(node.end_lineno, node.end_col_offset)
        return start, end


def _visit(
    node: ast.AST,
    stack: List[str],
    offsets: _Offsets,
    blocks: List[CodeBlock],
    in_class: bool = False,
) -> None:
    """Record defs under node; functions directly in a class body are methods."""
    for child in ast.iter_child_nodes(node):
        if isinstance(child, ast.ClassDef):
            path = stack + [child.name]
            start, end = offsets.span(child)
            blocks.append(
                CodeBlock(kind="class", name=child.name, start=start, end=end, path=path)
            )
            _visit(child, path, offsets, blocks, in_class=True)
        elif isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
            path = stack + [child.name]
            start, end = offsets.span(child)
            blocks.append(
                CodeBlock(
                    kind="method" if in_class else "function",
                    name=child.name,
                    start=start,
                    end=end,
                    path=path,
                )
            )
            _visit(child, path, offsets, blocks)
        else:
            _visit(child, stack, offsets, blocks)


def extract_python_blocks(source: str) -> List[CodeBlock]:
    """
    Extract functions, classes and methods from Python source.

    Methods (including __init__) are reported with kind "method" and a path
    rooted at their class. Blocks are deduplicated by range and sorted by
    start offset. Returns an empty list when the source does not parse.
    """
    try:
        tree = ast.parse(source)
    except (SyntaxError, ValueError):
        return []

    blocks: List[CodeBlock] = []
    _visit(tree, [], _Offsets(source), blocks)

    unique: Dict[Tuple[int, int], CodeBlock] = {}
    for block in blocks:
        unique[(block.start, block.end)] = block
    return sorted(unique.values(), key=lambda b: b.start)
