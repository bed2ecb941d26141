"""
Offset to line/column mapping for chunk position metadata.
"""

from bisect import bisect_right
from typing import Dict, List


def build_line_map(text: str) -> List[int]:
    """Return 0-based start offsets of every line (handles \\n, \\r\\n, \\r)."""
    starts = [0]
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\r":
            if i + 1 < length and text[i + 1] == "\n":
                i += 1
            starts.append(i + 1)
        elif ch == "\n":
            starts.append(i + 1)
        i += 1
    return starts


def offset_to_line_col(offset: int, line_map: List[int]) -> Dict[str, int]:
    """Convert a character offset to a 1-based line/column pair."""
    line_index = max(0, bisect_right(line_map, offset) - 1)
    column = max(1, offset - line_map[line_index] + 1)
    return {"line": line_index + 1, "column": column}


def position_for_range(
    start: int, end: int, line_map: List[int]
) -> Dict[str, Dict[str, Dict[str, int]]]:
    return {
        "position": {
            "start": offset_to_line_col(start, line_map),
            "end": offset_to_line_col(end, line_map),
        }
    }
