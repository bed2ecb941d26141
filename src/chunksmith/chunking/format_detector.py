"""
Lightweight content-type sniffing used by the "auto" chunking strategy.
"""

import json
import re
from enum import Enum


class DetectedFormat(str, Enum):
    """Formats the detector can report."""

    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"
    LATEX = "latex"
    CODE = "code"
    TABLE = "table"
    TEXT = "text"


HTML_DOCTYPE = re.compile(r"<!doctype html>", re.IGNORECASE)
HTML_TAG = re.compile(
    r"<(html|body|head|div|span|p|h[1-6]|section|article|main|nav|table|ul|ol|li)[^>]*>",
    re.IGNORECASE,
)
LATEX_MARKER = re.compile(r"\\(section|subsection|subsubsection|begin\{document\})")
TABLE_ROW = re.compile(r"\n\|.+\|\n")
TABLE_SEPARATOR = re.compile(r"\|\s*-{2,}\s*\|")
MARKDOWN_SIGNALS = [
    re.compile(r"^#{1,6}\s+", re.MULTILINE),
    re.compile(r"^(\*|-|\+|\d+\.)\s+", re.MULTILINE),
    re.compile(r"^>\s", re.MULTILINE),
    re.compile(r"```[\s\S]*?```"),
    re.compile(r"\[.+?\]\(.+?\)"),
]


def _is_json(text: str) -> bool:
    wrapped = (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )
    if not wrapped:
        return False
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def detect_format(content: str) -> DetectedFormat:
    """Detect the coarse format of content using ordered heuristics."""
    text = content.strip()
    if not text:
        return DetectedFormat.TEXT

    if _is_json(text):
        return DetectedFormat.JSON

    if HTML_DOCTYPE.search(text) or HTML_TAG.search(text):
        return DetectedFormat.HTML

    if LATEX_MARKER.search(text):
        return DetectedFormat.LATEX

    if "```" in text:
        return DetectedFormat.CODE

    if TABLE_ROW.search(text) and TABLE_SEPARATOR.search(text):
        return DetectedFormat.TABLE

    if any(pattern.search(text) for pattern in MARKDOWN_SIGNALS):
        return DetectedFormat.MARKDOWN

    return DetectedFormat.TEXT
