"""
Heuristic metadata extractors over document nodes.

Each extractor returns a new node list with one metadata key added to every
node; the input list is left untouched.
"""

import re
from collections import Counter
from typing import Any, List

from ..core.models import DocNode

KEYWORD_PATTERN = re.compile(r"\b[a-z]{3,}\b")
QUESTION_SPLIT = re.compile(r"(?<=\?)")


def _with_metadata(nodes: List[DocNode], key: str, value: Any) -> List[DocNode]:
    return [
        node.model_copy(update={"metadata": {**node.metadata, key: value}})
        for node in nodes
    ]


def extract_title(nodes: List[DocNode]) -> List[DocNode]:
    """Title is the first line of the first node."""
    if not nodes:
        return nodes
    title = nodes[0].text.split("\n")[0].strip()
    if not title:
        return nodes
    return _with_metadata(nodes, "title", title)


def extract_summary(nodes: List[DocNode]) -> List[DocNode]:
    """Summary is the first two period-delimited sentences across all nodes."""
    if not nodes:
        return nodes
    text = " ".join(node.text for node in nodes)
    sentences = [s.strip() for s in text.split(".") if s.strip()]
    return _with_metadata(nodes, "summary", ". ".join(sentences[:2]))


def extract_keywords(nodes: List[DocNode], top_n: int = 5) -> List[DocNode]:
    """Most frequent lowercase words of three or more letters (ties by first use)."""
    counts: Counter = Counter()
    for node in nodes:
        counts.update(KEYWORD_PATTERN.findall(node.text.lower()))
    keywords = [word for word, _ in counts.most_common(max(0, top_n))]
    return _with_metadata(nodes, "keywords", keywords)


def extract_questions(nodes: List[DocNode]) -> List[DocNode]:
    questions = [
        part.strip()
        for node in nodes
        for part in QUESTION_SPLIT.split(node.text)
        if part.strip().endswith("?")
    ]
    return _with_metadata(nodes, "questions", questions)
