"""
Language-keyed registry of structural code parsers.

The registry is the only process-wide mutable state of the chunking package:
registration is last-wins and there is no removal API.
"""

from typing import Callable, Dict, List, Optional

from ..core.logging import log
from ..core.models import CodeBlock
from .code_ast import extract_python_blocks

ParserFn = Callable[[str], List[CodeBlock]]

_REGISTRY: Dict[str, ParserFn] = {"python": extract_python_blocks}
_ALIASES: Dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "c++": "cpp",
}


def register_code_parser(language: str, parser: ParserFn) -> None:
    _REGISTRY[language.lower()] = parser
    log.debug("code_parser.registered", language=language.lower())


def register_parser_alias(alias: str, target_language: str) -> None:
    _ALIASES[alias.lower()] = target_language.lower()


def get_code_parser(language: Optional[str]) -> Optional[ParserFn]:
    """Look up a parser by language tag, trying the tag itself before aliases."""
    if not language:
        return None
    key = language.lower()
    if key in _REGISTRY:
        return _REGISTRY[key]
    return _REGISTRY.get(_ALIASES.get(key, key))
