"""
Canonical chunk metadata construction.

Every chunker annotates its output through build_metadata so reserved keys
(format, source_type, path, doc_id, source_id) are merged in one order:
format/source_type, caller path, caller identifiers, caller base_metadata
(gap filling only), then chunker extras which always win.
"""

from typing import Any, Dict, List, NamedTuple, Optional

RESERVED_FAMILY_KEYS = ("format", "source_type")


class MetadataBase(NamedTuple):
    """Caller-supplied identifiers propagated through nested chunkers."""

    doc_id: Optional[str] = None
    source_id: Optional[str] = None
    base_metadata: Optional[Dict[str, Any]] = None


def build_metadata(
    format: str,
    source_type: str,
    base: Optional[MetadataBase] = None,
    path: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"format": format, "source_type": source_type}

    if path:
        meta["path"] = list(path)

    if base is not None:
        if base.doc_id and "doc_id" not in meta:
            meta["doc_id"] = base.doc_id
        if base.source_id and "source_id" not in meta:
            meta["source_id"] = base.source_id
        # base_metadata may add custom fields but never replaces existing keys
        for key, value in (base.base_metadata or {}).items():
            if key not in meta:
                meta[key] = value

    meta.update(extra or {})
    return meta


def carry_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Inner chunk metadata without its format/source_type, for use as extra."""
    return {
        key: value
        for key, value in (metadata or {}).items()
        if key not in RESERVED_FAMILY_KEYS
    }
