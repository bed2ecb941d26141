"""Tests for line/column mapping and metadata merging."""

from chunksmith.chunking.metadata import MetadataBase, build_metadata, carry_metadata
from chunksmith.chunking.position import (
    build_line_map,
    offset_to_line_col,
    position_for_range,
)


class TestPosition:
    """Offset to line/column conversion."""

    def test_line_map_handles_all_newline_styles(self):
        """LF, CRLF and lone CR each start a new line."""
        assert build_line_map("a\nb\r\nc\rd") == [0, 2, 5, 7]

    def test_offsets_are_one_based(self):
        """Lines and columns count from 1."""
        line_map = build_line_map("ab\ncd\nef")
        assert offset_to_line_col(0, line_map) == {"line": 1, "column": 1}
        assert offset_to_line_col(4, line_map) == {"line": 2, "column": 2}
        assert offset_to_line_col(6, line_map) == {"line": 3, "column": 1}

    def test_position_for_range(self):
        """A range is wrapped under a single position key."""
        line_map = build_line_map("ab\ncd")
        assert position_for_range(1, 4, line_map) == {
            "position": {
                "start": {"line": 1, "column": 2},
                "end": {"line": 2, "column": 2},
            }
        }


class TestBuildMetadata:
    """Merge order of reserved keys."""

    def test_merge_order(self):
        """Caller ids beat base_metadata; chunker extras beat everything."""
        meta = build_metadata(
            format="text",
            source_type="token",
            base=MetadataBase(
                doc_id="doc-1",
                source_id="src-1",
                base_metadata={"doc_id": "other", "format": "bogus", "team": "docs"},
            ),
            path=["A", "B"],
            extra={"source_type": "custom", "token_start": 0},
        )

        assert meta == {
            "format": "text",
            "source_type": "custom",
            "path": ["A", "B"],
            "doc_id": "doc-1",
            "source_id": "src-1",
            "team": "docs",
            "token_start": 0,
        }

    def test_empty_path_and_missing_ids_are_omitted(self):
        """Nothing is added for absent caller values."""
        meta = build_metadata("json", "json", base=MetadataBase(), path=[])
        assert meta == {"format": "json", "source_type": "json"}

    def test_carry_metadata_drops_family_keys(self):
        """Inner format/source_type do not leak into wrapping chunkers."""
        inner = {"format": "text", "source_type": "paragraph", "paragraph_index": 2}
        assert carry_metadata(inner) == {"paragraph_index": 2}
        assert carry_metadata(None) == {}
