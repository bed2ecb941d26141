"""Tests for markdown block parsing and chunking."""

from chunksmith.chunking.chunkers import MarkdownChunker
from chunksmith.chunking.chunkers.markdown_chunker import parse_blocks, to_sections


class TestParseBlocks:
    """Line-oriented block parsing."""

    def test_block_types(self):
        """Headings, code, lists, quotes and paragraphs are recognised."""
        markdown = (
            "# Title\n"
            "First line\n"
            "second line\n"
            "\n"
            "- one\n"
            "- two\n"
            "> quoted\n"
            "> text\n"
            "```sh\n"
            "ls -la\n"
            "```"
        )
        blocks = parse_blocks(markdown)

        assert [(b.type, b.content) for b in blocks] == [
            ("heading", "Title"),
            ("paragraph", "First line second line"),
            ("list", "one two"),
            ("blockquote", "quoted text"),
            ("code", "ls -la"),
        ]
        assert blocks[0].level == 1
        assert blocks[-1].language == "sh"

    def test_heading_stack_is_truncated_by_level(self):
        """A heading replaces headings at its level and below."""
        sections = to_sections(
            parse_blocks("# A\nx\n## B\ny\n### C\nz\n## D\nw")
        )
        assert [s.heading_path for s in sections] == [
            ["A"],
            ["A", "B"],
            ["A", "B", "C"],
            ["A", "D"],
        ]


class TestMarkdownChunker:
    """Block dispatch and metadata."""

    def test_heading_path(self, tokenizer):
        """Chunks carry the heading stack active where they appear."""
        chunks = MarkdownChunker(tokenizer).chunk(
            "# Title\nIntro.\n\n## Details\nMore."
        )

        by_content = {c.content: c for c in chunks}
        assert by_content["Intro."].metadata["heading_path"] == ["Title"]
        assert by_content["More."].metadata["heading_path"] == ["Title", "Details"]
        assert by_content["More."].metadata["path"] == ["Title", "Details"]
        assert all(c.metadata["format"] == "markdown" for c in chunks)
        assert all(c.metadata["source_type"] == "markdown" for c in chunks)
        assert all(c.metadata["block_type"] == "paragraph" for c in chunks)

    def test_block_index_is_monotonic(self, tokenizer):
        """block_index counts emitted chunks across the whole document."""
        chunks = MarkdownChunker(tokenizer).chunk(
            "# A\none.\n\ntwo.\n\n## B\n- three\n\n> four"
        )

        assert [c.metadata["block_index"] for c in chunks] == list(range(len(chunks)))
        assert [c.metadata["block_type"] for c in chunks] == [
            "paragraph",
            "paragraph",
            "list",
            "blockquote",
        ]
        assert chunks[0].id == "markdown-0-0-0"
        assert all(c.label == "markdown" for c in chunks)

    def test_code_blocks_use_registered_parsers(self, tokenizer):
        """A python fence is split into structural blocks."""
        markdown = "# API\n\n```python\ndef hello():\n    return 'hi'\n```\n"
        chunks = MarkdownChunker(tokenizer).chunk(markdown)

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.content == "def hello():\n    return 'hi'"
        assert chunk.metadata["source_type"] == "code"
        assert chunk.metadata["block_type"] == "code"
        assert chunk.metadata["language"] == "python"
        assert chunk.metadata["block_kind"] == "function"
        assert chunk.metadata["block_name"] == "hello"
        assert chunk.metadata["heading_path"] == ["API"]
        assert chunk.start == 0

    def test_caller_ids_propagate(self, tokenizer):
        """doc_id and source_id reach every chunk."""
        chunks = MarkdownChunker(tokenizer).chunk(
            "# T\nBody.", doc_id="d1", source_id="s1"
        )
        assert chunks[0].metadata["doc_id"] == "d1"
        assert chunks[0].metadata["source_id"] == "s1"

    def test_empty_input(self, tokenizer):
        """Nothing to chunk."""
        assert MarkdownChunker(tokenizer).chunk("") == []

    def test_code_chunks_keep_the_heading_path(self, tokenizer):
        """path is the heading stack; the symbol path lives in block_path."""
        markdown = (
            "# API\n"
            "## Greeter\n"
            "\n"
            "```python\n"
            "class Greeter:\n"
            "    def hi(self):\n"
            "        return 1\n"
            "```"
        )
        chunks = MarkdownChunker(tokenizer).chunk(markdown)

        assert [c.metadata["block_kind"] for c in chunks] == ["class", "method"]
        assert all(c.metadata["path"] == ["API", "Greeter"] for c in chunks)
        assert all(c.metadata["heading_path"] == ["API", "Greeter"] for c in chunks)
        assert chunks[1].metadata["block_path"] == ["Greeter", "hi"]
