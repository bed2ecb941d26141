"""Tests for late windowing, detector-driven and smoothing chunkers."""

import asyncio

import pytest

from chunksmith.chunking.chunkers import LateChunker, NeuralChunker, SlumberChunker
from chunksmith.core.errors import MissingCollaboratorError
from chunksmith.core.models import Chunk


def _stub_chunks():
    return [
        Chunk(id="a", content="alpha", start=0, end=5, tokens=1),
        Chunk(id="b", content="beta", start=6, end=10, tokens=1),
        Chunk(id="c", content="gamma", start=11, end=16, tokens=1),
    ]


class StubChunker:
    def chunk(self, text, **options):
        return _stub_chunks()


class AsyncStubChunker:
    async def chunk(self, text, **options):
        return _stub_chunks()


class TestLateChunker:
    """Sliding windows over base chunks."""

    def test_windows(self):
        """window_size=2, stride=1 produces one window per start index."""
        chunks = asyncio.run(LateChunker(StubChunker()).chunk("ignored"))

        assert [c.content for c in chunks] == ["alpha\nbeta", "beta\ngamma", "gamma"]
        assert [c.metadata["merged_from"] for c in chunks] == [["a", "b"], ["b", "c"], ["c"]]
        assert [(c.start, c.end) for c in chunks] == [(0, 10), (6, 16), (11, 16)]
        assert [c.tokens for c in chunks] == [2, 2, 1]
        assert [c.id for c in chunks] == ["late-0", "late-1", "late-2"]
        assert all(c.metadata["format"] == "late" for c in chunks)
        assert all(c.metadata["source_type"] == "late-window" for c in chunks)

    def test_async_base_chunker_and_stride(self):
        """Awaitable base chunkers work; stride skips windows."""
        chunks = asyncio.run(
            LateChunker().chunk(
                "ignored", base_chunker=AsyncStubChunker(), window_size=2, stride=2
            )
        )
        assert [c.metadata["merged_from"] for c in chunks] == [["a", "b"], ["c"]]

    def test_zero_sizes_are_clamped(self):
        """window_size and stride below one behave as one."""
        chunks = asyncio.run(
            LateChunker(StubChunker()).chunk("ignored", window_size=0, stride=0)
        )
        assert [c.content for c in chunks] == ["alpha", "beta", "gamma"]

    def test_default_base_chunker(self, tokenizer):
        """Without a base chunker the recursive chunker is used."""
        text = "First paragraph.\n\nSecond paragraph."
        chunks = asyncio.run(LateChunker().chunk(text, label="win", doc_id="d"))

        assert chunks[0].content == "First paragraph.\nSecond paragraph."
        assert chunks[0].metadata["merged_from"] == ["recursive-0", "recursive-1"]
        assert chunks[0].metadata["doc_id"] == "d"
        assert chunks[0].id == "win-0"


class TestNeuralChunker:
    """Slicing at detector boundaries."""

    TEXT = "First part. Second part. Third part."

    def _detector(self, text):
        return [text.index("Second"), text.index("Third"), 0, -3, 999]

    def test_slices_at_boundaries(self, tokenizer):
        """Out-of-range offsets are ignored and slices cover the text."""
        chunks = asyncio.run(
            NeuralChunker(tokenizer).chunk(self.TEXT, detector=self._detector)
        )

        assert [c.content for c in chunks] == [
            "First part. ",
            "Second part. ",
            "Third part.",
        ]
        assert "".join(c.content for c in chunks) == self.TEXT
        assert [c.id for c in chunks] == ["neural-0", "neural-1", "neural-2"]
        assert all(c.metadata["source_type"] == "neural" for c in chunks)

    def test_async_detector(self, tokenizer):
        """Awaitable detectors are supported."""

        async def detector(text):
            return [text.index("Third")]

        chunks = asyncio.run(NeuralChunker(tokenizer).chunk(self.TEXT, detector=detector))
        assert [c.content for c in chunks] == ["First part. Second part. ", "Third part."]

    def test_oversized_slices_are_token_split(self, tokenizer):
        """Slices over budget become neural-token pieces with input offsets."""
        chunks = asyncio.run(
            NeuralChunker(tokenizer).chunk(
                self.TEXT, detector=lambda text: [], max_tokens=2
            )
        )

        assert [c.content for c in chunks] == ["First part.", "Second part.", "Third part."]
        assert all(c.metadata["source_type"] == "neural-token" for c in chunks)
        assert all(self.TEXT[c.start : c.end] == c.content for c in chunks)

    def test_whitespace_slices_are_dropped(self, tokenizer):
        text = "Alpha.   \n  Beta."
        chunks = asyncio.run(
            NeuralChunker(tokenizer).chunk(
                text, detector=lambda t: [t.index(" "), t.index("Beta")]
            )
        )
        assert [c.content for c in chunks] == ["Alpha.", "Beta."]

    def test_missing_detector(self, tokenizer):
        with pytest.raises(MissingCollaboratorError):
            asyncio.run(NeuralChunker(tokenizer).chunk(self.TEXT))


class TestSlumberChunker:
    """Buffering of small sentence chunks."""

    def test_flushes_at_min_tokens(self, tokenizer):
        """A seed reaching min_tokens flushes; the remainder flushes at the end."""
        chunks = SlumberChunker(tokenizer).chunk(
            "One two. Three four. Five six.", max_tokens=4, min_tokens=4
        )

        assert [c.content for c in chunks] == ["One two. Three four.", "Five six."]
        assert all(c.metadata["source_type"] == "slumber" for c in chunks)
        assert chunks[0].metadata["smoothed"] is False
        assert [c.id for c in chunks] == ["slumber-0", "slumber-1"]

    def test_overlap_fillers(self, tokenizer):
        """Fillers hold the first overlap_tokens words of the next chunk."""
        chunks = SlumberChunker(tokenizer).chunk(
            "One two. Three four. Five six.",
            max_tokens=4,
            min_tokens=4,
            overlap_tokens=1,
        )

        assert [c.content for c in chunks] == ["One two. Three four.", "Five", "Five six."]
        filler = chunks[1]
        assert filler.id == "slumber-overlap-0"
        assert filler.label == "slumber-overlap"
        assert filler.metadata["source_type"] == "slumber-overlap"
        assert filler.start == chunks[2].start

    def test_over_budget_buffer_is_token_split(self, tokenizer):
        """Buffered seeds over max_tokens are split by tokens."""
        chunks = SlumberChunker(tokenizer).chunk(
            "Hi. Alpha beta gamma delta epsilon. Yo.", max_tokens=5, min_tokens=3
        )

        assert [c.metadata["source_type"] for c in chunks] == [
            "slumber-token",
            "slumber-token",
            "slumber",
        ]
        assert chunks[0].content == "Hi.\nAlpha beta gamma delta"
        assert chunks[1].content == "epsilon."
        assert chunks[2].content == "Yo."
        assert all(c.label == "slumber" for c in chunks)

    def test_empty_input(self, tokenizer):
        assert SlumberChunker(tokenizer).chunk("   ") == []
