"""Tests for strategy resolution and dispatch."""

import pytest

from chunksmith.document import ChunkStrategy, chunk_by_strategy
from chunksmith.document.strategies import STRATEGY_CHUNKERS, resolve_strategy


class TestResolveStrategy:
    """Named, auto and unknown strategies."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('{"a": 1}', ChunkStrategy.JSON),
            ("<div>hi</div>", ChunkStrategy.HTML),
            ("\\section{A}\nbody", ChunkStrategy.LATEX),
            ("```python\nx = 1\n```", ChunkStrategy.CODE),
            ("# Heading\nbody", ChunkStrategy.MARKDOWN),
            ("Just some prose.", ChunkStrategy.RECURSIVE),
        ],
    )
    def test_auto_uses_detector(self, text, expected):
        assert resolve_strategy("auto", text) is expected

    def test_named_strategy(self):
        assert resolve_strategy("sentence", "anything") is ChunkStrategy.SENTENCE
        assert resolve_strategy(ChunkStrategy.TOKEN, "anything") is ChunkStrategy.TOKEN

    def test_unknown_strategy_falls_back_to_recursive(self):
        assert resolve_strategy("nonsense", "text") is ChunkStrategy.RECURSIVE

    def test_every_concrete_strategy_has_a_chunker(self):
        concrete = [s for s in ChunkStrategy if s is not ChunkStrategy.AUTO]
        assert sorted(STRATEGY_CHUNKERS) == sorted(concrete)


class TestChunkByStrategy:
    """Dispatch with options."""

    def test_token_strategy(self, tokenizer):
        chunks = chunk_by_strategy("token", "a b c", max_tokens=2, tokenizer=tokenizer)

        assert [c.content for c in chunks] == ["a b", "c"]
        assert [c.id for c in chunks] == ["token-0", "token-1"]

    def test_auto_json(self, tokenizer):
        chunks = chunk_by_strategy(ChunkStrategy.AUTO, '{"k": "v"}', tokenizer=tokenizer)

        assert chunks[0].content == "k: v"
        assert chunks[0].metadata["format"] == "json"

    def test_caller_options_reach_the_chunker(self, tokenizer):
        chunks = chunk_by_strategy(
            "recursive",
            "Body text.",
            tokenizer=tokenizer,
            label="custom",
            source_id="src-1",
        )

        assert chunks[0].label == "custom"
        assert chunks[0].metadata["source_id"] == "src-1"

    def test_unknown_strategy_still_chunks(self, tokenizer):
        chunks = chunk_by_strategy("nonsense", "Some text.", tokenizer=tokenizer)
        assert [c.metadata["source_type"] for c in chunks] == ["paragraph"]
