"""Global test configuration for chunksmith tests."""

import pytest

from chunksmith.chunking import code_parsers
from chunksmith.chunking.tokenizer import WhitespaceTokenizer
from chunksmith.core import config


@pytest.fixture
def tokenizer():
    """Deterministic tokenizer: one token per run of non-whitespace."""
    return WhitespaceTokenizer()


@pytest.fixture(autouse=True)
def whitespace_default_tokenizer(monkeypatch):
    """Chunkers built without a tokenizer must not need a tiktoken download."""
    monkeypatch.setattr(config, "SETTINGS", config.Settings(CHUNK_TOKENIZER="whitespace"))


@pytest.fixture(autouse=True)
def isolated_parser_registry(monkeypatch):
    """Registrations made by a test do not leak into the next one."""
    monkeypatch.setattr(code_parsers, "_REGISTRY", dict(code_parsers._REGISTRY))
    monkeypatch.setattr(code_parsers, "_ALIASES", dict(code_parsers._ALIASES))
