"""Tests for the error taxonomy."""

from chunksmith.core.errors import ChunkingError, MissingCollaboratorError


def test_missing_collaborator_error_message():
    """The message names both the chunker and what it is missing."""
    err = MissingCollaboratorError("NeuralChunker", "a boundary detector")

    assert str(err) == "NeuralChunker requires a boundary detector"
    assert err.chunker == "NeuralChunker"
    assert isinstance(err, ChunkingError)
    assert isinstance(err, ValueError)
