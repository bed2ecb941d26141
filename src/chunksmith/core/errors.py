"""Error types raised by the chunking pipeline."""


class ChunkingError(Exception):
    """Base class for chunking failures that indicate a caller-side defect."""

    pass


class MissingCollaboratorError(ChunkingError, ValueError):
    """Raised when a chunker is invoked without its required collaborator."""

    def __init__(self, chunker: str, collaborator: str):
        self.chunker = chunker
        self.collaborator = collaborator
        super().__init__(f"{chunker} requires {collaborator}")


class TokenizerLoadError(ChunkingError):
    """Raised when a tiktoken encoding or model cannot be loaded."""

    pass
