from .document import StructuredDocument
from .strategies import ChunkStrategy, chunk_by_strategy

__all__ = ["StructuredDocument", "ChunkStrategy", "chunk_by_strategy"]
