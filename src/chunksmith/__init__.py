"""Document-to-retrieval-chunk pipeline."""

__version__ = "0.1.0"
