"""Import precomputed embedding vectors from CSV into the embeddings table."""

__version__ = "1.0.0"
