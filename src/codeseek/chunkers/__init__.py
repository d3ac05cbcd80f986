"""Chunking strategies."""

from codeseek.chunkers.line_chunker import LineChunker

__all__ = ["LineChunker"]
