"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from codeseek.models import Chunk


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies.

    Chunks are returned without vectors; those depend on the corpus IDF
    and are filled in by the index builder.
    """

    def chunk(self, text: str, relative_path: str) -> list[Chunk]:
        """Split file text into line-range chunks."""
        ...
