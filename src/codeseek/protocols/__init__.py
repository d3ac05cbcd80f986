"""Protocol definitions for extensible components."""

from codeseek.protocols.chunker import ChunkingStrategy
from codeseek.protocols.collector import FileCollector
from codeseek.protocols.embedder import Vectorizer
from codeseek.protocols.searcher import LiteralSearcher

__all__ = ["ChunkingStrategy", "FileCollector", "LiteralSearcher", "Vectorizer"]
