"""Line-based chunking strategy."""

import re

from codeseek.config import CHUNK_LINE_OVERLAP, MAX_CHUNK_CHARS
from codeseek.models import Chunk
from codeseek.utils import chunk_id, language_from_path, tokenize

_LINE_BREAK = re.compile(r"\r?\n")


class LineChunker:
    """Default chunking: fill up to a character budget, overlap a few lines.

    - Accumulates whole lines until MAX_CHUNK_CHARS is reached
    - Always takes at least one line, so long lines become their own chunk
    - Starts the next chunk CHUNK_LINE_OVERLAP lines before the previous end
    - Drops chunks that produce no tokens
    """

    MAX_CHUNK_CHARS = MAX_CHUNK_CHARS
    CHUNK_LINE_OVERLAP = CHUNK_LINE_OVERLAP

    def __init__(
        self,
        max_chunk_chars: int | None = None,
        line_overlap: int | None = None,
    ):
        self.max_chunk_chars = max_chunk_chars or self.MAX_CHUNK_CHARS
        self.line_overlap = self.CHUNK_LINE_OVERLAP if line_overlap is None else line_overlap

    def chunk(self, text: str, relative_path: str) -> list[Chunk]:
        """Split text into line-range chunks.

        Args:
            text: The file content to chunk
            relative_path: Workspace-relative posix path of the file

        Returns:
            List of Chunk objects (without vectors), in file order
        """
        lines = _LINE_BREAK.split(text)
        language = language_from_path(relative_path)
        chunks: list[Chunk] = []
        start = 0

        while start < len(lines):
            end = self._extend(lines, start)

            content = "\n".join(lines[start:end]).strip()
            tokens = tokenize(content) if content else []
            if tokens:
                # Line numbers are 1-based and inclusive
                start_line, end_line = start + 1, end
                chunks.append(
                    Chunk(
                        id=chunk_id(relative_path, start_line, end_line),
                        path=relative_path,
                        start_line=start_line,
                        end_line=end_line,
                        language=language,
                        content=content,
                        tokens=tokens,
                    )
                )

            if end >= len(lines):
                break
            start = max(end - self.line_overlap, start + 1)

        return chunks

    def _extend(self, lines: list[str], start: int) -> int:
        """Find the exclusive end line of a chunk starting at ``start``."""
        end = start
        char_count = 0

        while end < len(lines):
            next_count = char_count + len(lines[end]) + 1
            if next_count > self.max_chunk_chars and end > start:
                break
            char_count = next_count
            end += 1
            if char_count >= self.max_chunk_chars:
                break

        return end
