"""Utility functions for codeseek."""

from codeseek.utils.binary import is_binary_content, read_text_file
from codeseek.utils.paths import (
    chunk_id,
    language_from_path,
    project_id,
    resolve_workspace,
    to_posix,
)
from codeseek.utils.tokenizer import STOPWORDS, tokenize

__all__ = [
    "STOPWORDS",
    "chunk_id",
    "is_binary_content",
    "language_from_path",
    "project_id",
    "read_text_file",
    "resolve_workspace",
    "to_posix",
    "tokenize",
]
