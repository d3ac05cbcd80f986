"""Tokenization shared by chunk indexing and query processing."""

import re

STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "were", "will", "with", "this", "these", "those", "or",
        "if", "else", "then", "return", "const", "let", "var", "function",
        "class", "void",
    }
)

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[_\-/.]")
_TOKEN = re.compile(r"[a-z][a-z0-9]{1,31}")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens.

    camelCase humps and ``_ - / .`` separators become word boundaries,
    tokens are 2-32 alphanumeric characters starting with a letter, and
    stopwords are dropped.
    """
    normalized = _CAMEL_BOUNDARY.sub(r"\1 \2", text)
    normalized = _SEPARATORS.sub(" ", normalized).lower()
    return [token for token in _TOKEN.findall(normalized) if token not in STOPWORDS]
