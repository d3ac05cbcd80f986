"""Hashing-trick vectorizer with corpus IDF weighting."""

import math
from collections import Counter
from typing import Mapping, Sequence

import numpy as np

from codeseek.config import VECTOR_DIMENSION

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


def fnv1a_32(token: str) -> int:
    """32-bit FNV-1a hash, stable across processes unlike ``hash()``."""
    value = FNV_OFFSET_BASIS
    for char in token:
        value ^= ord(char)
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


class HashingVectorizer:
    """Vectorizer mapping tokens into a fixed number of slots.

    Each distinct token lands in slot ``fnv1a_32(token) % dimension``.
    Distinct tokens may share a slot; there is no vocabulary, so the
    vector size never grows with the corpus.
    """

    DEFAULT_DIMENSION = VECTOR_DIMENSION

    def __init__(self, dimension: int | None = None):
        self._dimension = dimension or self.DEFAULT_DIMENSION

    @property
    def dimension(self) -> int:
        """Return the vector dimension."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Return identifier for the vectorization scheme."""
        return f"hashing-fnv1a-{self._dimension}"

    def slot(self, token: str) -> int:
        return fnv1a_32(token) % self._dimension

    def compute_idf(self, token_lists: Sequence[Sequence[str]]) -> dict[str, float]:
        """Compute smoothed IDF weights over a corpus of token lists.

        Args:
            token_lists: One token list per chunk

        Returns:
            Mapping token -> log((N + 1) / (df + 1)) + 1
        """
        total_documents = len(token_lists)
        if total_documents == 0:
            return {}

        document_frequency: Counter[str] = Counter()
        for tokens in token_lists:
            document_frequency.update(set(tokens))

        return {
            token: math.log((total_documents + 1) / (df + 1)) + 1
            for token, df in document_frequency.items()
        }

    def build_vector(self, tokens: Sequence[str], idf: Mapping[str, float]) -> np.ndarray:
        """Vectorize one token list into a unit-length float32 vector.

        Tokens missing from ``idf`` get weight 1. The zero vector is
        returned unchanged.
        """
        vector = np.zeros(self._dimension, dtype=np.float64)
        for token, count in Counter(tokens).items():
            vector[self.slot(token)] += count * idf.get(token, 1.0)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.astype(np.float32)

    def embed(
        self, token_lists: Sequence[Sequence[str]], idf: Mapping[str, float]
    ) -> np.ndarray:
        """Vectorize a batch of token lists.

        Returns:
            numpy array of shape (len(token_lists), dimension)
        """
        if not token_lists:
            return np.zeros((0, self._dimension), dtype=np.float32)
        return np.vstack([self.build_vector(tokens, idf) for tokens in token_lists])
