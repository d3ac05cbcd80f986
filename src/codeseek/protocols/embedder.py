"""Protocol for token vectorizers."""

from typing import Mapping, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class Vectorizer(Protocol):
    """Protocol for turning token lists into comparable vectors.

    Vectors must be unit length (or zero) so that cosine similarity
    reduces to a dot product.
    """

    @property
    def dimension(self) -> int:
        """Return the vector dimension."""
        ...

    @property
    def model_name(self) -> str:
        """Return identifier for the vectorization scheme."""
        ...

    def compute_idf(self, token_lists: Sequence[Sequence[str]]) -> dict[str, float]:
        """Compute inverse document frequencies over a corpus."""
        ...

    def embed(
        self, token_lists: Sequence[Sequence[str]], idf: Mapping[str, float]
    ) -> np.ndarray:
        """Vectorize a batch of token lists.

        Returns: numpy array of shape (len(token_lists), dimension)
        """
        ...
