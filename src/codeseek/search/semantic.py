"""Cosine ranking of index chunks."""

import os

import numpy as np

from codeseek.models import SearchHit, WorkspaceIndex

MAX_SNIPPET_CHARS = 480


def semantic_search(
    index: WorkspaceIndex,
    query_vector: np.ndarray,
    limit: int,
    min_score: float,
) -> list[SearchHit]:
    """Rank chunks by cosine similarity to a unit query vector.

    Chunks scoring below ``min_score`` are dropped; equal scores keep
    chunk order.
    """
    if not index.chunks:
        return []

    scores = index.matrix @ query_vector.astype(np.float32)
    order = np.argsort(-scores, kind="stable")

    hits = []
    for position in order:
        score = float(scores[position])
        if score < min_score:
            break
        chunk = index.chunks[position]
        hits.append(
            SearchHit(
                id=chunk.id,
                source="semantic",
                score=score,
                path=chunk.path,
                absolute_path=os.path.join(index.workspace_path, *chunk.path.split("/")),
                start_line=chunk.start_line,
                end_line=chunk.end_line,
                language=chunk.language,
                snippet=chunk.content[:MAX_SNIPPET_CHARS],
            )
        )
        if len(hits) >= limit:
            break

    return hits
